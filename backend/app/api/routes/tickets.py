from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_qr_encoder
from app.schemas.ticket import (
    MessageOut,
    TicketCreate,
    TicketDetail,
    TicketIdBody,
    TicketOut,
    TicketValidation,
)
from app.services import tickets as ticket_service
from app.services.qr import QREncoder

router = APIRouter()

@router.post("", response_model=TicketDetail, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=TicketDetail, status_code=status.HTTP_201_CREATED)
def create_ticket(payload: TicketCreate, db: Session = Depends(get_db), encoder: QREncoder = Depends(get_qr_encoder)):
    """Sell a ticket. Its single QR code can be scanned `quantity` times."""
    ticket = ticket_service.create_ticket(
        db,
        buyer_name=payload.buyer_name,
        buyer_email=payload.buyer_email,
        event_name=payload.event_name,
        quantity=payload.quantity,
        price=payload.price,
    )
    return ticket_service.describe_ticket(ticket, encoder)

@router.get("", response_model=list[TicketOut])
@router.get("/", response_model=list[TicketOut])
def list_tickets(db: Session = Depends(get_db)):
    return ticket_service.list_tickets(db)

@router.post("/validate", response_model=TicketValidation)
def validate_ticket(body: TicketIdBody, db: Session = Depends(get_db)):
    return ticket_service.validate_ticket(db, body.ticket_id)

@router.post("/redeem", response_model=MessageOut)
def redeem_ticket(body: TicketIdBody, db: Session = Depends(get_db)):
    """Whole-ticket redemption. Does not touch the QR code's use counter."""
    ticket_service.redeem_ticket(db, body.ticket_id)
    return {"message": "Ticket redeemed"}

@router.get("/{ticket_id}", response_model=TicketDetail)
def get_ticket(ticket_id: str, db: Session = Depends(get_db), encoder: QREncoder = Depends(get_qr_encoder)):
    ticket = ticket_service.get_ticket(db, ticket_id)
    return ticket_service.describe_ticket(ticket, encoder)

@router.delete("/{ticket_id}", response_model=MessageOut)
def delete_ticket(ticket_id: str, db: Session = Depends(get_db)):
    ticket_service.delete_ticket(db, ticket_id)
    return {"message": "Ticket deleted"}
