"""Ticket lifecycle: purchase, lookup, whole-ticket redemption and deletion.

Whole-ticket redemption (``status``) and per-use consumption of the ticket's
code (``uses_remaining``, see ``app.services.redemption``) are independent:
a ticket may be redeemed while its code still has uses, and a code may be
used up while its ticket is still valid. Scanning clients pick one model.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, selectinload

from app.core.errors import AlreadyRedeemed, InvalidInput, NotFound
from app.db.session import store_guard
from app.models import RedeemableCode, Ticket, TicketStatus
from app.models.ticket import utcnow
from app.schemas.ticket import CodeSummary, TicketDetail, TicketOut, TicketValidation
from app.services.qr import QREncoder

logger = logging.getLogger(__name__)


def _require_text(name: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f"{name} is required")
    return value.strip()


def _require_positive_int(name: str, value) -> int:
    # bool is an int subclass; True must not pass as quantity 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInput(f"{name} must be an integer")
    if value <= 0:
        raise InvalidInput(f"{name} must be greater than 0")
    return value


def create_ticket(
    db: Session,
    *,
    buyer_name: str,
    event_name: str,
    quantity: int,
    price: int,
    buyer_email: Optional[str] = None,
) -> Ticket:
    """Insert a ticket and its redeemable code in one transaction.

    Input is checked before the session is touched, so a rejected purchase
    writes nothing.
    """
    buyer_name = _require_text("buyer_name", buyer_name)
    event_name = _require_text("event_name", event_name)
    quantity = _require_positive_int("quantity", quantity)
    price = _require_positive_int("price", price)
    if buyer_email is not None:
        if not isinstance(buyer_email, str):
            raise InvalidInput("buyer_email must be a string")
        buyer_email = buyer_email.strip() or None

    ticket = Ticket(
        id=str(uuid.uuid4()),
        buyer_name=buyer_name,
        buyer_email=buyer_email,
        event_name=event_name,
        created_at=utcnow(),
        status=TicketStatus.VALID.value,
        quantity=quantity,
        price=price,
        total=quantity * price,
    )
    ticket.code = RedeemableCode(id=str(uuid.uuid4()), redeemed=False, uses_remaining=quantity)
    with store_guard(db, "Error creating the ticket"):
        db.add(ticket)
        # ticket and code rows are flushed and committed together
        db.commit()
    logger.info("Ticket %s created for %r: %d x %d = %d (code %s)", ticket.id, event_name, quantity, price, ticket.total, ticket.code.id)
    return ticket


def get_ticket(db: Session, ticket_id: str) -> Ticket:
    with store_guard(db, "Error loading the ticket"):
        ticket = db.execute(
            select(Ticket).options(selectinload(Ticket.code)).where(Ticket.id == ticket_id)
        ).scalar_one_or_none()
    if ticket is None:
        raise NotFound("Ticket not found")
    if ticket.code is None:
        raise NotFound("QR code not found")
    return ticket


def list_tickets(db: Session) -> list[Ticket]:
    with store_guard(db, "Error listing tickets"):
        return list(db.execute(select(Ticket).order_by(Ticket.created_at.desc())).scalars().all())


def validate_ticket(db: Session, ticket_id: str) -> TicketValidation:
    """Report whether a ticket can still be redeemed. Never writes."""
    with store_guard(db, "Error validating the ticket"):
        ticket = db.get(Ticket, ticket_id)
    if ticket is None:
        return TicketValidation(valid=False, message="Ticket not found")
    out = TicketOut.model_validate(ticket)
    if ticket.status == TicketStatus.REDEEMED.value:
        return TicketValidation(valid=False, message="Ticket already redeemed", ticket=out)
    return TicketValidation(valid=True, message="Ticket valid", ticket=out)


def redeem_ticket(db: Session, ticket_id: str) -> None:
    """Flip a ticket from valid to redeemed, exactly once.

    The status check and the write are one conditional UPDATE. When it
    touches no row the ticket is looked up again only to tell NotFound from
    AlreadyRedeemed.
    """
    with store_guard(db, "Error redeeming the ticket"):
        result = db.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id, Ticket.status == TicketStatus.VALID.value)
            .values(status=TicketStatus.REDEEMED.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            db.commit()
            logger.info("Ticket %s redeemed", ticket_id)
            return
        db.rollback()
        exists = db.execute(select(Ticket.id).where(Ticket.id == ticket_id)).first() is not None
    if not exists:
        raise NotFound("Ticket not found")
    raise AlreadyRedeemed("Ticket already redeemed")


def delete_ticket(db: Session, ticket_id: str) -> None:
    """Delete the ticket's code, then the ticket, in a single transaction."""
    with store_guard(db, "Error deleting the ticket"):
        db.execute(
            delete(RedeemableCode)
            .where(RedeemableCode.ticket_id == ticket_id)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(
            delete(Ticket).where(Ticket.id == ticket_id).execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
        else:
            db.commit()
    if result.rowcount == 0:
        raise NotFound("Ticket not found")
    logger.info("Ticket %s deleted with its code", ticket_id)


def describe_ticket(ticket: Ticket, encoder: QREncoder) -> TicketDetail:
    """Ticket fields plus the code's usage summary and rendered QR image."""
    code = ticket.code
    if code is None:
        raise NotFound("QR code not found")
    summary = CodeSummary(
        code_id=code.id,
        qr_image=encoder.to_data_url(code.id),
        uses_remaining=code.uses_remaining,
        uses_consumed=ticket.quantity - code.uses_remaining,
        total_uses=ticket.quantity,
        fully_redeemed=code.uses_remaining == 0,
    )
    return TicketDetail(**TicketOut.model_validate(ticket).model_dump(), code=summary)
