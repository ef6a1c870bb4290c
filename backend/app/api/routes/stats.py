from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.ticket import CodeStats, TicketStats
from app.services import stats as stats_service

router = APIRouter()

@router.get("", response_model=TicketStats)
@router.get("/", response_model=TicketStats)
def ticket_stats(db: Session = Depends(get_db)):
    return stats_service.ticket_stats(db)

@router.get("/codes", response_model=CodeStats)
def code_stats(db: Session = Depends(get_db)):
    return stats_service.code_stats(db)
