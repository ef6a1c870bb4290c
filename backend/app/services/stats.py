from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from app.db.session import store_guard
from app.models import RedeemableCode, Ticket, TicketStatus
from app.schemas.ticket import CodeStats, TicketStats


def _sum_if(condition, value):
    return func.coalesce(func.sum(case((condition, value), else_=0)), 0)


def ticket_stats(db: Session) -> TicketStats:
    """Counts, funds and headcount split by status.

    total_* cover every ticket; pending_* (total minus redeemed) is what
    is still valid.
    """
    is_valid = Ticket.status == TicketStatus.VALID.value
    is_redeemed = Ticket.status == TicketStatus.REDEEMED.value
    stmt = select(
        func.count(Ticket.id).label("total_tickets"),
        _sum_if(is_valid, 1).label("valid_tickets"),
        _sum_if(is_redeemed, 1).label("redeemed_tickets"),
        func.coalesce(func.sum(Ticket.total), 0).label("total_funds"),
        func.coalesce(func.sum(Ticket.quantity), 0).label("total_people"),
        _sum_if(is_redeemed, Ticket.total).label("redeemed_funds"),
        _sum_if(is_redeemed, Ticket.quantity).label("redeemed_people"),
    )
    with store_guard(db, "Error loading statistics"):
        row = db.execute(stmt).one()
    data = {k: int(v or 0) for k, v in row._mapping.items()}
    return TicketStats(
        **data,
        pending_funds=data["total_funds"] - data["redeemed_funds"],
        pending_people=data["total_people"] - data["redeemed_people"],
    )


def code_stats(db: Session) -> CodeStats:
    stmt = select(
        func.count(RedeemableCode.id).label("total_codes"),
        func.coalesce(func.sum(RedeemableCode.uses_remaining), 0).label("total_uses_remaining"),
        _sum_if(RedeemableCode.uses_remaining > 0, 1).label("active_codes"),
        _sum_if(RedeemableCode.uses_remaining == 0, 1).label("fully_used_codes"),
    )
    with store_guard(db, "Error loading QR code statistics"):
        row = db.execute(stmt).one()
    return CodeStats(**{k: int(v or 0) for k, v in row._mapping.items()})
