from app.models.base import Base
from app.models.ticket import Ticket, TicketStatus
from app.models.redeemable_code import RedeemableCode

__all__ = ["Base", "Ticket", "TicketStatus", "RedeemableCode"]
