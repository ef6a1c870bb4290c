import enum
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Integer, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; the column stores no zone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TicketStatus(str, enum.Enum):
    VALID = "valid"
    REDEEMED = "redeemed"


class Ticket(Base):
    __tablename__ = "tickets"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_tickets_quantity_positive"),
        CheckConstraint("price > 0", name="ck_tickets_price_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    buyer_name: Mapped[str] = mapped_column(String(255))
    buyer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    event_name: Mapped[str] = mapped_column(String(255), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)
    status: Mapped[str] = mapped_column(String(16), default=TicketStatus.VALID.value)  # valid | redeemed
    quantity: Mapped[int] = mapped_column(Integer)
    price: Mapped[int] = mapped_column(Integer)
    total: Mapped[int] = mapped_column(Integer)

    code: Mapped[Optional["RedeemableCode"]] = relationship(
        back_populates="ticket", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
