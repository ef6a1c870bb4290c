from sqlalchemy import String, Integer, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base


class RedeemableCode(Base):
    __tablename__ = "redeemable_codes"
    __table_args__ = (
        CheckConstraint("uses_remaining >= 0", name="ck_redeemable_codes_uses_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(String(36), ForeignKey("tickets.id", ondelete="CASCADE"), unique=True, index=True)
    # Kept for compatibility with older scanners; never updated, uses_remaining is authoritative
    redeemed: Mapped[bool] = mapped_column(Boolean, default=False)
    uses_remaining: Mapped[int] = mapped_column(Integer)

    ticket: Mapped["Ticket"] = relationship(back_populates="code")
