"""Per-use consumption of redeemable codes.

``uses_remaining`` starts at the ticket quantity and only ever goes down by
one, through ``consume_use``. The check and the decrement are a single
conditional UPDATE, so concurrent scans of the same code are serialized by
the database: with one use left exactly one caller gets it.
"""
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.core.errors import Exhausted, InvalidInput, NotFound
from app.db.session import store_guard
from app.models import RedeemableCode, Ticket
from app.schemas.ticket import CodeValidation, TicketOut

logger = logging.getLogger(__name__)


def _require_code_id(code_id) -> str:
    if not isinstance(code_id, str) or not code_id.strip():
        raise InvalidInput("QR code id is required")
    return code_id.strip()


def consume_use(db: Session, code_id: str) -> int:
    """Take one use from the code and return how many are left.

    Raises NotFound for an unknown code and Exhausted when no use is left;
    neither case writes anything.
    """
    code_id = _require_code_id(code_id)
    stmt = (
        update(RedeemableCode)
        .where(RedeemableCode.id == code_id, RedeemableCode.uses_remaining > 0)
        .values(uses_remaining=RedeemableCode.uses_remaining - 1)
        .execution_options(synchronize_session=False)
    )
    with store_guard(db, "Error redeeming the QR code"):
        if db.get_bind().dialect.update_returning:
            row = db.execute(stmt.returning(RedeemableCode.uses_remaining)).first()
            remaining = row[0] if row is not None else None
        else:
            # No RETURNING: the row stays write-locked until commit, so the
            # follow-up read in the same transaction sees our own decrement
            result = db.execute(stmt)
            remaining = None
            if result.rowcount == 1:
                remaining = db.execute(
                    select(RedeemableCode.uses_remaining).where(RedeemableCode.id == code_id)
                ).scalar_one()
        if remaining is not None:
            db.commit()
            logger.info("QR code %s redeemed, %d use(s) remaining", code_id, remaining)
            return remaining
        db.rollback()
        exists = db.execute(select(RedeemableCode.id).where(RedeemableCode.id == code_id)).first() is not None
    if not exists:
        raise NotFound("QR code not found")
    logger.info("QR code %s rejected: no uses remaining", code_id)
    raise Exhausted("QR code has no uses remaining")


def validate_code(db: Session, code_id: str) -> CodeValidation:
    """Pre-flight check for a scanner. Never writes."""
    code_id = _require_code_id(code_id)
    with store_guard(db, "Error validating the QR code"):
        code = db.get(RedeemableCode, code_id)
        ticket = db.get(Ticket, code.ticket_id) if code is not None else None
    if code is None:
        return CodeValidation(valid=False, message="QR code not found", error=NotFound.kind)
    if code.uses_remaining <= 0:
        return CodeValidation(
            valid=False,
            message="QR code has no uses remaining",
            error=Exhausted.kind,
            code_id=code.id,
            uses_remaining=code.uses_remaining,
        )
    return CodeValidation(
        valid=True,
        message=f"QR code valid. Uses remaining: {code.uses_remaining}",
        code_id=code.id,
        uses_remaining=code.uses_remaining,
        ticket=TicketOut.model_validate(ticket) if ticket is not None else None,
    )
