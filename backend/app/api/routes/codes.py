from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.ticket import CodeIdBody, CodeValidation, ConsumeResult
from app.services import redemption, stats as stats_service

router = APIRouter()

@router.post("/redeem", response_model=ConsumeResult)
def consume_code(body: CodeIdBody, db: Session = Depends(get_db)):
    """Use up one admission from the code. 409 once no uses are left."""
    remaining = redemption.consume_use(db, body.code_id)
    return {"message": f"QR code redeemed. Uses remaining: {remaining}", "uses_remaining": remaining}

@router.post("/validate", response_model=CodeValidation)
def validate_code(body: CodeIdBody, db: Session = Depends(get_db)):
    return redemption.validate_code(db, body.code_id)


# Paths used by the first scanner app; same handlers, original field names for stats
legacy_router = APIRouter()

class LegacyQRStats(BaseModel):
    total_qrs: int
    total_uses_remaining: int
    active_qrs: int
    fully_used_qrs: int

legacy_router.add_api_route("/qrs/redeem", consume_code, methods=["POST"], response_model=ConsumeResult)
legacy_router.add_api_route("/qrs/validate", validate_code, methods=["POST"], response_model=CodeValidation)

@legacy_router.get("/qr-stats", response_model=LegacyQRStats)
def legacy_qr_stats(db: Session = Depends(get_db)):
    s = stats_service.code_stats(db)
    return {
        "total_qrs": s.total_codes,
        "total_uses_remaining": s.total_uses_remaining,
        "active_qrs": s.active_codes,
        "fully_used_qrs": s.fully_used_codes,
    }
