from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator


class TicketCreate(BaseModel):
    buyer_name: str = Field(..., min_length=1, max_length=255)
    buyer_email: Optional[EmailStr] = None
    event_name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., gt=0, description="Number of admissions; also the number of QR uses")
    price: int = Field(..., gt=0, description="Unit price")

    @field_validator("buyer_name", "event_name")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("buyer_email", mode="before")
    @classmethod
    def _empty_email_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class TicketOut(BaseModel):
    id: str
    buyer_name: str
    buyer_email: Optional[str]
    event_name: str
    created_at: datetime
    status: str
    quantity: int
    price: int
    total: int

    class Config:
        from_attributes = True


class CodeSummary(BaseModel):
    code_id: str
    qr_image: str
    uses_remaining: int
    uses_consumed: int
    total_uses: int
    fully_redeemed: bool


class TicketDetail(TicketOut):
    code: CodeSummary


class TicketIdBody(BaseModel):
    ticket_id: str = Field(..., min_length=1)


class CodeIdBody(BaseModel):
    # 'qr_id' is what older scanning clients send
    code_id: str = Field(..., min_length=1, validation_alias=AliasChoices("code_id", "qr_id"))


class TicketValidation(BaseModel):
    valid: bool
    message: str
    ticket: Optional[TicketOut] = None


class CodeValidation(BaseModel):
    valid: bool
    message: str
    error: Optional[str] = None
    code_id: Optional[str] = None
    uses_remaining: Optional[int] = None
    ticket: Optional[TicketOut] = None


class ConsumeResult(BaseModel):
    message: str
    uses_remaining: int


class MessageOut(BaseModel):
    message: str


class TicketStats(BaseModel):
    total_tickets: int = 0
    valid_tickets: int = 0
    redeemed_tickets: int = 0
    total_funds: int = 0
    total_people: int = 0
    redeemed_funds: int = 0
    redeemed_people: int = 0
    pending_funds: int = 0
    pending_people: int = 0


class CodeStats(BaseModel):
    total_codes: int = 0
    total_uses_remaining: int = 0
    active_codes: int = 0
    fully_used_codes: int = 0
