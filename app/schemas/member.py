from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.domain.membership import MembershipTier
from app.domain.tokens import TokenTransactionType


class Member(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    membership_tier: MembershipTier
    current_tokens: int
    last_token_reset: datetime
    created_at: datetime


class MemberCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)
    # Validated by the service layer so unknown tiers surface as UNKNOWN_TIER
    membership_tier: str


class MemberTierUpdate(BaseModel):
    membership_tier: str


class TokenBalance(BaseModel):
    member_id: int
    tier: MembershipTier
    current_tokens: int
    monthly_allocation: int
    tokens_used_this_month: int
    last_reset: datetime


class TokenRefund(BaseModel):
    tokens: int = Field(..., ge=0)


class TokenTransaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    booking_id: int | None = None
    transaction_type: TokenTransactionType
    tokens: int
    description: str
    created_at: datetime
