from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from app.domain.membership import MembershipTier


class TierProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tier: MembershipTier
    name: str
    max_yacht_size: int
    monthly_tokens: int
    concierge_access: bool
    priority_booking: bool
    service_discount_percent: Decimal
    event_discount_percent: Decimal


class YachtEligibility(BaseModel):
    tier: MembershipTier
    yacht_size: Decimal
    max_yacht_size: int
    eligible: bool


class PriceAdjustment(BaseModel):
    tier: MembershipTier
    base_price: Decimal
    discount_percent: Decimal
    price: Decimal


class TokenRequirement(BaseModel):
    duration_hours: Decimal
    tokens_required: int
    balance: int | None = None
    sufficient: bool | None = None
