from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_membership_policy, get_token_policy
from app.domain.membership import MembershipPolicy, parse_tier
from app.domain.tokens import TokenPolicy
from app.schemas.tier import (
    PriceAdjustment,
    TierProfile,
    TokenRequirement,
    YachtEligibility,
)

router = APIRouter(tags=["membership"])


@router.get("/tiers", response_model=list[TierProfile])
def list_tiers(policy: MembershipPolicy = Depends(get_membership_policy)):
    """
    Get every membership tier's benefits, lowest tier first.
    """
    return [TierProfile.model_validate(p) for p in policy.registry.profiles()]


@router.get("/tiers/{tier}", response_model=TierProfile)
def get_tier(tier: str, policy: MembershipPolicy = Depends(get_membership_policy)):
    """
    Get one tier's benefits. Tier names are case-insensitive.
    """
    return TierProfile.model_validate(policy.get_tier_profile(tier))


@router.get("/policy/yacht-eligibility", response_model=YachtEligibility)
def check_yacht_eligibility(
    tier: str,
    yacht_size: Decimal,
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Check whether a tier may book a yacht of the given size (feet).
    """
    eligible = policy.can_book_yacht(tier, yacht_size)
    profile = policy.get_tier_profile(tier)
    return YachtEligibility(
        tier=profile.tier,
        yacht_size=yacht_size,
        max_yacht_size=profile.max_yacht_size,
        eligible=eligible,
    )


@router.get("/policy/service-price", response_model=PriceAdjustment)
def get_service_price(
    tier: str,
    base_price: Decimal,
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Get the member price of a service for a tier.
    """
    price = policy.calculate_service_price(base_price, tier)
    profile = policy.get_tier_profile(tier)
    return PriceAdjustment(
        tier=profile.tier,
        base_price=base_price,
        discount_percent=profile.service_discount_percent,
        price=price,
    )


@router.get("/policy/event-price", response_model=PriceAdjustment)
def get_event_price(
    tier: str,
    base_price: Decimal,
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Get the member price of an event ticket for a tier.
    """
    price = policy.calculate_event_price(base_price, tier)
    profile = policy.get_tier_profile(tier)
    return PriceAdjustment(
        tier=profile.tier,
        base_price=base_price,
        discount_percent=profile.event_discount_percent,
        price=price,
    )


@router.get("/policy/tokens", response_model=TokenRequirement)
def get_token_requirement(
    duration_hours: Decimal,
    balance: int | None = Query(None, ge=0),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Get how many tokens a booking of the given length costs and, when a
    balance is given, whether it covers the booking.
    """
    tokens = token_policy.calculate_tokens_for_booking(duration_hours)
    sufficient = None
    if balance is not None:
        sufficient = token_policy.has_sufficient_tokens(balance, tokens)
    return TokenRequirement(
        duration_hours=duration_hours,
        tokens_required=tokens,
        balance=balance,
        sufficient=sufficient,
    )
