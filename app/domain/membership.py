from __future__ import annotations

import enum
import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from operator import attrgetter
from types import MappingProxyType
from typing import Any, TypeVar

from app.errors import InvalidInputError, UnknownTierError

T = TypeVar("T")

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal(100)


class MembershipTier(str, enum.Enum):
    """Membership levels, declared in benefit order (lowest first)."""

    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER: tuple[MembershipTier, ...] = tuple(MembershipTier)


def parse_tier(value: Any) -> MembershipTier:
    """Validate a tier value coming from outside the domain (requests, database rows).

    Strings are matched case-insensitively because stored records use both
    "gold" and "Gold".
    """
    if isinstance(value, MembershipTier):
        return value
    if isinstance(value, str):
        try:
            return MembershipTier(value.strip().lower())
        except ValueError:
            pass
    raise UnknownTierError(f"Unknown membership tier: {value!r}")


@dataclass(frozen=True, slots=True)
class TierProfile:
    tier: MembershipTier
    name: str
    max_yacht_size: int
    monthly_tokens: int
    concierge_access: bool
    priority_booking: bool
    service_discount_percent: Decimal
    event_discount_percent: Decimal


DEFAULT_TIER_PROFILES: tuple[TierProfile, ...] = (
    TierProfile(
        tier=MembershipTier.BRONZE,
        name="Bronze",
        max_yacht_size=40,
        monthly_tokens=8,
        concierge_access=False,
        priority_booking=False,
        service_discount_percent=Decimal(0),
        event_discount_percent=Decimal(0),
    ),
    TierProfile(
        tier=MembershipTier.SILVER,
        name="Silver",
        max_yacht_size=55,
        monthly_tokens=12,
        concierge_access=True,
        priority_booking=False,
        service_discount_percent=Decimal(5),
        event_discount_percent=Decimal(10),
    ),
    TierProfile(
        tier=MembershipTier.GOLD,
        name="Gold",
        max_yacht_size=70,
        monthly_tokens=16,
        concierge_access=True,
        priority_booking=True,
        service_discount_percent=Decimal(10),
        event_discount_percent=Decimal(15),
    ),
    # 999 ft stands in for "no ceiling" while staying a finite, serializable number.
    TierProfile(
        tier=MembershipTier.PLATINUM,
        name="Platinum",
        max_yacht_size=999,
        monthly_tokens=24,
        concierge_access=True,
        priority_booking=True,
        service_discount_percent=Decimal(15),
        event_discount_percent=Decimal(25),
    ),
)

# Benefit dimensions that must never decrease from one tier to the next.
_MONOTONIC_FIELDS = (
    "max_yacht_size",
    "monthly_tokens",
    "service_discount_percent",
    "event_discount_percent",
)


def _validate_profiles(profiles: Mapping[MembershipTier, TierProfile]) -> None:
    missing = [tier.value for tier in _TIER_ORDER if tier not in profiles]
    if missing:
        raise InvalidInputError(f"Tier table is missing profiles for: {', '.join(missing)}")

    for tier, profile in profiles.items():
        if profile.tier is not tier:
            raise InvalidInputError(
                f"Profile for {tier.value} is declared as {profile.tier.value}"
            )
        if profile.max_yacht_size <= 0:
            raise InvalidInputError(f"{tier.value}: max_yacht_size must be positive")
        if profile.monthly_tokens < 0:
            raise InvalidInputError(f"{tier.value}: monthly_tokens cannot be negative")
        for attr in ("service_discount_percent", "event_discount_percent"):
            percent = getattr(profile, attr)
            if not ZERO <= percent <= HUNDRED:
                raise InvalidInputError(f"{tier.value}: {attr} must be between 0 and 100")

    for lower, higher in zip(_TIER_ORDER, _TIER_ORDER[1:]):
        for attr in _MONOTONIC_FIELDS:
            if getattr(profiles[higher], attr) < getattr(profiles[lower], attr):
                raise InvalidInputError(
                    f"{attr} of {higher.value} must not be lower than {lower.value}"
                )


@dataclass(frozen=True, slots=True)
class TierRegistry:
    """Read-only mapping from tier to its benefit profile.

    Built once from a literal table at process start. The underlying mapping
    is a proxy, so holders of the registry cannot modify it.
    """

    profiles_by_tier: Mapping[MembershipTier, TierProfile] = field(repr=False)

    def __post_init__(self) -> None:
        _validate_profiles(self.profiles_by_tier)
        object.__setattr__(
            self, "profiles_by_tier", MappingProxyType(dict(self.profiles_by_tier))
        )

    @classmethod
    def from_profiles(cls, profiles: Iterable[TierProfile]) -> TierRegistry:
        by_tier: dict[MembershipTier, TierProfile] = {}
        for profile in profiles:
            if profile.tier in by_tier:
                raise InvalidInputError(f"Duplicate profile for tier {profile.tier.value}")
            by_tier[profile.tier] = profile
        return cls(by_tier)

    def get_tier_profile(self, tier: Any) -> TierProfile:
        return self.profiles_by_tier[parse_tier(tier)]

    def profiles(self) -> list[TierProfile]:
        return [self.profiles_by_tier[tier] for tier in _TIER_ORDER]


def default_registry() -> TierRegistry:
    return TierRegistry.from_profiles(DEFAULT_TIER_PROFILES)


def to_decimal(value: Any, name: str) -> Decimal:
    """Convert a numeric input to Decimal, rejecting bools, NaN and infinities."""
    if isinstance(value, bool):
        raise InvalidInputError(f"{name} must be a number, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidInputError(f"{name} must be finite, got {value!r}")
        # repr keeps 19.99 as 19.99 instead of its binary expansion
        value = repr(value)
    if isinstance(value, (int, str, Decimal)):
        try:
            number = Decimal(value)
        except InvalidOperation:
            raise InvalidInputError(f"{name} must be a number, got {value!r}") from None
        if not number.is_finite():
            raise InvalidInputError(f"{name} must be finite, got {value!r}")
        return number
    raise InvalidInputError(f"{name} must be a number, got {value!r}")


def apply_discount(base_price: Any, discount_percent: Decimal) -> Decimal:
    """Discounted price rounded half-to-even to cents, kept within [0, base_price]."""
    base = to_decimal(base_price, "base_price")
    if base < 0:
        raise InvalidInputError(f"base_price cannot be negative, got {base_price!r}")

    adjusted = (base * (1 - discount_percent / HUNDRED)).quantize(
        CENT, rounding=ROUND_HALF_EVEN
    )
    return max(ZERO, min(adjusted, base))


@dataclass(frozen=True, slots=True)
class MembershipPolicy:
    """Tier-gated access and pricing rules for yachts, services and events.

    All methods are pure; the only state is the injected, read-only registry.
    """

    registry: TierRegistry

    def get_tier_profile(self, tier: Any) -> TierProfile:
        return self.registry.get_tier_profile(tier)

    def can_book_yacht(self, tier: Any, yacht_size: Any) -> bool:
        size = to_decimal(yacht_size, "yacht_size")
        if size <= 0:
            raise InvalidInputError(f"yacht_size must be positive, got {yacht_size!r}")
        return size <= self.get_tier_profile(tier).max_yacht_size

    def calculate_service_price(self, base_price: Any, tier: Any) -> Decimal:
        profile = self.get_tier_profile(tier)
        return apply_discount(base_price, profile.service_discount_percent)

    def calculate_event_price(self, base_price: Any, tier: Any) -> Decimal:
        profile = self.get_tier_profile(tier)
        return apply_discount(base_price, profile.event_discount_percent)

    def filter_bookable_yachts(
        self,
        tier: Any,
        yachts: Iterable[T],
        size: Callable[[T], Any] = attrgetter("size"),
    ) -> list[T]:
        """Keep the yachts the tier is allowed to book, preserving order."""
        tier = parse_tier(tier)
        return [yacht for yacht in yachts if self.can_book_yacht(tier, size(yacht))]
