from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any

from app.domain.membership import MembershipTier, TierRegistry, parse_tier, to_decimal
from app.errors import InsufficientTokensError, InvalidInputError

DEFAULT_HOURS_PER_TOKEN = 4


class TokenTransactionType(str, Enum):
    """Kinds of entries in a member's token ledger."""

    BOOKING = "booking"
    REFUND = "refund"
    MONTHLY_RESET = "monthly_reset"


@dataclass(frozen=True, slots=True)
class TokenBalance:
    """Snapshot of a member's monthly yacht-booking budget.

    The database is the system of record; these values are copies and every
    operation below returns a new snapshot instead of mutating one.
    """

    current_tokens: int
    last_reset: datetime
    tier: MembershipTier


def _months_between(earlier: datetime, later: datetime) -> int:
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def _token_count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be a whole number of tokens, got {value!r}")
    if value < 0:
        raise InvalidInputError(f"{name} cannot be negative, got {value!r}")
    return value


@dataclass(frozen=True, slots=True)
class TokenPolicy:
    """Converts booking durations to tokens and manages monthly balances."""

    registry: TierRegistry
    hours_per_token: int = DEFAULT_HOURS_PER_TOKEN

    def __post_init__(self) -> None:
        if self.hours_per_token <= 0:
            raise InvalidInputError("hours_per_token must be positive")

    def calculate_tokens_for_booking(self, duration_hours: Any) -> int:
        """One token per started block of ``hours_per_token`` hours."""
        duration = to_decimal(duration_hours, "duration_hours")
        if duration <= 0:
            raise InvalidInputError(f"duration_hours must be positive, got {duration_hours!r}")
        return math.ceil(duration / self.hours_per_token)

    @staticmethod
    def has_sufficient_tokens(balance: int, tokens_required: int) -> bool:
        return balance >= tokens_required

    def monthly_allocation(self, tier: Any) -> int:
        return self.registry.get_tier_profile(tier).monthly_tokens

    def new_balance(self, tier: Any, now: datetime) -> TokenBalance:
        tier = parse_tier(tier)
        return TokenBalance(
            current_tokens=self.monthly_allocation(tier), last_reset=now, tier=tier
        )

    @staticmethod
    def should_reset(balance: TokenBalance, now: datetime) -> bool:
        # Calendar months: a reset on Jan 31 is due again on Feb 1.
        return _months_between(balance.last_reset, now) >= 1

    def reset_monthly(self, balance: TokenBalance, now: datetime) -> TokenBalance:
        return replace(
            balance,
            current_tokens=self.monthly_allocation(balance.tier),
            last_reset=now,
        )

    def deduct(self, balance: TokenBalance, tokens: int) -> TokenBalance:
        tokens = _token_count(tokens, "tokens")
        if not self.has_sufficient_tokens(balance.current_tokens, tokens):
            raise InsufficientTokensError(
                f"Booking requires {tokens} tokens but only {balance.current_tokens} remain"
            )
        return replace(balance, current_tokens=balance.current_tokens - tokens)

    def refund(self, balance: TokenBalance, tokens: int) -> TokenBalance:
        tokens = _token_count(tokens, "tokens")
        allocation = self.monthly_allocation(balance.tier)
        return replace(
            balance,
            current_tokens=min(balance.current_tokens + tokens, allocation),
        )

    def change_tier(self, balance: TokenBalance, tier: Any) -> TokenBalance:
        """Move a balance to another tier, capping it at the new allocation."""
        tier = parse_tier(tier)
        return replace(
            balance,
            tier=tier,
            current_tokens=min(balance.current_tokens, self.monthly_allocation(tier)),
        )

    def tokens_used_this_month(self, balance: TokenBalance) -> int:
        return max(0, self.monthly_allocation(balance.tier) - balance.current_tokens)
