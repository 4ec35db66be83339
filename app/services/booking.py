import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

import app.repositories.booking as booking_repo
import app.repositories.catalog as catalog_repo
import app.repositories.member as member_repo
import app.repositories.token_transaction as transaction_repo
from app.core.clock import to_naive_utc
from app.db.models.booking import BOOKING_CANCELLED
from app.db.models.booking import YachtBooking as YachtBookingModel
from app.domain.membership import MembershipPolicy
from app.domain.tokens import TokenPolicy, TokenTransactionType
from app.errors import (
    BookingConflictError,
    DomainValidationError,
    InsufficientTokensError,
    NotFoundError,
    TierLimitError,
)
from app.services.member import get_member, member_balance
from app.services.tokens import refresh_member_balance

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = Decimal(3600)
SLOT_TAKEN = "Yacht is not available for the selected dates. Please choose different dates."


def _duration_hours(start_time: datetime, end_time: datetime) -> Decimal:
    return Decimal(str((end_time - start_time).total_seconds())) / SECONDS_PER_HOUR


def list_bookings_for_member(db: Session, member_id: int) -> list[YachtBookingModel]:
    """
    List a member's yacht bookings.

    Raises:
        NotFoundError: If the member doesn't exist
    """
    get_member(db, member_id)
    return booking_repo.get_bookings_by_member_id(db, member_id)


def create_yacht_booking(
    db: Session,
    membership_policy: MembershipPolicy,
    token_policy: TokenPolicy,
    member_id: int,
    yacht_id: int,
    start_time: datetime,
    end_time: datetime,
    guest_count: int,
    special_requests: str | None = None,
) -> YachtBookingModel:
    """
    Book a yacht for a member, paying with monthly tokens.

    - Validates the time window and guest count
    - Validates the member's tier allows the yacht's size
    - Rejects overlaps with confirmed bookings of the same yacht
    - Deducts tokens atomically and creates the booking in one commit

    The yacht row is locked for the rest of the transaction and the overlap
    check is repeated once the new row is flushed, so two requests for the same
    slot cannot both be confirmed.

    Raises:
        NotFoundError: If the member or yacht doesn't exist
        DomainValidationError: Bad time window, unavailable yacht, too many guests
        TierLimitError: If the yacht is larger than the tier allows
        BookingConflictError: If the yacht is already booked in that window
        InsufficientTokensError: If the balance doesn't cover the booking
    """
    start_time = to_naive_utc(start_time)
    end_time = to_naive_utc(end_time)
    if end_time <= start_time:
        raise DomainValidationError(
            f"End time ({end_time}) must be after start time ({start_time})"
        )

    member = get_member(db, member_id)
    # May commit a monthly reset, so it runs before the yacht lock is taken
    balance = refresh_member_balance(db, token_policy, member)

    yacht = catalog_repo.get_yacht_by_id(db, yacht_id, for_update=True)
    if not yacht:
        raise NotFoundError(f"Yacht with id {yacht_id} not found")
    if not yacht.is_available:
        raise DomainValidationError(f"Yacht {yacht.name} is not available for booking")

    tier = balance.tier
    if not membership_policy.can_book_yacht(tier, yacht.size):
        limit = membership_policy.get_tier_profile(tier).max_yacht_size
        logger.warning(
            "Member %s (%s) rejected for yacht %s: %sft exceeds %sft",
            member.id,
            tier.value,
            yacht.id,
            yacht.size,
            limit,
        )
        raise TierLimitError(
            f"Yacht size exceeds your membership tier limit of {limit}ft"
        )

    if guest_count > yacht.capacity:
        raise DomainValidationError(
            f"Guest count {guest_count} exceeds yacht capacity of {yacht.capacity}"
        )

    if booking_repo.get_overlapping_confirmed_bookings(db, yacht.id, start_time, end_time):
        raise BookingConflictError(SLOT_TAKEN)

    tokens = token_policy.calculate_tokens_for_booking(_duration_hours(start_time, end_time))
    token_policy.deduct(balance, tokens)

    # The check above works on a snapshot; this conditional UPDATE is what
    # guarantees concurrent bookings cannot overdraw.
    if not member_repo.try_deduct_tokens(db, member.id, tokens):
        db.rollback()
        raise InsufficientTokensError(
            f"Booking requires {tokens} tokens but the balance no longer covers it"
        )

    booking = booking_repo.add_booking(
        db,
        member_id=member.id,
        yacht_id=yacht.id,
        start_time=start_time,
        end_time=end_time,
        guest_count=guest_count,
        tokens_used=tokens,
        special_requests=special_requests,
    )
    if booking_repo.get_overlapping_confirmed_bookings(
        db, yacht.id, start_time, end_time, exclude_booking_id=booking.id
    ):
        db.rollback()
        logger.warning(
            "Member %s lost yacht %s to a concurrent booking for %s - %s",
            member_id,
            yacht_id,
            start_time,
            end_time,
        )
        raise BookingConflictError(SLOT_TAKEN)

    transaction_repo.add_transaction(
        db,
        member_id=member.id,
        transaction_type=TokenTransactionType.BOOKING.value,
        tokens=tokens,
        description=f"Yacht booking {booking.id}: {yacht.name}",
        booking_id=booking.id,
    )
    db.commit()
    db.refresh(booking)
    logger.info(
        "Member %s booked yacht %s for %s tokens (booking %s)",
        member.id,
        yacht.id,
        tokens,
        booking.id,
    )
    return booking


def cancel_yacht_booking(
    db: Session, token_policy: TokenPolicy, booking_id: int
) -> YachtBookingModel:
    """
    Cancel a confirmed booking and refund its tokens (capped at the monthly allocation).

    Raises:
        NotFoundError: If the booking doesn't exist
        DomainValidationError: If the booking is already cancelled
    """
    booking = booking_repo.get_booking_by_id(db, booking_id)
    if not booking:
        raise NotFoundError(f"Booking with id {booking_id} not found")
    if booking.status == BOOKING_CANCELLED:
        raise DomainValidationError("Booking is already cancelled")

    member = get_member(db, booking.member_id)
    if not booking_repo.try_cancel_booking(db, booking.id):
        db.rollback()
        raise DomainValidationError("Booking is already cancelled")

    balance = member_balance(member)
    expected = token_policy.refund(balance, booking.tokens_used)
    member_repo.refund_member_tokens(
        db,
        member_id=member.id,
        tokens=booking.tokens_used,
        allocation=token_policy.monthly_allocation(balance.tier),
    )
    transaction_repo.add_transaction(
        db,
        member_id=member.id,
        transaction_type=TokenTransactionType.REFUND.value,
        tokens=expected.current_tokens - balance.current_tokens,
        description=f"Refund for cancelled yacht booking {booking.id}",
        booking_id=booking.id,
    )
    db.commit()
    db.refresh(booking)
    db.refresh(member)
    logger.info(
        "Cancelled booking %s; member %s balance now %s",
        booking.id,
        member.id,
        member.current_tokens,
    )
    return booking
