from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_membership_policy, get_token_policy
from app.domain.membership import MembershipPolicy
from app.domain.tokens import TokenPolicy
from app.schemas.booking import YachtBooking, YachtBookingCreate
from app.services.booking import cancel_yacht_booking, create_yacht_booking

router = APIRouter(prefix="/yacht-bookings", tags=["yacht-bookings"])


@router.post("", response_model=YachtBooking, status_code=status.HTTP_201_CREATED)
def create_new_yacht_booking(
    booking_data: YachtBookingCreate,
    db: Session = Depends(get_db),
    membership_policy: MembershipPolicy = Depends(get_membership_policy),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Book a yacht for a member.

    The yacht must be within the member's tier size limit, free for the whole
    window, and the member must have enough tokens (one per started 4-hour block
    by default).
    """
    booking = create_yacht_booking(
        db,
        membership_policy,
        token_policy,
        member_id=booking_data.member_id,
        yacht_id=booking_data.yacht_id,
        start_time=booking_data.start_time,
        end_time=booking_data.end_time,
        guest_count=booking_data.guest_count,
        special_requests=booking_data.special_requests,
    )
    return YachtBooking.model_validate(booking)


@router.post("/{booking_id}/cancel", response_model=YachtBooking)
def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Cancel a booking and refund its tokens.
    """
    return YachtBooking.model_validate(cancel_yacht_booking(db, token_policy, booking_id))
