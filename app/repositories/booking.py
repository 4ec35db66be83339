from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.db.models.booking import BOOKING_CANCELLED, BOOKING_CONFIRMED
from app.db.models.booking import YachtBooking as YachtBookingModel


def get_booking_by_id(db: Session, booking_id: int) -> YachtBookingModel | None:
    """Get a yacht booking by ID."""
    return db.query(YachtBookingModel).filter(YachtBookingModel.id == booking_id).first()


def get_bookings_by_member_id(db: Session, member_id: int) -> list[YachtBookingModel]:
    """Get a member's yacht bookings, most recent start first."""
    return (
        db.query(YachtBookingModel)
        .filter(YachtBookingModel.member_id == member_id)
        .order_by(YachtBookingModel.start_time.desc(), YachtBookingModel.id.desc())
        .all()
    )


def get_overlapping_confirmed_bookings(
    db: Session,
    yacht_id: int,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: int | None = None,
) -> list[YachtBookingModel]:
    """
    Get confirmed bookings of a yacht whose [start, end) interval overlaps the given one.

    Back-to-back bookings (one ends exactly when the next starts) do not overlap.
    """
    query = db.query(YachtBookingModel).filter(
        YachtBookingModel.yacht_id == yacht_id,
        YachtBookingModel.status == BOOKING_CONFIRMED,
        YachtBookingModel.start_time < end_time,
        YachtBookingModel.end_time > start_time,
    )
    if exclude_booking_id is not None:
        query = query.filter(YachtBookingModel.id != exclude_booking_id)
    return query.all()


def add_booking(
    db: Session,
    member_id: int,
    yacht_id: int,
    start_time: datetime,
    end_time: datetime,
    guest_count: int,
    tokens_used: int,
    special_requests: str | None = None,
) -> YachtBookingModel:
    """Stage a new booking in the session and flush it so it gets an ID. Does not commit."""
    db_booking = YachtBookingModel(
        member_id=member_id,
        yacht_id=yacht_id,
        start_time=start_time,
        end_time=end_time,
        guest_count=guest_count,
        tokens_used=tokens_used,
        special_requests=special_requests,
        status=BOOKING_CONFIRMED,
    )
    db.add(db_booking)
    db.flush()
    return db_booking


def try_cancel_booking(db: Session, booking_id: int) -> bool:
    """
    Move a booking from confirmed to cancelled. Does not commit.

    Returns:
        True if this call cancelled it, False if it was no longer confirmed.
    """
    result = db.execute(
        update(YachtBookingModel)
        .where(
            YachtBookingModel.id == booking_id,
            YachtBookingModel.status == BOOKING_CONFIRMED,
        )
        .values(status=BOOKING_CANCELLED)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
