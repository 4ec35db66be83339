from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base import Base

BOOKING_CONFIRMED = "confirmed"
BOOKING_CANCELLED = "cancelled"


class YachtBooking(Base):
    __tablename__ = "yacht_bookings"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_yacht_bookings_time_order"),
        CheckConstraint("tokens_used >= 0", name="ck_yacht_bookings_tokens_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    yacht_id = Column(Integer, ForeignKey("yachts.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    guest_count = Column(Integer, nullable=False)
    special_requests = Column(Text, nullable=True)
    tokens_used = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=BOOKING_CONFIRMED)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    member = relationship("Member", backref="yacht_bookings")
    yacht = relationship("Yacht", backref="bookings")
