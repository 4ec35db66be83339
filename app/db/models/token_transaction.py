from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.core.clock import utcnow
from app.db.base import Base


class TokenTransaction(Base):
    """One entry in a member's token ledger: a booking, a refund or a monthly reset."""

    __tablename__ = "token_transactions"
    __table_args__ = (
        CheckConstraint("tokens >= 0", name="ck_token_transactions_tokens_non_negative"),
        CheckConstraint(
            "transaction_type IN ('booking', 'refund', 'monthly_reset')",
            name="ck_token_transactions_type",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_id = Column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("yacht_bookings.id"), nullable=True)
    transaction_type = Column(String(20), nullable=False)
    tokens = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    member = relationship("Member", backref="token_transactions")
