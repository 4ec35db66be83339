from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from app.core.clock import utcnow
from app.db.base import Base


class Member(Base):
    __tablename__ = "members"
    __table_args__ = (
        CheckConstraint("current_tokens >= 0", name="ck_members_current_tokens_non_negative"),
        CheckConstraint(
            "membership_tier IN ('bronze', 'silver', 'gold', 'platinum')",
            name="ck_members_membership_tier",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    membership_tier = Column(String(20), nullable=False)
    current_tokens = Column(Integer, nullable=False, default=0)
    last_token_reset = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, nullable=False, default=utcnow)
