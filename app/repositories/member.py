from datetime import datetime

from sqlalchemy import case, update
from sqlalchemy.orm import Session

from app.db.models.member import Member as MemberModel


def get_member_by_id(db: Session, member_id: int) -> MemberModel | None:
    """Get a member by ID."""
    return db.query(MemberModel).filter(MemberModel.id == member_id).first()


def get_member_by_email(db: Session, email: str) -> MemberModel | None:
    """Get a member by email."""
    return db.query(MemberModel).filter(MemberModel.email == email).first()


def create_member(
    db: Session,
    email: str,
    name: str,
    membership_tier: str,
    current_tokens: int,
    last_token_reset: datetime,
) -> MemberModel:
    """Create a new member in the database. Pure data access - no business logic."""
    db_member = MemberModel(
        email=email,
        name=name,
        membership_tier=membership_tier,
        current_tokens=current_tokens,
        last_token_reset=last_token_reset,
    )
    db.add(db_member)
    db.commit()
    db.refresh(db_member)
    return db_member


def try_deduct_tokens(db: Session, member_id: int, tokens: int) -> bool:
    """
    Atomically subtract tokens if the balance covers them.

    The WHERE clause makes the check and the decrement a single statement, so
    two concurrent bookings cannot both spend the same tokens. Does not commit;
    the caller commits together with the booking row.

    Returns:
        True if the balance was decremented, False if it was insufficient.
    """
    result = db.execute(
        update(MemberModel)
        .where(MemberModel.id == member_id, MemberModel.current_tokens >= tokens)
        .values(current_tokens=MemberModel.current_tokens - tokens)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def refund_member_tokens(db: Session, member_id: int, tokens: int, allocation: int) -> bool:
    """
    Add tokens to the stored balance, never above ``allocation``. Does not commit.

    The new balance is computed from the stored value, so a deduction committed
    by another request in the meantime is kept.
    """
    refunded = MemberModel.current_tokens + tokens
    result = db.execute(
        update(MemberModel)
        .where(MemberModel.id == member_id)
        .values(current_tokens=case((refunded > allocation, allocation), else_=refunded))
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def change_member_tier(
    db: Session, member_id: int, membership_tier: str, allocation: int
) -> bool:
    """Set a member's tier and cap the stored balance at ``allocation``. Does not commit."""
    result = db.execute(
        update(MemberModel)
        .where(MemberModel.id == member_id)
        .values(
            membership_tier=membership_tier,
            current_tokens=case(
                (MemberModel.current_tokens > allocation, allocation),
                else_=MemberModel.current_tokens,
            ),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def try_reset_member_tokens(
    db: Session,
    member_id: int,
    allocation: int,
    previous_reset: datetime,
    reset_at: datetime,
) -> bool:
    """
    Apply the monthly reset unless another request already applied it. Does not commit.

    Returns:
        True if this call reset the balance, False if ``last_token_reset`` had moved on.
    """
    result = db.execute(
        update(MemberModel)
        .where(MemberModel.id == member_id, MemberModel.last_token_reset == previous_reset)
        .values(current_tokens=allocation, last_token_reset=reset_at)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
