import logging

from sqlalchemy.orm import Session

import app.repositories.member as member_repo
from app.core.clock import utcnow
from app.db.models.member import Member as MemberModel
from app.domain.membership import MembershipTier, parse_tier
from app.domain.tokens import TokenBalance, TokenPolicy
from app.errors import DuplicateResourceError, NotFoundError

logger = logging.getLogger(__name__)


def get_member(db: Session, member_id: int) -> MemberModel:
    """
    Get a member by ID.

    Raises:
        NotFoundError: If the member doesn't exist
    """
    member = member_repo.get_member_by_id(db, member_id)
    if not member:
        raise NotFoundError(f"Member with id {member_id} not found")
    return member


def member_tier(member: MemberModel) -> MembershipTier:
    """The member's tier, validated on the way out of the database."""
    return parse_tier(member.membership_tier)


def member_balance(member: MemberModel) -> TokenBalance:
    return TokenBalance(
        current_tokens=member.current_tokens,
        last_reset=member.last_token_reset,
        tier=member_tier(member),
    )


def create_member(
    db: Session,
    token_policy: TokenPolicy,
    email: str,
    name: str,
    membership_tier: str,
) -> MemberModel:
    """
    Create a member with a full monthly token allocation.

    - Validates the tier (UnknownTierError)
    - Enforces unique email (DuplicateResourceError)
    """
    tier = parse_tier(membership_tier)
    if member_repo.get_member_by_email(db, email):
        raise DuplicateResourceError(f"A member with email {email} already exists")

    balance = token_policy.new_balance(tier, utcnow())
    member = member_repo.create_member(
        db,
        email=email,
        name=name,
        membership_tier=tier.value,
        current_tokens=balance.current_tokens,
        last_token_reset=balance.last_reset,
    )
    logger.info("Created member %s (%s tier)", member.id, tier.value)
    return member


def change_member_tier(
    db: Session,
    token_policy: TokenPolicy,
    member_id: int,
    membership_tier: str,
) -> MemberModel:
    """
    Move a member to another tier.

    The remaining balance is kept but capped at the new tier's allocation; a
    higher allocation applies from the next monthly reset. The cap is applied
    to the stored balance, not to the value read here.
    """
    member = get_member(db, member_id)
    balance = member_balance(member)
    changed = token_policy.change_tier(balance, membership_tier)

    member_repo.change_member_tier(
        db,
        member_id=member.id,
        membership_tier=changed.tier.value,
        allocation=token_policy.monthly_allocation(changed.tier),
    )
    db.commit()
    db.refresh(member)
    logger.info(
        "Member %s changed tier %s -> %s", member.id, balance.tier.value, changed.tier.value
    )
    return member
