import logging
from datetime import datetime

from sqlalchemy.orm import Session

import app.repositories.member as member_repo
import app.repositories.token_transaction as transaction_repo
from app.core.clock import utcnow
from app.db.models.member import Member as MemberModel
from app.db.models.token_transaction import TokenTransaction as TokenTransactionModel
from app.domain.tokens import TokenBalance, TokenPolicy, TokenTransactionType
from app.services.member import get_member, member_balance

logger = logging.getLogger(__name__)


def refresh_member_balance(
    db: Session,
    token_policy: TokenPolicy,
    member: MemberModel,
    now: datetime | None = None,
) -> TokenBalance:
    """Apply the monthly reset if one is due, persisting it, and return the balance."""
    now = now or utcnow()
    balance = member_balance(member)
    if not token_policy.should_reset(balance, now):
        return balance

    reset = token_policy.reset_monthly(balance, now)
    applied = member_repo.try_reset_member_tokens(
        db,
        member_id=member.id,
        allocation=reset.current_tokens,
        previous_reset=balance.last_reset,
        reset_at=reset.last_reset,
    )
    if applied:
        transaction_repo.add_transaction(
            db,
            member_id=member.id,
            transaction_type=TokenTransactionType.MONTHLY_RESET.value,
            tokens=reset.current_tokens,
            description=f"Monthly allocation of {reset.current_tokens} tokens ({reset.tier.value} tier)",
        )
    db.commit()
    db.refresh(member)
    if applied:
        logger.info(
            "Reset monthly tokens for member %s to %s", member.id, reset.current_tokens
        )
    return member_balance(member)


def get_token_balance(
    db: Session,
    token_policy: TokenPolicy,
    member_id: int,
    now: datetime | None = None,
) -> TokenBalance:
    """
    Get a member's current token balance.

    Raises:
        NotFoundError: If the member doesn't exist
    """
    member = get_member(db, member_id)
    return refresh_member_balance(db, token_policy, member, now=now)


def refund_tokens(
    db: Session,
    token_policy: TokenPolicy,
    member_id: int,
    tokens: int,
) -> TokenBalance:
    """
    Give tokens back to a member, never above the tier's monthly allocation.

    The stored balance is incremented in place, so bookings paid for while the
    refund is in flight stay paid for.

    Raises:
        NotFoundError: If the member doesn't exist
        InvalidInputError: If tokens is negative
    """
    member = get_member(db, member_id)
    balance = refresh_member_balance(db, token_policy, member)
    expected = token_policy.refund(balance, tokens)

    member_repo.refund_member_tokens(
        db,
        member_id=member.id,
        tokens=tokens,
        allocation=token_policy.monthly_allocation(balance.tier),
    )
    transaction_repo.add_transaction(
        db,
        member_id=member.id,
        transaction_type=TokenTransactionType.REFUND.value,
        tokens=expected.current_tokens - balance.current_tokens,
        description=f"Refund of {tokens} tokens",
    )
    db.commit()
    db.refresh(member)
    refunded = member_balance(member)
    logger.info(
        "Refunded %s tokens to member %s (balance %s -> %s)",
        tokens,
        member.id,
        balance.current_tokens,
        refunded.current_tokens,
    )
    return refunded


def list_token_transactions(db: Session, member_id: int) -> list[TokenTransactionModel]:
    """
    List a member's token ledger, newest first.

    Raises:
        NotFoundError: If the member doesn't exist
    """
    get_member(db, member_id)
    return transaction_repo.get_transactions_by_member_id(db, member_id)
