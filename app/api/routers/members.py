from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_token_policy
from app.domain.tokens import TokenPolicy
from app.schemas.booking import YachtBooking
from app.schemas.member import (
    Member,
    MemberCreate,
    MemberTierUpdate,
    TokenBalance,
    TokenRefund,
    TokenTransaction,
)
from app.services.booking import list_bookings_for_member
from app.services.member import change_member_tier, create_member, get_member
from app.services.tokens import get_token_balance, list_token_transactions, refund_tokens

router = APIRouter(prefix="/members", tags=["members"])


def _token_balance_response(member_id: int, balance, token_policy: TokenPolicy) -> TokenBalance:
    return TokenBalance(
        member_id=member_id,
        tier=balance.tier,
        current_tokens=balance.current_tokens,
        monthly_allocation=token_policy.monthly_allocation(balance.tier),
        tokens_used_this_month=token_policy.tokens_used_this_month(balance),
        last_reset=balance.last_reset,
    )


@router.post("", response_model=Member, status_code=status.HTTP_201_CREATED)
def create_new_member(
    member_data: MemberCreate,
    db: Session = Depends(get_db),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Create a member. The member starts with the tier's full monthly token allocation.
    """
    member = create_member(
        db,
        token_policy,
        email=member_data.email,
        name=member_data.name,
        membership_tier=member_data.membership_tier,
    )
    return Member.model_validate(member)


@router.get("/{member_id}", response_model=Member)
def get_member_by_id(member_id: int, db: Session = Depends(get_db)):
    """
    Get a member by ID.
    """
    return Member.model_validate(get_member(db, member_id))


@router.put("/{member_id}/tier", response_model=Member)
def update_member_tier(
    member_id: int,
    tier_data: MemberTierUpdate,
    db: Session = Depends(get_db),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Change a member's tier. The current balance is capped at the new allocation.
    """
    member = change_member_tier(db, token_policy, member_id, tier_data.membership_tier)
    return Member.model_validate(member)


@router.get("/{member_id}/tokens", response_model=TokenBalance)
def get_member_tokens(
    member_id: int,
    db: Session = Depends(get_db),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Get a member's token balance, applying the monthly reset if it is due.
    """
    balance = get_token_balance(db, token_policy, member_id)
    return _token_balance_response(member_id, balance, token_policy)


@router.post("/{member_id}/tokens/refund", response_model=TokenBalance)
def refund_member_tokens(
    member_id: int,
    refund: TokenRefund,
    db: Session = Depends(get_db),
    token_policy: TokenPolicy = Depends(get_token_policy),
):
    """
    Return tokens to a member. The balance never exceeds the monthly allocation.
    """
    balance = refund_tokens(db, token_policy, member_id, refund.tokens)
    return _token_balance_response(member_id, balance, token_policy)


@router.get("/{member_id}/tokens/transactions", response_model=list[TokenTransaction])
def get_member_token_transactions(member_id: int, db: Session = Depends(get_db)):
    """
    Get a member's token ledger (bookings, refunds, monthly resets), newest first.
    """
    transactions = list_token_transactions(db, member_id)
    return [TokenTransaction.model_validate(t) for t in transactions]


@router.get("/{member_id}/yacht-bookings", response_model=list[YachtBooking])
def get_member_yacht_bookings(member_id: int, db: Session = Depends(get_db)):
    """
    Get a member's yacht bookings, most recent first.
    """
    bookings = list_bookings_for_member(db, member_id)
    return [YachtBooking.model_validate(b) for b in bookings]
