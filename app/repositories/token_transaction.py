from sqlalchemy.orm import Session

from app.db.models.token_transaction import TokenTransaction as TokenTransactionModel


def get_transactions_by_member_id(db: Session, member_id: int) -> list[TokenTransactionModel]:
    """Get a member's token ledger, newest entry first."""
    return (
        db.query(TokenTransactionModel)
        .filter(TokenTransactionModel.member_id == member_id)
        .order_by(TokenTransactionModel.created_at.desc(), TokenTransactionModel.id.desc())
        .all()
    )


def add_transaction(
    db: Session,
    member_id: int,
    transaction_type: str,
    tokens: int,
    description: str,
    booking_id: int | None = None,
) -> TokenTransactionModel:
    """Stage a ledger entry in the session. Does not commit."""
    db_transaction = TokenTransactionModel(
        member_id=member_id,
        booking_id=booking_id,
        transaction_type=transaction_type,
        tokens=tokens,
        description=description,
    )
    db.add(db_transaction)
    return db_transaction
