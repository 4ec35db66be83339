from fastapi import Request

from app.db import SessionLocal
from app.domain.membership import MembershipPolicy
from app.domain.tokens import TokenPolicy


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_membership_policy(request: Request) -> MembershipPolicy:
    """The membership policy built once at startup (see app.main)."""
    return request.app.state.membership_policy


def get_token_policy(request: Request) -> TokenPolicy:
    """The token policy built once at startup (see app.main)."""
    return request.app.state.token_policy
