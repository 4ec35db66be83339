from datetime import datetime

from sqlalchemy.orm import Session

import app.repositories.member as member_repo
from app.db.models.member import Member as MemberModel


# ============================================================================
# CREATE MEMBER TESTS
# ============================================================================


def test_create_member_success(client, db: Session):
    """Test member creation starts with the tier's monthly allocation."""
    response = client.post(
        "/api/v1/members",
        json={"email": "captain@example.com", "name": "Ada Captain", "membership_tier": "gold"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "captain@example.com"
    assert data["name"] == "Ada Captain"
    assert data["membership_tier"] == "gold"
    assert data["current_tokens"] == 16
    assert "id" in data

    member = db.query(MemberModel).filter(MemberModel.id == data["id"]).first()
    assert member.membership_tier == "gold"


def test_create_member_normalizes_tier(client):
    response = client.post(
        "/api/v1/members",
        json={"email": "sailor@example.com", "name": "Sailor", "membership_tier": "Platinum"},
    )
    assert response.status_code == 201
    assert response.json()["membership_tier"] == "platinum"
    assert response.json()["current_tokens"] == 24


def test_create_member_unknown_tier(client):
    response = client.post(
        "/api/v1/members",
        json={"email": "x@example.com", "name": "X", "membership_tier": "mariner_diamond"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "UNKNOWN_TIER"


def test_create_member_duplicate_email(client, make_member):
    make_member(email="dup@example.com")
    response = client.post(
        "/api/v1/members",
        json={"email": "dup@example.com", "name": "Again", "membership_tier": "silver"},
    )
    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_RESOURCE"


def test_create_member_invalid_email(client):
    response = client.post(
        "/api/v1/members",
        json={"email": "not-an-email", "name": "X", "membership_tier": "silver"},
    )
    assert response.status_code == 422


# ============================================================================
# GET / UPDATE MEMBER TESTS
# ============================================================================


def test_get_member(client, make_member):
    member = make_member(tier="silver")
    response = client.get(f"/api/v1/members/{member['id']}")
    assert response.status_code == 200
    assert response.json()["membership_tier"] == "silver"


def test_get_member_not_found(client):
    response = client.get("/api/v1/members/9999")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_downgrade_caps_token_balance(client, make_member):
    member = make_member(tier="platinum")
    response = client.put(
        f"/api/v1/members/{member['id']}/tier", json={"membership_tier": "silver"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["membership_tier"] == "silver"
    assert data["current_tokens"] == 12


def test_upgrade_keeps_token_balance(client, make_member):
    member = make_member(tier="bronze")
    response = client.put(
        f"/api/v1/members/{member['id']}/tier", json={"membership_tier": "gold"}
    )
    assert response.status_code == 200
    assert response.json()["current_tokens"] == 8


def test_change_to_unknown_tier(client, make_member):
    member = make_member(tier="bronze")
    response = client.put(
        f"/api/v1/members/{member['id']}/tier", json={"membership_tier": "emerald"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == "UNKNOWN_TIER"


# ============================================================================
# TOKEN BALANCE TESTS
# ============================================================================


def test_get_token_balance(client, make_member):
    member = make_member(tier="gold")
    response = client.get(f"/api/v1/members/{member['id']}/tokens")
    assert response.status_code == 200
    data = response.json()
    assert data["member_id"] == member["id"]
    assert data["tier"] == "gold"
    assert data["current_tokens"] == 16
    assert data["monthly_allocation"] == 16
    assert data["tokens_used_this_month"] == 0


def test_token_balance_resets_after_a_month(client, db: Session, make_member):
    member = make_member(tier="silver")
    row = db.query(MemberModel).filter(MemberModel.id == member["id"]).first()
    row.current_tokens = 2
    row.last_token_reset = datetime(2020, 1, 15)
    db.commit()

    response = client.get(f"/api/v1/members/{member['id']}/tokens")
    assert response.status_code == 200
    data = response.json()
    assert data["current_tokens"] == 12
    assert data["last_reset"] > "2020-01-15"

    db.refresh(row)
    assert row.current_tokens == 12


def test_token_balance_not_reset_within_month(client, db: Session, make_member):
    member = make_member(tier="silver")
    row = db.query(MemberModel).filter(MemberModel.id == member["id"]).first()
    row.current_tokens = 5
    db.commit()

    response = client.get(f"/api/v1/members/{member['id']}/tokens")
    data = response.json()
    assert data["current_tokens"] == 5
    assert data["tokens_used_this_month"] == 7


def test_refund_tokens_capped(client, db: Session, make_member):
    member = make_member(tier="bronze")
    row = db.query(MemberModel).filter(MemberModel.id == member["id"]).first()
    row.current_tokens = 6
    db.commit()

    response = client.post(f"/api/v1/members/{member['id']}/tokens/refund", json={"tokens": 1})
    assert response.status_code == 200
    assert response.json()["current_tokens"] == 7

    response = client.post(f"/api/v1/members/{member['id']}/tokens/refund", json={"tokens": 10})
    assert response.status_code == 200
    assert response.json()["current_tokens"] == 8


def test_refund_negative_tokens_rejected(client, make_member):
    member = make_member()
    response = client.post(f"/api/v1/members/{member['id']}/tokens/refund", json={"tokens": -1})
    assert response.status_code == 422


def test_tokens_for_missing_member(client):
    response = client.get("/api/v1/members/4242/tokens")
    assert response.status_code == 404


def test_refund_keeps_tokens_spent_concurrently(
    client, other_db: Session, monkeypatch, make_member
):
    member = make_member(tier="silver")
    original = member_repo.refund_member_tokens

    def refund_while_member_books_elsewhere(session, **kwargs):
        assert member_repo.try_deduct_tokens(other_db, member["id"], 5)
        other_db.commit()
        return original(session, **kwargs)

    monkeypatch.setattr(member_repo, "refund_member_tokens", refund_while_member_books_elsewhere)

    response = client.post(f"/api/v1/members/{member['id']}/tokens/refund", json={"tokens": 2})
    assert response.status_code == 200
    assert response.json()["current_tokens"] == 9


def test_tier_change_keeps_tokens_spent_concurrently(
    client, other_db: Session, monkeypatch, make_member
):
    member = make_member(tier="platinum")
    original = member_repo.change_member_tier

    def change_while_member_books_elsewhere(session, **kwargs):
        assert member_repo.try_deduct_tokens(other_db, member["id"], 20)
        other_db.commit()
        return original(session, **kwargs)

    monkeypatch.setattr(member_repo, "change_member_tier", change_while_member_books_elsewhere)

    response = client.put(
        f"/api/v1/members/{member['id']}/tier", json={"membership_tier": "silver"}
    )
    assert response.status_code == 200
    assert response.json()["membership_tier"] == "silver"
    assert response.json()["current_tokens"] == 4


# ============================================================================
# TOKEN LEDGER TESTS
# ============================================================================


def test_new_member_has_empty_ledger(client, make_member):
    member = make_member(tier="gold")
    response = client.get(f"/api/v1/members/{member['id']}/tokens/transactions")
    assert response.status_code == 200
    assert response.json() == []


def test_monthly_reset_is_recorded_once(client, db: Session, make_member):
    member = make_member(tier="silver")
    row = db.query(MemberModel).filter(MemberModel.id == member["id"]).first()
    row.current_tokens = 2
    row.last_token_reset = datetime(2020, 1, 15)
    db.commit()

    client.get(f"/api/v1/members/{member['id']}/tokens")
    client.get(f"/api/v1/members/{member['id']}/tokens")

    response = client.get(f"/api/v1/members/{member['id']}/tokens/transactions")
    data = response.json()
    assert len(data) == 1
    assert data[0]["transaction_type"] == "monthly_reset"
    assert data[0]["tokens"] == 12
    assert data[0]["booking_id"] is None


def test_refund_ledger_records_credited_tokens(client, db: Session, make_member):
    member = make_member(tier="bronze")
    row = db.query(MemberModel).filter(MemberModel.id == member["id"]).first()
    row.current_tokens = 6
    db.commit()

    client.post(f"/api/v1/members/{member['id']}/tokens/refund", json={"tokens": 5})

    data = client.get(f"/api/v1/members/{member['id']}/tokens/transactions").json()
    assert [(t["transaction_type"], t["tokens"]) for t in data] == [("refund", 2)]


def test_ledger_for_missing_member(client):
    response = client.get("/api/v1/members/4242/tokens/transactions")
    assert response.status_code == 404
