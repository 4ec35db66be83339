from decimal import Decimal

import pytest


@pytest.fixture(scope="function")
def fleet(make_yacht):
    """Yachts of 35, 50, 65 and 120 ft plus an unavailable 30 ft yacht."""
    return {
        "small": make_yacht(35, location="Miami Marina"),
        "medium": make_yacht(50, location="Fort Lauderdale"),
        "large": make_yacht(65, location="Miami Marina"),
        "superyacht": make_yacht(120, location="Miami Marina"),
        "docked": make_yacht(30, is_available=False),
    }


@pytest.fixture(scope="function")
def service(client):
    response = client.post(
        "/api/v1/services",
        json={
            "name": "Private Chef",
            "category": "culinary",
            "price_per_session": "250.00",
            "duration_minutes": 180,
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture(scope="function")
def event(client):
    response = client.post(
        "/api/v1/events",
        json={
            "title": "Sunset Regatta",
            "location": "Key Biscayne",
            "start_time": "2026-11-20T17:00:00",
            "end_time": "2026-11-20T21:00:00",
            "capacity": 40,
            "ticket_price": "120.00",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


# ============================================================================
# YACHTS
# ============================================================================


def test_create_yacht_rejects_non_positive_size(client):
    response = client.post(
        "/api/v1/yachts",
        json={"name": "Dinghy", "location": "Miami", "size": 0, "capacity": 2},
    )
    assert response.status_code == 422


def test_list_all_yachts_without_member(client, fleet):
    response = client.get("/api/v1/yachts")
    assert response.status_code == 200
    assert len(response.json()) == 5


def test_bronze_member_sees_small_available_yachts(client, fleet, make_member):
    member = make_member(tier="bronze")
    response = client.get("/api/v1/yachts", params={"member_id": member["id"]})
    assert response.status_code == 200
    assert [y["id"] for y in response.json()] == [fleet["small"]["id"]]


def test_gold_member_sees_up_to_seventy_feet(client, fleet, make_member):
    member = make_member(tier="gold")
    response = client.get("/api/v1/yachts", params={"member_id": member["id"]})
    sizes = [y["size"] for y in response.json()]
    assert sizes == [35, 50, 65]


def test_platinum_member_sees_whole_available_fleet(client, fleet, make_member):
    member = make_member(tier="platinum")
    response = client.get("/api/v1/yachts", params={"member_id": member["id"]})
    sizes = [y["size"] for y in response.json()]
    assert sizes == [35, 50, 65, 120]


def test_member_filter_combines_with_max_size_and_location(client, fleet, make_member):
    member = make_member(tier="platinum")
    response = client.get(
        "/api/v1/yachts",
        params={"member_id": member["id"], "max_size": 100, "location": "miami marina"},
    )
    sizes = [y["size"] for y in response.json()]
    assert sizes == [35, 65]


def test_list_yachts_for_missing_member(client, fleet):
    response = client.get("/api/v1/yachts", params={"member_id": 999})
    assert response.status_code == 404


def test_get_yacht_not_found(client):
    response = client.get("/api/v1/yachts/123")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


# ============================================================================
# SERVICES
# ============================================================================


def test_services_without_member_have_no_member_price(client, service):
    response = client.get("/api/v1/services")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["member_price"] is None
    assert Decimal(data[0]["price_per_session"]) == Decimal("250.00")


def test_services_carry_member_price(client, service, make_member):
    member = make_member(tier="silver")
    response = client.get("/api/v1/services", params={"member_id": member["id"]})
    data = response.json()
    assert Decimal(data[0]["member_price"]) == Decimal("237.50")


def test_service_quote(client, service, make_member):
    member = make_member(tier="platinum")
    response = client.get(
        f"/api/v1/services/{service['id']}/quote", params={"member_id": member["id"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["tier"] == "platinum"
    assert Decimal(data["base_price"]) == Decimal("250.00")
    assert Decimal(data["discount_percent"]) == 15
    assert Decimal(data["unit_price"]) == Decimal("212.50")
    assert data["quantity"] == 1
    assert data["amount_minor_units"] == 21250


def test_service_quote_unknown_service(client, make_member):
    member = make_member()
    response = client.get("/api/v1/services/77/quote", params={"member_id": member["id"]})
    assert response.status_code == 404


def test_create_service_rejects_negative_price(client):
    response = client.post(
        "/api/v1/services",
        json={"name": "Bad", "category": "misc", "price_per_session": "-1.00"},
    )
    assert response.status_code == 422


# ============================================================================
# EVENTS
# ============================================================================


def test_create_event_end_before_start(client):
    response = client.post(
        "/api/v1/events",
        json={
            "title": "Backwards",
            "location": "Harbor",
            "start_time": "2026-11-20T21:00:00",
            "end_time": "2026-11-20T17:00:00",
            "capacity": 10,
            "ticket_price": "10.00",
        },
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_events_carry_member_price(client, event, make_member):
    member = make_member(tier="gold")
    response = client.get("/api/v1/events", params={"member_id": member["id"]})
    data = response.json()
    assert len(data) == 1
    assert Decimal(data[0]["member_price"]) == Decimal("102.00")


def test_event_quote_for_several_tickets(client, event, make_member):
    member = make_member(tier="silver")
    response = client.get(
        f"/api/v1/events/{event['id']}/quote",
        params={"member_id": member["id"], "ticket_quantity": 3},
    )
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["unit_price"]) == Decimal("108.00")
    assert Decimal(data["total"]) == Decimal("324.00")
    assert data["amount_minor_units"] == 32400


def test_event_quote_over_capacity(client, event, make_member):
    member = make_member()
    response = client.get(
        f"/api/v1/events/{event['id']}/quote",
        params={"member_id": member["id"], "ticket_quantity": 41},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_event_quote_requires_positive_quantity(client, event, make_member):
    member = make_member()
    response = client.get(
        f"/api/v1/events/{event['id']}/quote",
        params={"member_id": member["id"], "ticket_quantity": 0},
    )
    assert response.status_code == 422


def test_members_do_not_see_unavailable_services(client, service, make_member):
    response = client.post(
        "/api/v1/services",
        json={
            "name": "Helicopter Transfer",
            "category": "transport",
            "price_per_session": "900.00",
            "is_available": False,
        },
    )
    assert response.status_code == 201, response.text
    member = make_member(tier="gold")

    listed = client.get("/api/v1/services", params={"member_id": member["id"]}).json()
    assert [s["id"] for s in listed] == [service["id"]]

    # Without a member the full catalog is listed
    assert len(client.get("/api/v1/services").json()) == 2
