from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

import app.repositories.catalog as catalog_repo
from app.core.clock import to_naive_utc
from app.db.models.catalog import Event as EventModel
from app.db.models.catalog import Service as ServiceModel
from app.db.models.catalog import Yacht as YachtModel
from app.domain.membership import MembershipPolicy, MembershipTier
from app.errors import DomainValidationError, NotFoundError
from app.services.member import get_member, member_tier


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """What a member pays for a service session or a batch of event tickets."""

    item_id: int
    tier: MembershipTier
    base_price: Decimal
    discount_percent: Decimal
    unit_price: Decimal
    quantity: int
    total: Decimal

    @property
    def amount_minor_units(self) -> int:
        # total is already quantized to cents
        return int(self.total * 100)


def _tier_for(db: Session, member_id: int | None) -> MembershipTier | None:
    if member_id is None:
        return None
    return member_tier(get_member(db, member_id))


def list_yachts_for_member(
    db: Session,
    policy: MembershipPolicy,
    member_id: int | None = None,
    max_size: int | None = None,
    location: str | None = None,
) -> list[YachtModel]:
    """
    List yachts, restricted to what the member may book when a member is given.

    - Without member: all yachts matching the filters
    - With member: only available yachts within the tier's size ceiling
    """
    tier = _tier_for(db, member_id)
    if tier is None:
        return catalog_repo.get_yachts(db, max_size=max_size, location=location)

    ceiling = policy.get_tier_profile(tier).max_yacht_size
    size_limit = ceiling if max_size is None else min(max_size, ceiling)
    yachts = catalog_repo.get_yachts(
        db, available=True, max_size=size_limit, location=location
    )
    return policy.filter_bookable_yachts(tier, yachts)


def list_services_for_member(
    db: Session,
    policy: MembershipPolicy,
    member_id: int | None = None,
    category: str | None = None,
) -> list[tuple[ServiceModel, Decimal | None]]:
    """
    List services paired with the member's price (None when no member is given).

    With a member only available services are listed.
    """
    tier = _tier_for(db, member_id)
    if tier is None:
        return [(service, None) for service in catalog_repo.get_services(db, category=category)]
    services = catalog_repo.get_services(db, category=category, available=True)
    return [
        (service, policy.calculate_service_price(service.price_per_session, tier))
        for service in services
    ]


def list_events_for_member(
    db: Session,
    policy: MembershipPolicy,
    member_id: int | None = None,
) -> list[tuple[EventModel, Decimal | None]]:
    """List active events paired with the member's ticket price (None when no member is given)."""
    tier = _tier_for(db, member_id)
    events = catalog_repo.get_events(db, active=True)
    if tier is None:
        return [(event, None) for event in events]
    return [
        (event, policy.calculate_event_price(event.ticket_price, tier)) for event in events
    ]


def quote_service(
    db: Session, policy: MembershipPolicy, service_id: int, member_id: int
) -> PriceQuote:
    """
    Price one session of a service for a member.

    Raises:
        NotFoundError: If the service or member doesn't exist
    """
    service = catalog_repo.get_service_by_id(db, service_id)
    if not service:
        raise NotFoundError(f"Service with id {service_id} not found")
    tier = member_tier(get_member(db, member_id))

    unit_price = policy.calculate_service_price(service.price_per_session, tier)
    return PriceQuote(
        item_id=service.id,
        tier=tier,
        base_price=Decimal(service.price_per_session),
        discount_percent=policy.get_tier_profile(tier).service_discount_percent,
        unit_price=unit_price,
        quantity=1,
        total=unit_price,
    )


def quote_event(
    db: Session,
    policy: MembershipPolicy,
    event_id: int,
    member_id: int,
    ticket_quantity: int = 1,
) -> PriceQuote:
    """
    Price event tickets for a member. The discount applies per ticket.

    Raises:
        NotFoundError: If the event or member doesn't exist
        DomainValidationError: If the quantity exceeds the event capacity
    """
    event = catalog_repo.get_event_by_id(db, event_id)
    if not event:
        raise NotFoundError(f"Event with id {event_id} not found")
    if ticket_quantity > event.capacity:
        raise DomainValidationError(
            f"Cannot buy {ticket_quantity} tickets; event capacity is {event.capacity}"
        )
    tier = member_tier(get_member(db, member_id))

    unit_price = policy.calculate_event_price(event.ticket_price, tier)
    return PriceQuote(
        item_id=event.id,
        tier=tier,
        base_price=Decimal(event.ticket_price),
        discount_percent=policy.get_tier_profile(tier).event_discount_percent,
        unit_price=unit_price,
        quantity=ticket_quantity,
        total=unit_price * ticket_quantity,
    )


def create_event(
    db: Session,
    title: str,
    location: str,
    start_time: datetime,
    end_time: datetime,
    capacity: int,
    ticket_price: Decimal,
    description: str | None = None,
) -> EventModel:
    """
    Create an event.

    Raises:
        DomainValidationError: If the event ends before it starts
    """
    start_time = to_naive_utc(start_time)
    end_time = to_naive_utc(end_time)
    if end_time <= start_time:
        raise DomainValidationError("Event end time must be after its start time")
    return catalog_repo.create_event(
        db,
        title=title,
        location=location,
        start_time=start_time,
        end_time=end_time,
        capacity=capacity,
        ticket_price=ticket_price,
        description=description,
    )
