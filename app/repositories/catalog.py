from datetime import datetime
from decimal import Decimal

from sqlalchemy.orm import Session

from app.db.models.catalog import Event as EventModel
from app.db.models.catalog import Service as ServiceModel
from app.db.models.catalog import Yacht as YachtModel


def get_yacht_by_id(db: Session, yacht_id: int, for_update: bool = False) -> YachtModel | None:
    """
    Get a yacht by ID.

    With ``for_update`` the row stays locked until the transaction ends, which
    serializes bookings of the same yacht on databases that support row locks.
    """
    query = db.query(YachtModel).filter(YachtModel.id == yacht_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_yachts(
    db: Session,
    available: bool | None = None,
    max_size: int | None = None,
    location: str | None = None,
) -> list[YachtModel]:
    """
    Get yachts, optionally filtered.

    Args:
        available: Only yachts with this availability flag
        max_size: Only yachts with size <= max_size (feet)
        location: Only yachts at this location (case-insensitive)
    """
    query = db.query(YachtModel)
    if available is not None:
        query = query.filter(YachtModel.is_available == available)
    if max_size is not None:
        query = query.filter(YachtModel.size <= max_size)
    if location is not None:
        query = query.filter(YachtModel.location.ilike(location))
    return query.order_by(YachtModel.size, YachtModel.id).all()


def create_yacht(
    db: Session,
    name: str,
    location: str,
    size: int,
    capacity: int,
    description: str | None = None,
    is_available: bool = True,
) -> YachtModel:
    """Create a new yacht in the database. Pure data access - no business logic."""
    db_yacht = YachtModel(
        name=name,
        location=location,
        size=size,
        capacity=capacity,
        description=description,
        is_available=is_available,
    )
    db.add(db_yacht)
    db.commit()
    db.refresh(db_yacht)
    return db_yacht


def get_service_by_id(db: Session, service_id: int) -> ServiceModel | None:
    """Get a service by ID."""
    return db.query(ServiceModel).filter(ServiceModel.id == service_id).first()


def get_services(
    db: Session, category: str | None = None, available: bool | None = None
) -> list[ServiceModel]:
    """Get services, optionally filtered by category and availability."""
    query = db.query(ServiceModel)
    if category is not None:
        query = query.filter(ServiceModel.category == category)
    if available is not None:
        query = query.filter(ServiceModel.is_available == available)
    return query.order_by(ServiceModel.id).all()


def create_service(
    db: Session,
    name: str,
    category: str,
    price_per_session: Decimal,
    description: str | None = None,
    duration_minutes: int | None = None,
    is_available: bool = True,
) -> ServiceModel:
    """Create a new service in the database. Pure data access - no business logic."""
    db_service = ServiceModel(
        name=name,
        category=category,
        price_per_session=price_per_session,
        description=description,
        duration_minutes=duration_minutes,
        is_available=is_available,
    )
    db.add(db_service)
    db.commit()
    db.refresh(db_service)
    return db_service


def get_event_by_id(db: Session, event_id: int) -> EventModel | None:
    """Get an event by ID."""
    return db.query(EventModel).filter(EventModel.id == event_id).first()


def get_events(db: Session, active: bool | None = None) -> list[EventModel]:
    """Get events ordered by start time."""
    query = db.query(EventModel)
    if active is not None:
        query = query.filter(EventModel.is_active == active)
    return query.order_by(EventModel.start_time, EventModel.id).all()


def create_event(
    db: Session,
    title: str,
    location: str,
    start_time: datetime,
    end_time: datetime,
    capacity: int,
    ticket_price: Decimal,
    description: str | None = None,
    is_active: bool = True,
) -> EventModel:
    """Create a new event in the database. Pure data access - no business logic."""
    db_event = EventModel(
        title=title,
        location=location,
        start_time=start_time,
        end_time=end_time,
        capacity=capacity,
        ticket_price=ticket_price,
        description=description,
        is_active=is_active,
    )
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    return db_event
