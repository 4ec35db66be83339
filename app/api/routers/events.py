from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_membership_policy
from app.domain.membership import MembershipPolicy
from app.schemas.catalog import Event, EventCreate, PriceQuote
from app.services.catalog import create_event, list_events_for_member, quote_event

router = APIRouter(prefix="/events", tags=["events"])


@router.post("", response_model=Event, status_code=status.HTTP_201_CREATED)
def create_new_event(event_data: EventCreate, db: Session = Depends(get_db)):
    """
    Create a club event. The end time must be after the start time.
    """
    event = create_event(
        db,
        title=event_data.title,
        location=event_data.location,
        start_time=event_data.start_time,
        end_time=event_data.end_time,
        capacity=event_data.capacity,
        ticket_price=event_data.ticket_price,
        description=event_data.description,
    )
    return Event.model_validate(event)


@router.get("", response_model=list[Event])
def get_all_events(
    member_id: int | None = None,
    db: Session = Depends(get_db),
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Get active events. With member_id each event carries the member's ticket price.
    """
    items = list_events_for_member(db, policy, member_id=member_id)
    return [
        Event.model_validate(event).model_copy(update={"member_price": price})
        for event, price in items
    ]


@router.get("/{event_id}/quote", response_model=PriceQuote)
def get_event_quote(
    event_id: int,
    member_id: int,
    ticket_quantity: int = Query(1, gt=0),
    db: Session = Depends(get_db),
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Price tickets for an event for a member.
    """
    quote = quote_event(db, policy, event_id, member_id, ticket_quantity=ticket_quantity)
    return PriceQuote.model_validate(quote)
