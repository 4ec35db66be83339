from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import app.repositories.catalog as catalog_repo
from app.api.deps import get_db, get_membership_policy
from app.domain.membership import MembershipPolicy
from app.schemas.catalog import PriceQuote, Service, ServiceCreate
from app.services.catalog import list_services_for_member, quote_service

router = APIRouter(prefix="/services", tags=["services"])


@router.post("", response_model=Service, status_code=status.HTTP_201_CREATED)
def create_new_service(service_data: ServiceCreate, db: Session = Depends(get_db)):
    """
    Add a concierge service to the catalog.
    """
    service = catalog_repo.create_service(
        db,
        name=service_data.name,
        category=service_data.category,
        price_per_session=service_data.price_per_session,
        description=service_data.description,
        duration_minutes=service_data.duration_minutes,
        is_available=service_data.is_available,
    )
    return Service.model_validate(service)


@router.get("", response_model=list[Service])
def get_all_services(
    member_id: int | None = None,
    category: str | None = None,
    db: Session = Depends(get_db),
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Get services. With member_id each service carries the member's price.
    """
    items = list_services_for_member(db, policy, member_id=member_id, category=category)
    return [
        Service.model_validate(service).model_copy(update={"member_price": price})
        for service, price in items
    ]


@router.get("/{service_id}/quote", response_model=PriceQuote)
def get_service_quote(
    service_id: int,
    member_id: int,
    db: Session = Depends(get_db),
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Price one session of a service for a member, including the amount in cents
    to hand to the payment provider.
    """
    return PriceQuote.model_validate(quote_service(db, policy, service_id, member_id))
