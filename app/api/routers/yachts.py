from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import app.repositories.catalog as catalog_repo
from app.api.deps import get_db, get_membership_policy
from app.domain.membership import MembershipPolicy
from app.errors import NotFoundError
from app.schemas.catalog import Yacht, YachtCreate
from app.services.catalog import list_yachts_for_member

router = APIRouter(prefix="/yachts", tags=["yachts"])


@router.post("", response_model=Yacht, status_code=status.HTTP_201_CREATED)
def create_new_yacht(yacht_data: YachtCreate, db: Session = Depends(get_db)):
    """
    Add a yacht to the fleet.
    """
    yacht = catalog_repo.create_yacht(
        db,
        name=yacht_data.name,
        location=yacht_data.location,
        size=yacht_data.size,
        capacity=yacht_data.capacity,
        description=yacht_data.description,
        is_available=yacht_data.is_available,
    )
    return Yacht.model_validate(yacht)


@router.get("", response_model=list[Yacht])
def get_all_yachts(
    member_id: int | None = None,
    max_size: int | None = Query(None, gt=0),
    location: str | None = None,
    db: Session = Depends(get_db),
    policy: MembershipPolicy = Depends(get_membership_policy),
):
    """
    Get yachts.
    - Without member_id: the whole fleet
    - With member_id: only available yachts within the member's tier size limit
    """
    yachts = list_yachts_for_member(
        db, policy, member_id=member_id, max_size=max_size, location=location
    )
    return [Yacht.model_validate(y) for y in yachts]


@router.get("/{yacht_id}", response_model=Yacht)
def get_yacht_by_id(yacht_id: int, db: Session = Depends(get_db)):
    """
    Get a yacht by ID.
    """
    yacht = catalog_repo.get_yacht_by_id(db, yacht_id)
    if not yacht:
        raise NotFoundError("Yacht not found")
    return Yacht.model_validate(yacht)
