from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from app.domain.membership import MembershipTier


class Yacht(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    location: str
    size: int
    capacity: int
    description: str | None = None
    is_available: bool


class YachtCreate(BaseModel):
    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    size: int = Field(..., gt=0)
    capacity: int = Field(..., gt=0)
    description: str | None = None
    is_available: bool = True


class Service(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    description: str | None = None
    price_per_session: Decimal
    duration_minutes: int | None = None
    is_available: bool
    member_price: Decimal | None = None


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price_per_session: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: str | None = None
    duration_minutes: int | None = Field(None, gt=0)
    is_available: bool = True


class Event(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None = None
    location: str
    start_time: datetime
    end_time: datetime
    capacity: int
    ticket_price: Decimal
    is_active: bool
    member_price: Decimal | None = None


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    capacity: int = Field(..., gt=0)
    ticket_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: str | None = None


class PriceQuote(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: int
    tier: MembershipTier
    base_price: Decimal
    discount_percent: Decimal
    unit_price: Decimal
    quantity: int
    total: Decimal
    amount_minor_units: int
