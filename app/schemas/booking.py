from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class YachtBooking(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    member_id: int
    yacht_id: int
    start_time: datetime
    end_time: datetime
    guest_count: int
    special_requests: str | None = None
    tokens_used: int
    status: str
    created_at: datetime


class YachtBookingCreate(BaseModel):
    member_id: int
    yacht_id: int
    start_time: datetime
    end_time: datetime
    guest_count: int = Field(..., gt=0)
    special_requests: str | None = None
