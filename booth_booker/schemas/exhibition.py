from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExhibitionBase(BaseModel):
    name: str
    description: str
    venue: str
    start_date: date
    duration_day: int = Field(ge=1)
    small_booth_quota: int = Field(ge=0)
    big_booth_quota: int = Field(ge=0)
    poster_picture: str


class ExhibitionCreate(ExhibitionBase):
    pass


class ExhibitionUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    venue: Optional[str] = None
    start_date: Optional[date] = None
    duration_day: Optional[int] = Field(default=None, ge=1)
    small_booth_quota: Optional[int] = Field(default=None, ge=0)
    big_booth_quota: Optional[int] = Field(default=None, ge=0)
    poster_picture: Optional[str] = None


class ExhibitionBooking(BaseModel):
    id: int
    user_id: int
    booth_type: str
    amount: int

    model_config = ConfigDict(from_attributes=True)


class ExhibitionResponse(ExhibitionBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ExhibitionDetail(ExhibitionResponse):
    bookings: List[ExhibitionBooking] = []
    booked: Dict[str, int] = {}
