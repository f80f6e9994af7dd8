from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, StrictInt

from booth_booker.schemas.exhibition import ExhibitionResponse
from booth_booker.schemas.user import UserPublic


class BookingCreate(BaseModel):
    exhibition_id: int
    booth_type: str
    amount: StrictInt


class BookingUpdate(BaseModel):
    booth_type: Optional[str] = None
    amount: Optional[StrictInt] = None


class BookingResponse(BaseModel):
    id: int
    booth_type: str
    amount: int
    user: UserPublic
    exhibition: ExhibitionResponse
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
