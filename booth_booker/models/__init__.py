from booth_booker.models.user import User
from booth_booker.models.exhibition import Exhibition
from booth_booker.models.booking import Booking, BoothType

__all__ = ["User", "Exhibition", "Booking", "BoothType"]
