from datetime import date, datetime

from booth_booker.exceptions import BadRequest
from booth_booker.models.booking import BoothType
from booth_booker.utils import clock

BOOTH_TYPES = tuple(booth_type.value for booth_type in BoothType)


def as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def is_before_today(value: date, today: date = None) -> bool:
    """Day-granularity comparison; time of day is ignored."""
    return as_date(value) < (today or clock.today())


def validate_start_date(value, message="Start date cannot be earlier than current date"):
    if value is not None and is_before_today(value):
        raise BadRequest(message)
    return value


def validate_booth_type(value):
    if value not in BOOTH_TYPES:
        raise BadRequest("Booth type must be either small or big")
    return BoothType(value).value


def validate_amount(value):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise BadRequest("Booking amount must be at least 1")
    return value
