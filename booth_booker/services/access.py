"""
Access policy: which principal may touch which record.
"""
from dataclasses import dataclass
import logging

from booth_booker.exceptions import Forbidden
from booth_booker.models.user import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    id: int
    role: str
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_member(self) -> bool:
        return self.role == Role.MEMBER.value


def can_access_booking(principal: Principal, booking) -> bool:
    return principal.is_admin or booking.user_id == principal.id


def ensure_booking_access(principal: Principal, booking, action: str = "access"):
    if not can_access_booking(principal, booking):
        logger.warning(f"User {principal.id} not authorized to {action} booking {booking.id}")
        raise Forbidden(f"Not authorized to {action} this booking")


def ensure_can_create_booking(principal: Principal):
    if not principal.is_member:
        raise Forbidden("Only members can create bookings")


def ensure_admin(principal: Principal):
    if not principal.is_admin:
        raise Forbidden("Admin access required")
