"""
Quota ledger: booth totals, the per-user cap and exhibition inventory counters.

Exhibition quota columns are the live inventory. Every booking mutation goes
through ``reserve``/``release`` inside the caller's transaction, while
``exhibition_lock`` serializes the read-check-write sequence per exhibition.
"""
from contextlib import contextmanager
import logging
import threading

from sqlalchemy import func, select, update

from booth_booker.config import settings
from booth_booker.exceptions import BadRequest, BoothCapExceeded
from booth_booker.models.booking import Booking, BoothType
from booth_booker.models.exhibition import Exhibition

logger = logging.getLogger(__name__)

_QUOTA_COLUMNS = {
    BoothType.SMALL.value: Exhibition.small_booth_quota,
    BoothType.BIG.value: Exhibition.big_booth_quota,
}


class ExhibitionLocks:
    """One mutex per exhibition id, created on first use."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}

    def get(self, exhibition_id):
        with self._guard:
            lock = self._locks.get(exhibition_id)
            if lock is None:
                lock = self._locks[exhibition_id] = threading.Lock()
            return lock


_locks = ExhibitionLocks()


@contextmanager
def exhibition_lock(exhibition_id):
    lock = _locks.get(exhibition_id)
    with lock:
        yield


def quota_column(booth_type):
    return _QUOTA_COLUMNS[BoothType(booth_type).value]


def lock_exhibition(db, exhibition_id):
    """Load an exhibition with a row lock where the backend supports one."""
    return db.execute(
        select(Exhibition)
        .where(Exhibition.id == exhibition_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()


def total_booths_for_user(db, user_id, exhibition_id, exclude_booking_id=None) -> int:
    """Sum of booked amounts for one (user, exhibition) pair.

    ``db`` may be a Session or a Connection; the persistence guard runs with
    the flush connection.
    """
    stmt = select(func.coalesce(func.sum(Booking.amount), 0)).where(
        Booking.user_id == user_id,
        Booking.exhibition_id == exhibition_id,
    )
    if exclude_booking_id is not None:
        stmt = stmt.where(Booking.id != exclude_booking_id)
    return int(db.execute(stmt).scalar() or 0)


def total_booths_for_type(db, exhibition_id, booth_type) -> int:
    stmt = select(func.coalesce(func.sum(Booking.amount), 0)).where(
        Booking.exhibition_id == exhibition_id,
        Booking.booth_type == BoothType(booth_type).value,
    )
    return int(db.execute(stmt).scalar() or 0)


def cap_check(db, user_id, exhibition_id, candidate_amount, exclude_booking_id=None) -> bool:
    total = total_booths_for_user(db, user_id, exhibition_id, exclude_booking_id)
    return total + candidate_amount <= settings.MAX_BOOTHS_PER_EXHIBITION


def ensure_within_cap(db, user_id, exhibition_id, candidate_amount, exclude_booking_id=None):
    """The single cap rule, shared by the service layer and the row guard."""
    if not cap_check(db, user_id, exhibition_id, candidate_amount, exclude_booking_id):
        logger.warning(
            f"Booth cap exceeded for user {user_id} on exhibition {exhibition_id}: "
            f"requested {candidate_amount}"
        )
        raise BoothCapExceeded(
            f"Total number of booths per exhibition cannot exceed "
            f"{settings.MAX_BOOTHS_PER_EXHIBITION}"
        )


def reserve(db, exhibition, booth_type, amount):
    """Take ``amount`` booths of ``booth_type`` from the exhibition's inventory.

    The decrement is conditional on the counter still covering the amount, so
    a stale read can never drive a quota negative.
    """
    column = quota_column(booth_type)
    result = db.execute(
        update(Exhibition)
        .where(Exhibition.id == exhibition.id, column >= amount)
        .values({column: column - amount})
        .execution_options(synchronize_session=False)
    )
    db.expire(exhibition, [column.key])
    if result.rowcount != 1:
        logger.error(f"Not enough {booth_type} booths on exhibition {exhibition.id} for {amount}")
        raise BadRequest(f"Not enough {booth_type} booths available")
    logger.debug(f"Reserved {amount} {booth_type} booths on exhibition {exhibition.id}")


def release(db, exhibition, booth_type, amount):
    column = quota_column(booth_type)
    db.execute(
        update(Exhibition)
        .where(Exhibition.id == exhibition.id)
        .values({column: column + amount})
        .execution_options(synchronize_session=False)
    )
    db.expire(exhibition, [column.key])
    logger.debug(f"Released {amount} {booth_type} booths on exhibition {exhibition.id}")
