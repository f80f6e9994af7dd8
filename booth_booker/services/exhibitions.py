"""
Exhibition management: public reads, admin-only writes.
"""
import logging

from sqlalchemy.orm import Session, selectinload

from booth_booker.exceptions import BadRequest, Conflict, NotFound
from booth_booker.models.booking import Booking, BoothType
from booth_booker.models.exhibition import Exhibition
from booth_booker.services import ledger
from booth_booker.services.access import Principal, ensure_admin
from booth_booker.services.bookings import atomic
from booth_booker.utils.validation_helpers import validate_start_date

logger = logging.getLogger(__name__)

EXHIBITION_FIELDS = (
    "name",
    "description",
    "venue",
    "start_date",
    "duration_day",
    "small_booth_quota",
    "big_booth_quota",
    "poster_picture",
)


def _validate_fields(fields: dict):
    if "start_date" in fields:
        validate_start_date(fields["start_date"])
    if "duration_day" in fields and fields["duration_day"] < 1:
        raise BadRequest("Duration must be at least 1 day")
    for key in ("small_booth_quota", "big_booth_quota"):
        if key in fields and fields[key] < 0:
            raise BadRequest(f"{key.replace('_', ' ').capitalize()} cannot be negative")


def booked_totals(db: Session, exhibition: Exhibition) -> dict:
    """Booked booths per type, summed from the exhibition's bookings."""
    return {
        booth_type.value: ledger.total_booths_for_type(db, exhibition.id, booth_type.value)
        for booth_type in BoothType
    }


def list_exhibitions(db: Session, skip: int = 0, limit: int = 100):
    exhibitions = (
        db.query(Exhibition)
        .options(selectinload(Exhibition.bookings))
        .order_by(Exhibition.start_date, Exhibition.id)
        .offset(skip)
        .limit(limit)
        .all()
    )
    logger.debug(f"Retrieved {len(exhibitions)} exhibitions")
    return exhibitions


def get_exhibition(db: Session, exhibition_id: int) -> Exhibition:
    exhibition = (
        db.query(Exhibition)
        .options(selectinload(Exhibition.bookings))
        .filter(Exhibition.id == exhibition_id)
        .first()
    )
    if not exhibition:
        logger.error(f"Exhibition not found: {exhibition_id}")
        raise NotFound("Exhibition not found")
    return exhibition


def create_exhibition(db: Session, principal: Principal, fields: dict) -> Exhibition:
    ensure_admin(principal)
    missing = [key for key in EXHIBITION_FIELDS if fields.get(key) is None]
    if missing:
        raise BadRequest(f"Missing exhibition fields: {', '.join(missing)}")
    _validate_fields(fields)

    exhibition = Exhibition(**{key: fields[key] for key in EXHIBITION_FIELDS})
    with atomic(db):
        db.add(exhibition)
    db.refresh(exhibition)
    logger.info(f"Created exhibition: {exhibition.id} by admin {principal.id}")
    return exhibition


def update_exhibition(db: Session, principal: Principal, exhibition_id: int, fields: dict) -> Exhibition:
    """
    Overwrite the given fields of an exhibition.

    ``fields`` holds only the keys the caller sent; the start date rule only
    applies when a new start date is among them.
    """
    ensure_admin(principal)
    updates = {key: value for key, value in fields.items() if key in EXHIBITION_FIELDS}
    if any(value is None for value in updates.values()):
        raise BadRequest("Exhibition fields cannot be null")
    _validate_fields(updates)

    with ledger.exhibition_lock(exhibition_id):
        with atomic(db):
            exhibition = ledger.lock_exhibition(db, exhibition_id)
            if not exhibition:
                logger.error(f"Exhibition not found: {exhibition_id}")
                raise NotFound("Exhibition not found")
            for key, value in updates.items():
                setattr(exhibition, key, value)

    logger.info(f"Updated exhibition: {exhibition_id}")
    return get_exhibition(db, exhibition_id)


def delete_exhibition(db: Session, principal: Principal, exhibition_id: int) -> None:
    """Delete an exhibition; refused while any booking still references it."""
    ensure_admin(principal)
    with ledger.exhibition_lock(exhibition_id):
        with atomic(db):
            exhibition = ledger.lock_exhibition(db, exhibition_id)
            if not exhibition:
                logger.error(f"Exhibition not found: {exhibition_id}")
                raise NotFound("Exhibition not found")
            active = db.query(Booking).filter(Booking.exhibition_id == exhibition_id).count()
            if active:
                logger.warning(f"Refusing to delete exhibition {exhibition_id} with {active} bookings")
                raise Conflict(f"Exhibition has {active} active bookings and cannot be deleted")
            db.delete(exhibition)

    logger.info(f"Deleted exhibition: {exhibition_id}")
