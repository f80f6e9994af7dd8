"""
Booking lifecycle: list, get, create, update and delete booth bookings.

Every mutation runs under the exhibition's lock and inside one session
transaction; validation failures are raised before anything is written and
any failure after the first write rolls the whole unit back.
"""
from contextlib import contextmanager
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from booth_booker.exceptions import BadRequest, BookingError, Conflict, Internal, NotFound
from booth_booker.models.booking import Booking
from booth_booker.services import ledger
from booth_booker.services.access import (
    Principal,
    ensure_booking_access,
    ensure_can_create_booking,
)
from booth_booker.utils.validation_helpers import (
    is_before_today,
    validate_amount,
    validate_booth_type,
)

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session):
    """Commit on success; roll back and translate persistence failures otherwise."""
    try:
        yield
        db.commit()
    except BookingError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error: {e.orig}")
        raise Conflict("Invalid booking request") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Booking transaction failed")
        raise Internal("Server Error") from e


def _enriched_query(db: Session):
    return db.query(Booking).options(
        joinedload(Booking.exhibition),
        joinedload(Booking.user),
    )


def _load_enriched(db: Session, booking_id: int) -> Booking:
    return _enriched_query(db).filter(Booking.id == booking_id).first()


def _find_for(db: Session, principal: Principal, booking_id: int, action: str) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        logger.error(f"Booking not found: {booking_id}")
        raise NotFound(f"Booking not found with id of {booking_id}")
    ensure_booking_access(principal, booking, action)
    return booking


def list_bookings(db: Session, principal: Principal):
    query = _enriched_query(db)
    if not principal.is_admin:
        query = query.filter(Booking.user_id == principal.id)
    bookings = query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()
    logger.debug(f"Retrieved {len(bookings)} bookings for user {principal.id}")
    return bookings


def get_booking(db: Session, principal: Principal, booking_id: int) -> Booking:
    _find_for(db, principal, booking_id, "access")
    return _load_enriched(db, booking_id)


def create_booking(
    db: Session,
    principal: Principal,
    exhibition_id: int,
    booth_type,
    amount,
) -> Booking:
    """
    Reserve ``amount`` booths of ``booth_type`` on an exhibition for a member.

    Checks run in order: exhibition exists, booth type is valid, the
    exhibition has not started, the live quota covers the amount and the
    member stays within the per-exhibition cap.
    """
    ensure_can_create_booking(principal)
    logger.debug(
        f"Creating booking for user: {principal.id}, exhibition_id: {exhibition_id}, "
        f"{amount} x {booth_type}"
    )

    with ledger.exhibition_lock(exhibition_id):
        with atomic(db):
            exhibition = ledger.lock_exhibition(db, exhibition_id)
            if not exhibition:
                logger.error(f"Exhibition not found: {exhibition_id}")
                raise NotFound(f"Exhibition not found with id of {exhibition_id}")

            booth_type = validate_booth_type(booth_type)
            validate_amount(amount)

            if is_before_today(exhibition.start_date):
                logger.error(f"Exhibition {exhibition_id} already started on {exhibition.start_date}")
                raise BadRequest("Cannot book for an exhibition that has already started")

            available = exhibition.quota_for(booth_type)
            booked = ledger.total_booths_for_type(db, exhibition_id, booth_type)
            logger.debug(
                f"Exhibition {exhibition_id} {booth_type}: {available} available, {booked} booked"
            )
            if amount > available:
                logger.error(f"Not enough {booth_type} booths: {amount} > {available}")
                raise BadRequest(f"Not enough {booth_type} booths available")

            ledger.ensure_within_cap(db, principal.id, exhibition_id, amount)

            booking = Booking(
                user_id=principal.id,
                exhibition_id=exhibition_id,
                booth_type=booth_type,
                amount=amount,
            )
            db.add(booking)
            db.flush()
            ledger.reserve(db, exhibition, booth_type, amount)

    logger.info(f"Created booking: {booking.id} for user {principal.id}")
    return _load_enriched(db, booking.id)


def update_booking(
    db: Session,
    principal: Principal,
    booking_id: int,
    booth_type=None,
    amount=None,
) -> Booking:
    """
    Change a booking's booth type and/or amount.

    The old reservation is released before the new one is taken, so a booking
    can always be re-saved with its current values.
    """
    booking = _find_for(db, principal, booking_id, "update")
    exhibition_id = booking.exhibition_id

    with ledger.exhibition_lock(exhibition_id):
        with atomic(db):
            # Re-read under the lock so the released amounts are current
            db.refresh(booking)
            new_booth_type = validate_booth_type(
                booking.booth_type if booth_type is None else booth_type
            )
            new_amount = validate_amount(booking.amount if amount is None else amount)

            exhibition = ledger.lock_exhibition(db, exhibition_id)
            if not exhibition:
                logger.error(f"Exhibition not found for booking {booking_id}")
                raise NotFound("Exhibition not found")

            released = exhibition.quota_for(new_booth_type)
            if new_booth_type == booking.booth_type:
                released += booking.amount
            if released < new_amount:
                logger.error(f"Not enough {new_booth_type} booths: {new_amount} > {released}")
                raise BadRequest(f"Not enough {new_booth_type} booths available")

            ledger.ensure_within_cap(
                db, booking.user_id, exhibition_id, new_amount, exclude_booking_id=booking.id
            )

            ledger.release(db, exhibition, booking.booth_type, booking.amount)
            ledger.reserve(db, exhibition, new_booth_type, new_amount)
            booking.booth_type = new_booth_type
            booking.amount = new_amount
            db.flush()

    logger.info(f"Updated booking: {booking_id} to {new_amount} x {new_booth_type}")
    return _load_enriched(db, booking_id)


def delete_booking(db: Session, principal: Principal, booking_id: int) -> None:
    booking = _find_for(db, principal, booking_id, "delete")
    exhibition_id = booking.exhibition_id

    with ledger.exhibition_lock(exhibition_id):
        with atomic(db):
            db.refresh(booking)
            exhibition = ledger.lock_exhibition(db, exhibition_id)
            if exhibition:
                ledger.release(db, exhibition, booking.booth_type, booking.amount)
            else:
                logger.warning(f"Exhibition {exhibition_id} missing, deleting booking {booking_id} without restoring quota")
            db.delete(booking)
            db.flush()

    logger.info(f"Deleted booking: {booking_id}")
