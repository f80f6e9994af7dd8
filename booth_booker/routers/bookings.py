from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from booth_booker.db import get_db
from booth_booker.schemas.booking import BookingCreate, BookingResponse, BookingUpdate
from booth_booker.services import bookings
from booth_booker.services.access import Principal
from booth_booker.utils.auth import get_current_principal, require_role

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Book small or big booths for an exhibition. Members only.",
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_role("member")),
):
    """
    Create a new booth booking.

    - **exhibition_id**: ID of the exhibition to book.
    - **booth_type**: `small` or `big`.
    - **amount**: Number of booths; one member may hold at most 6 booths per exhibition.

    Returns the booking with its exhibition and owner.
    """
    return bookings.create_booking(
        db, principal, booking.exhibition_id, booking.booth_type, booking.amount
    )


@router.get(
    "/",
    response_model=List[BookingResponse],
    summary="List bookings",
    description="Admins see every booking, members only their own. Newest first.",
)
def get_bookings(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return bookings.list_bookings(db, principal)


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return bookings.get_booking(db, principal, booking_id)


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Change booth type and/or amount. Admins may update any booking, members their own.",
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """
    Update a booking.

    - **booth_type**: (Optional) New booth type.
    - **amount**: (Optional) New number of booths.
    """
    return bookings.update_booking(
        db, principal, booking_id, booking_update.booth_type, booking_update.amount
    )


@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Delete a booking and return its booths to the exhibition.",
)
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    bookings.delete_booking(db, principal, booking_id)
    return None
