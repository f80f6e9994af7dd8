from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from booth_booker.db import get_db
from booth_booker.schemas.exhibition import (
    ExhibitionCreate,
    ExhibitionDetail,
    ExhibitionResponse,
    ExhibitionUpdate,
)
from booth_booker.services import exhibitions
from booth_booker.services.access import Principal
from booth_booker.utils.auth import require_role


router = APIRouter(
    prefix="/exhibitions",
    tags=["exhibitions"],
)

require_admin = require_role("admin")


def to_detail(db: Session, exhibition) -> ExhibitionDetail:
    detail = ExhibitionDetail.model_validate(exhibition)
    detail.booked = exhibitions.booked_totals(db, exhibition)
    return detail


@router.post("/", response_model=ExhibitionResponse, status_code=status.HTTP_201_CREATED)
def create_exhibition(
    exhibition: ExhibitionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """
    Create a new exhibition.
    Admin only. The start date cannot be earlier than today.
    """
    return exhibitions.create_exhibition(db, principal, exhibition.model_dump())


@router.get("/", response_model=List[ExhibitionDetail])
def get_exhibitions(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """
    Retrieve all exhibitions with their bookings.
    """
    return [to_detail(db, item) for item in exhibitions.list_exhibitions(db, skip, limit)]


@router.get("/{exhibition_id}", response_model=ExhibitionDetail)
def get_exhibition(exhibition_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a specific exhibition by ID.
    """
    return to_detail(db, exhibitions.get_exhibition(db, exhibition_id))


@router.put("/{exhibition_id}", response_model=ExhibitionDetail)
def update_exhibition(
    exhibition_id: int,
    exhibition_update: ExhibitionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """
    Update an exhibition's details.
    Admin only.
    """
    updated = exhibitions.update_exhibition(
        db, principal, exhibition_id, exhibition_update.model_dump(exclude_unset=True)
    )
    return to_detail(db, updated)


@router.delete("/{exhibition_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_exhibition(
    exhibition_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    """
    Delete an exhibition.
    Admin only; refused while bookings reference it.
    """
    exhibitions.delete_exhibition(db, principal, exhibition_id)
    return None
