import enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, event, func, inspect
from sqlalchemy.orm import relationship

from booth_booker.db import Base


class BoothType(str, enum.Enum):
    SMALL = "small"
    BIG = "big"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("amount >= 1", name="ck_bookings_amount"),
        Index("ix_bookings_user_exhibition", "user_id", "exhibition_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    exhibition_id = Column(Integer, ForeignKey("exhibitions.id"), nullable=False)
    booth_type = Column(String(8), nullable=False)
    amount = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    exhibition = relationship("Exhibition", back_populates="bookings")
    user = relationship("User", back_populates="bookings")


@event.listens_for(Booking, "before_insert")
def check_cap_before_insert(mapper, connection, target):
    """Reject a row that would push its owner past the per-exhibition cap."""
    from booth_booker.services import ledger

    ledger.ensure_within_cap(connection, target.user_id, target.exhibition_id, target.amount)


@event.listens_for(Booking, "before_update")
def check_cap_before_update(mapper, connection, target):
    if not inspect(target).attrs.amount.history.has_changes():
        return
    from booth_booker.services import ledger

    ledger.ensure_within_cap(
        connection,
        target.user_id,
        target.exhibition_id,
        target.amount,
        exclude_booking_id=target.id,
    )
