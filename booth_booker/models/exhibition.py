from sqlalchemy import CheckConstraint, Column, Date, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from booth_booker.db import Base


class Exhibition(Base):
    __tablename__ = "exhibitions"
    __table_args__ = (
        CheckConstraint("small_booth_quota >= 0", name="ck_exhibitions_small_quota"),
        CheckConstraint("big_booth_quota >= 0", name="ck_exhibitions_big_quota"),
        CheckConstraint("duration_day >= 1", name="ck_exhibitions_duration"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(String, nullable=False)
    venue = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    duration_day = Column(Integer, nullable=False)
    small_booth_quota = Column(Integer, nullable=False)
    big_booth_quota = Column(Integer, nullable=False)
    poster_picture = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    bookings = relationship(
        "Booking", back_populates="exhibition", passive_deletes=True
    )

    def quota_for(self, booth_type):
        if booth_type == "small":
            return self.small_booth_quota
        return self.big_booth_quota
