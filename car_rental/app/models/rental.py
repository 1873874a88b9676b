"""
Rental database model.

A rental agreement for one car over an inclusive date range.
"""

from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.sql import func
from car_rental.app.db.session import Base
from car_rental.app.models.enums import RentalStatus


class Rental(Base):
    """
    Rental model.

    total_cost always equals the car's daily rate times the inclusive
    day count of [start_date, end_date].
    """
    __tablename__ = "rentals"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # A referenced car can never be deleted
    car_id = Column(Integer, ForeignKey('cars.id', ondelete='RESTRICT'), nullable=False, index=True)

    renter_name = Column(String(255), nullable=False)

    # Inclusive date range
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    total_cost = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(
        SQLEnum(RentalStatus, name="rental_status", values_callable=lambda e: [m.value for m in e]),
        default=RentalStatus.ONGOING,
        nullable=False,
        index=True
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Rental(id={self.id}, car_id={self.car_id}, status={self.status})>"
