"""
Car database model.

The fleet of cars available for rent.
"""

from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime
from sqlalchemy.sql import func
from car_rental.app.db.session import Base


class Car(Base):
    """
    Car model.

    `available` is False exactly while an ongoing rental holds the car.
    """
    __tablename__ = "cars"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Description
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=True)

    # Pricing
    daily_rate = Column(Numeric(10, 2), nullable=False, default=0)

    # Status
    available = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Car(id={self.id}, make='{self.make}', model='{self.model}', available={self.available})>"
