"""
Rental Pydantic schemas.

Defines request and response models for the rental lifecycle.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from car_rental.app.models.enums import RentalStatus


class RentalCreate(BaseModel):
    """
    Schema for creating a rental.

    Fields are optional here so that missing values are reported by the
    rental service with a single consistent message.
    """
    car_id: Optional[int] = Field(None, description="Car to rent")
    renter_name: Optional[str] = Field(None, max_length=255, description="Name of the renter")
    start_date: Optional[str] = Field(None, description="First day of the rental (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="Last day of the rental (YYYY-MM-DD), inclusive")


class RentalUpdate(BaseModel):
    """Schema for extending or closing a rental."""
    status: Optional[RentalStatus] = Field(None, description="New status: returned or cancelled")
    end_date: Optional[str] = Field(None, description="New inclusive end date (YYYY-MM-DD)")


class RentalResponse(BaseModel):
    """Schema for rental response."""
    id: int
    car_id: int
    renter_name: str
    start_date: date
    end_date: date
    total_cost: Decimal
    status: RentalStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RentalCreatedResponse(RentalResponse):
    """Schema returned by rental creation."""
    message: str = "Rental created"


class RentalWithCarResponse(RentalResponse):
    """Rental joined with the descriptive fields of its car."""
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    daily_rate: Optional[Decimal] = None


class RentalUpdateResponse(BaseModel):
    """Schema returned by rental update."""
    id: int
    status: RentalStatus
    end_date: date
    total_cost: Decimal
    message: str = "Rental updated"


class MessageResponse(BaseModel):
    """Plain confirmation message."""
    message: str
