"""
Car Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class CarResponse(BaseModel):
    """Schema for car response."""
    id: int
    make: str
    model: str
    year: Optional[int]
    daily_rate: Decimal
    available: bool
    created_at: datetime

    class Config:
        from_attributes = True
