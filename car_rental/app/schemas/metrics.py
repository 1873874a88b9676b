"""
Operational Pydantic schemas: health check and metrics snapshot.
"""

from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal


class RentalAggregate(BaseModel):
    """Point-in-time rental counts and revenue as computed by a store."""
    total_rentals: int = 0
    active_rentals: int = 0
    total_revenue: Decimal = Decimal("0.00")


class RentalStats(BaseModel):
    total: int
    active: int
    completed: int


class RevenueStats(BaseModel):
    total: str
    currency: str = "USD"


class RequestStats(BaseModel):
    total: int


class MetricsResponse(BaseModel):
    """Schema for the /metrics snapshot."""
    status: str = "healthy"
    timestamp: datetime
    uptime_seconds: int
    storage: str
    rentals: RentalStats
    revenue: RevenueStats
    requests: RequestStats


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: datetime
