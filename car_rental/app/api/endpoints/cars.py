"""
Car API Endpoints.

Read-only view of the fleet.
"""

from typing import List
from fastapi import APIRouter, Depends

from car_rental.app.api.deps import get_rental_service, bounded
from car_rental.app.schemas.car import CarResponse
from car_rental.app.services.rentals import RentalService

router = APIRouter(prefix="/cars", tags=["Cars"])


@router.get("", response_model=List[CarResponse])
async def list_cars(service: RentalService = Depends(get_rental_service)):
    """List all cars, by id."""
    return await bounded(service.list_cars())
