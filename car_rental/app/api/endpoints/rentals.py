"""
Rental API Endpoints.

Create, list, extend/return and delete rentals.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status

from car_rental.app.api.deps import get_rental_service, bounded
from car_rental.app.schemas.rental import (
    RentalCreate, RentalUpdate, RentalCreatedResponse, RentalWithCarResponse,
    RentalUpdateResponse, MessageResponse
)
from car_rental.app.services.rentals import RentalService

router = APIRouter(prefix="/rentals", tags=["Rentals"])


@router.get("", response_model=List[RentalWithCarResponse])
async def list_rentals(service: RentalService = Depends(get_rental_service)):
    """List all rentals with car details, most recent first."""
    return await bounded(service.list_rentals())


@router.post("", response_model=RentalCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_rental(
    rental_data: RentalCreate,
    service: RentalService = Depends(get_rental_service)
):
    """
    Rent a car.

    Returns 400 for missing fields, invalid dates or an unavailable car,
    404 for an unknown car.
    """
    rental = await bounded(service.create_rental(rental_data))
    return RentalCreatedResponse(**rental.model_dump())


@router.put("/{rental_id}", response_model=RentalUpdateResponse)
async def update_rental(
    rental_id: int = Path(..., description="Rental ID"),
    rental_data: RentalUpdate = ...,
    service: RentalService = Depends(get_rental_service)
):
    """
    Extend a rental (end_date) and/or change its status.

    Marking a rental returned makes its car available again.
    """
    return await bounded(service.update_rental(rental_id, rental_data))


@router.delete("/{rental_id}", response_model=MessageResponse)
async def delete_rental(
    rental_id: int = Path(..., description="Rental ID"),
    service: RentalService = Depends(get_rental_service)
):
    """Delete a rental. Does not free the car."""
    await bounded(service.delete_rental(rental_id))
    return MessageResponse(message="Rental deleted")
