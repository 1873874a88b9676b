"""
API Router.

Aggregates the /api endpoints.
"""

from fastapi import APIRouter
from car_rental.app.api.endpoints import cars, rentals

router = APIRouter()

router.include_router(cars.router)
router.include_router(rentals.router)
