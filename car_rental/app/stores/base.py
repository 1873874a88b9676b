"""
Rental store contract.

Both the durable (SQLAlchemy) and the volatile (in-memory) store implement
`RentalStore` and must behave identically as seen by the rental service:
same return shapes, same ordering, same invariants.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Optional

from car_rental.app.models.enums import RentalStatus
from car_rental.app.schemas.car import CarResponse
from car_rental.app.schemas.rental import RentalResponse, RentalWithCarResponse
from car_rental.app.schemas.metrics import RentalAggregate

# First-run fleet: (make, model, year, daily_rate)
SEED_CARS = [
    ("Toyota", "Corolla", 2020, Decimal("35.00")),
    ("Honda", "Civic", 2019, Decimal("37.50")),
    ("Ford", "Focus", 2018, Decimal("30.00")),
]


class StoreIntegrityError(Exception):
    """Raised when a write would break referential integrity (e.g. unknown car)."""


class RentalStore(ABC):
    """Storage operations over cars and rentals."""

    backend: str = "abstract"

    @abstractmethod
    async def list_cars(self) -> List[CarResponse]:
        """All cars, by id ascending."""

    @abstractmethod
    async def get_car(self, car_id: int) -> Optional[CarResponse]:
        ...

    @abstractmethod
    async def list_rentals(self) -> List[RentalWithCarResponse]:
        """All rentals joined with car fields, most recent first."""

    @abstractmethod
    async def get_rental(self, rental_id: int) -> Optional[RentalResponse]:
        ...

    @abstractmethod
    async def create_rental(
        self,
        car_id: int,
        renter_name: str,
        start_date: date,
        end_date: date,
        total_cost: Decimal,
    ) -> RentalResponse:
        """Persist a new ongoing rental with a freshly allocated id."""

    @abstractmethod
    async def update_rental(self, rental_id: int, **fields) -> Optional[RentalResponse]:
        """
        Apply `fields` (end_date, total_cost, status) and refresh updated_at.

        Returns None if the rental does not exist.
        """

    @abstractmethod
    async def transition_rental(
        self,
        rental_id: int,
        from_status: RentalStatus,
        to_status: RentalStatus,
        release_car: bool = False,
        **fields,
    ) -> Optional[RentalResponse]:
        """
        Move a rental from `from_status` to `to_status` as one atomic step.

        `fields` are applied in the same step and, with `release_car`, the
        rental's car is made available again. Returns None (and changes
        nothing) if the rental is missing or no longer in `from_status`.
        """

    @abstractmethod
    async def delete_rental(self, rental_id: int) -> bool:
        """Remove a rental. Returns False if it did not exist."""

    @abstractmethod
    async def set_car_availability(self, car_id: int, available: bool) -> None:
        ...

    @abstractmethod
    async def claim_car(self, car_id: int) -> bool:
        """
        Atomically flip a car from available to unavailable.

        Returns True only for the caller that performed the flip; concurrent
        claims on the same car see False.
        """

    @abstractmethod
    async def aggregate(self) -> RentalAggregate:
        """Rental counts and revenue of ongoing plus returned rentals."""

    async def close(self) -> None:
        """Release any resources held by the store."""
