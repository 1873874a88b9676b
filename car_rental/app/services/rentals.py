"""
Rental Service.

Owns the rental lifecycle: availability gating, cost computation and
status transitions. Works against any `RentalStore`; it never needs to
know which backend is active.

State machine:
    ongoing --(returned)--> returned   (releases the car)
    ongoing --(cancelled)--> cancelled (car stays unavailable)
Both end states are terminal.
"""

import asyncio
import logging
from decimal import Decimal
from typing import List, Optional

from car_rental.app.core.exceptions import ValidationError, ResourceNotFoundError, ConflictError
from car_rental.app.domain.rentals.dates import inclusive_days, parse_date
from car_rental.app.domain.rentals.pricing import rental_cost
from car_rental.app.models.enums import RentalStatus
from car_rental.app.schemas.car import CarResponse
from car_rental.app.schemas.rental import (
    RentalCreate, RentalUpdate, RentalResponse, RentalWithCarResponse, RentalUpdateResponse
)
from car_rental.app.stores.base import RentalStore

logger = logging.getLogger("car_rental")


def _already_closed(rental: RentalResponse) -> ConflictError:
    return ConflictError(
        f"Rental is already {rental.status.value}",
        details={"rental_id": rental.id, "status": rental.status.value}
    )


class RentalService:

    def __init__(self, store: RentalStore):
        self.store = store

    async def list_cars(self) -> List[CarResponse]:
        return await self.store.list_cars()

    async def list_rentals(self) -> List[RentalWithCarResponse]:
        """All rentals with car details, most recent first."""
        return await self.store.list_rentals()

    async def create_rental(self, payload: RentalCreate) -> RentalResponse:
        """
        Rent a car.

        Flow:
        1. Require all four fields
        2. Car must exist and be available
        3. Date range must be valid (inclusive days > 0)
        4. Claim the car atomically, then persist the rental

        Raises:
            ValidationError: Missing fields or invalid dates
            ResourceNotFoundError: Unknown car
            ConflictError: Car already rented
        """
        if not payload.car_id or not payload.renter_name or not payload.start_date or not payload.end_date:
            raise ValidationError("car_id, renter_name, start_date and end_date are required")

        car = await self.store.get_car(payload.car_id)
        if car is None:
            raise ResourceNotFoundError("Car", payload.car_id)
        if not car.available:
            raise ConflictError("Car is not available for rental", details={"car_id": car.id})

        days = inclusive_days(payload.start_date, payload.end_date)
        if days == 0:
            raise ValidationError("Invalid dates")
        total_cost = rental_cost(car.daily_rate, days)

        # Claim and insert finish together even if the caller stops waiting
        return await asyncio.shield(self._claim_and_insert(car, payload, days, total_cost))

    async def _claim_and_insert(
        self, car: CarResponse, payload: RentalCreate, days: int, total_cost: Decimal
    ) -> RentalResponse:
        # Another request may have taken the car since the read in create_rental
        if not await self.store.claim_car(car.id):
            raise ConflictError("Car is not available for rental", details={"car_id": car.id})

        try:
            rental = await self.store.create_rental(
                car_id=car.id,
                renter_name=payload.renter_name,
                start_date=parse_date(payload.start_date),
                end_date=parse_date(payload.end_date),
                total_cost=total_cost,
            )
        except BaseException:
            await self.store.set_car_availability(car.id, True)
            raise

        logger.info("Rental %s created for car %s (%s days, %s)", rental.id, car.id, days, total_cost)
        return rental

    async def update_rental(self, rental_id: int, payload: RentalUpdate) -> RentalUpdateResponse:
        """
        Extend a rental and/or move it to a new status.

        Everything is validated before anything is written.

        Raises:
            ResourceNotFoundError: Unknown rental
            ValidationError: Invalid end_date
            ConflictError: Status change on a returned or cancelled rental
        """
        rental = await self.store.get_rental(rental_id)
        if rental is None:
            raise ResourceNotFoundError("Rental", rental_id)

        changes = {}

        if payload.end_date:
            days = inclusive_days(rental.start_date, payload.end_date)
            if days == 0:
                raise ValidationError("Invalid end_date")
            car = await self.store.get_car(rental.car_id)
            changes["end_date"] = parse_date(payload.end_date)
            changes["total_cost"] = rental_cost(car.daily_rate, days)

        new_status: Optional[RentalStatus] = payload.status
        if new_status is None or new_status == rental.status:
            updated = await self.store.update_rental(rental_id, **changes)
            if updated is None:
                raise ResourceNotFoundError("Rental", rental_id)
        else:
            if rental.status.is_terminal:
                raise _already_closed(rental)

            # Status and car release commit together, and only if nobody
            # moved the rental out of its current status in the meantime
            updated = await self.store.transition_rental(
                rental_id,
                rental.status,
                new_status,
                release_car=new_status == RentalStatus.RETURNED,
                **changes,
            )
            if updated is None:
                current = await self.store.get_rental(rental_id)
                if current is None:
                    raise ResourceNotFoundError("Rental", rental_id)
                raise _already_closed(current)
            changes["status"] = new_status

        logger.info("Rental %s updated: %s", rental_id, sorted(changes))
        return RentalUpdateResponse(
            id=updated.id,
            status=updated.status,
            end_date=updated.end_date,
            total_cost=updated.total_cost,
        )

    async def delete_rental(self, rental_id: int) -> None:
        """Remove a rental. Car availability is left exactly as it was."""
        if not await self.store.delete_rental(rental_id):
            raise ResourceNotFoundError("Rental", rental_id)
        logger.info("Rental %s deleted", rental_id)
