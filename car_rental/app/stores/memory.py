"""
In-memory rental store.

Used when the database is unreachable at startup. Data lives for the
lifetime of the process only. All mutations go through a single
asyncio lock so check-and-set operations cannot interleave.
"""

import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from car_rental.app.models.enums import RentalStatus, REVENUE_STATUSES
from car_rental.app.schemas.car import CarResponse
from car_rental.app.schemas.rental import RentalResponse, RentalWithCarResponse
from car_rental.app.schemas.metrics import RentalAggregate
from car_rental.app.domain.rentals.pricing import to_money
from car_rental.app.stores.base import RentalStore, StoreIntegrityError, SEED_CARS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRentalStore(RentalStore):
    """Volatile store seeded with the same fleet as the database."""

    backend = "memory"

    def __init__(self, seed=SEED_CARS):
        self._lock = asyncio.Lock()
        self._cars: Dict[int, CarResponse] = {}
        self._rentals: Dict[int, RentalResponse] = {}
        self._next_car_id = 1
        self._next_rental_id = 1

        for make, model, year, daily_rate in seed:
            car = CarResponse(
                id=self._next_car_id,
                make=make,
                model=model,
                year=year,
                daily_rate=to_money(daily_rate),
                available=True,
                created_at=_utcnow(),
            )
            self._cars[car.id] = car
            self._next_car_id += 1

    async def list_cars(self) -> List[CarResponse]:
        return [self._cars[car_id].model_copy() for car_id in sorted(self._cars)]

    async def get_car(self, car_id: int) -> Optional[CarResponse]:
        car = self._cars.get(car_id)
        return car.model_copy() if car else None

    async def list_rentals(self) -> List[RentalWithCarResponse]:
        rentals = sorted(
            self._rentals.values(),
            key=lambda r: (r.created_at, r.id),
            reverse=True,
        )
        rows = []
        for rental in rentals:
            car = self._cars.get(rental.car_id)
            rows.append(RentalWithCarResponse(
                **rental.model_dump(),
                make=car.make if car else None,
                model=car.model if car else None,
                year=car.year if car else None,
                daily_rate=car.daily_rate if car else None,
            ))
        return rows

    async def get_rental(self, rental_id: int) -> Optional[RentalResponse]:
        rental = self._rentals.get(rental_id)
        return rental.model_copy() if rental else None

    async def create_rental(
        self,
        car_id: int,
        renter_name: str,
        start_date: date,
        end_date: date,
        total_cost: Decimal,
    ) -> RentalResponse:
        async with self._lock:
            if car_id not in self._cars:
                raise StoreIntegrityError(f"car {car_id} does not exist")

            now = _utcnow()
            rental = RentalResponse(
                id=self._next_rental_id,
                car_id=car_id,
                renter_name=renter_name,
                start_date=start_date,
                end_date=end_date,
                total_cost=to_money(total_cost),
                status=RentalStatus.ONGOING,
                created_at=now,
                updated_at=now,
            )
            self._rentals[rental.id] = rental
            self._next_rental_id += 1
            return rental.model_copy()

    async def update_rental(self, rental_id: int, **fields) -> Optional[RentalResponse]:
        async with self._lock:
            rental = self._rentals.get(rental_id)
            if rental is None:
                return None

            if "total_cost" in fields:
                fields["total_cost"] = to_money(fields["total_cost"])
            fields["updated_at"] = _utcnow()
            updated = rental.model_copy(update=fields)
            self._rentals[rental_id] = updated
            return updated.model_copy()

    async def transition_rental(
        self,
        rental_id: int,
        from_status: RentalStatus,
        to_status: RentalStatus,
        release_car: bool = False,
        **fields,
    ) -> Optional[RentalResponse]:
        async with self._lock:
            rental = self._rentals.get(rental_id)
            if rental is None or rental.status != from_status:
                return None

            if "total_cost" in fields:
                fields["total_cost"] = to_money(fields["total_cost"])
            fields["status"] = to_status
            fields["updated_at"] = _utcnow()
            updated = rental.model_copy(update=fields)
            self._rentals[rental_id] = updated

            car = self._cars.get(updated.car_id)
            if release_car and car is not None:
                self._cars[car.id] = car.model_copy(update={"available": True})
            return updated.model_copy()

    async def delete_rental(self, rental_id: int) -> bool:
        async with self._lock:
            return self._rentals.pop(rental_id, None) is not None

    async def set_car_availability(self, car_id: int, available: bool) -> None:
        async with self._lock:
            car = self._cars.get(car_id)
            if car is not None:
                self._cars[car_id] = car.model_copy(update={"available": available})

    async def claim_car(self, car_id: int) -> bool:
        async with self._lock:
            car = self._cars.get(car_id)
            if car is None or not car.available:
                return False
            self._cars[car_id] = car.model_copy(update={"available": False})
            return True

    async def aggregate(self) -> RentalAggregate:
        rentals = list(self._rentals.values())
        revenue = sum(
            (r.total_cost for r in rentals if r.status in REVENUE_STATUSES),
            Decimal("0"),
        )
        return RentalAggregate(
            total_rentals=len(rentals),
            active_rentals=sum(1 for r in rentals if r.status == RentalStatus.ONGOING),
            total_revenue=to_money(revenue),
        )
