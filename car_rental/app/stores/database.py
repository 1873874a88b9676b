"""
SQLAlchemy rental store.

The durable backend of record. Each operation runs in its own session and
commits before returning, so readers (listings, metrics) always see
committed state.
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine

from car_rental.app.db.session import Base, build_session_factory
from car_rental.app.models.car import Car
from car_rental.app.models.rental import Rental
from car_rental.app.models.enums import RentalStatus, REVENUE_STATUSES
from car_rental.app.schemas.car import CarResponse
from car_rental.app.schemas.rental import RentalResponse, RentalWithCarResponse
from car_rental.app.schemas.metrics import RentalAggregate
from car_rental.app.domain.rentals.pricing import to_money
from car_rental.app.stores.base import RentalStore, StoreIntegrityError, SEED_CARS

logger = logging.getLogger("car_rental")


class SQLAlchemyRentalStore(RentalStore):
    """Durable store backed by a relational database."""

    backend = "database"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_factory = build_session_factory(engine)

    async def initialize(self) -> None:
        """
        Ensure tables exist and seed the fleet on first run.

        Raises whatever the driver raises if the database is unreachable.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        async with self.session_factory() as db:
            count = (await db.execute(select(func.count(Car.id)))).scalar() or 0
            if count == 0:
                for make, model, year, daily_rate in SEED_CARS:
                    db.add(Car(make=make, model=model, year=year, daily_rate=daily_rate, available=True))
                await db.commit()
                logger.info("Seeded %d sample cars", len(SEED_CARS))

    async def close(self) -> None:
        await self.engine.dispose()

    async def list_cars(self) -> List[CarResponse]:
        async with self.session_factory() as db:
            result = await db.execute(select(Car).order_by(Car.id))
            return [CarResponse.model_validate(car) for car in result.scalars().all()]

    async def get_car(self, car_id: int) -> Optional[CarResponse]:
        async with self.session_factory() as db:
            car = await db.get(Car, car_id)
            return CarResponse.model_validate(car) if car else None

    async def list_rentals(self) -> List[RentalWithCarResponse]:
        query = select(
            Rental, Car.make, Car.model, Car.year, Car.daily_rate
        ).join(Car, Rental.car_id == Car.id)\
         .order_by(Rental.created_at.desc(), Rental.id.desc())

        async with self.session_factory() as db:
            result = await db.execute(query)
            rows = []
            for rental, make, model, year, daily_rate in result:
                rows.append(RentalWithCarResponse(
                    **RentalResponse.model_validate(rental).model_dump(),
                    make=make,
                    model=model,
                    year=year,
                    daily_rate=to_money(daily_rate),
                ))
            return rows

    async def get_rental(self, rental_id: int) -> Optional[RentalResponse]:
        async with self.session_factory() as db:
            rental = await db.get(Rental, rental_id)
            return RentalResponse.model_validate(rental) if rental else None

    async def create_rental(
        self,
        car_id: int,
        renter_name: str,
        start_date: date,
        end_date: date,
        total_cost: Decimal,
    ) -> RentalResponse:
        now = datetime.now(timezone.utc)
        rental = Rental(
            car_id=car_id,
            renter_name=renter_name,
            start_date=start_date,
            end_date=end_date,
            total_cost=to_money(total_cost),
            status=RentalStatus.ONGOING,
            created_at=now,
            updated_at=now,
        )

        async with self.session_factory() as db:
            db.add(rental)
            try:
                await db.commit()
            except IntegrityError as exc:
                await db.rollback()
                raise StoreIntegrityError(f"car {car_id} does not exist") from exc
            await db.refresh(rental)
            return RentalResponse.model_validate(rental)

    async def update_rental(self, rental_id: int, **fields) -> Optional[RentalResponse]:
        async with self.session_factory() as db:
            rental = await db.get(Rental, rental_id)
            if rental is None:
                return None

            if "total_cost" in fields:
                fields["total_cost"] = to_money(fields["total_cost"])
            for field, value in fields.items():
                setattr(rental, field, value)
            rental.updated_at = datetime.now(timezone.utc)

            await db.commit()
            await db.refresh(rental)
            return RentalResponse.model_validate(rental)

    async def transition_rental(
        self,
        rental_id: int,
        from_status: RentalStatus,
        to_status: RentalStatus,
        release_car: bool = False,
        **fields,
    ) -> Optional[RentalResponse]:
        if "total_cost" in fields:
            fields["total_cost"] = to_money(fields["total_cost"])

        async with self.session_factory() as db:
            # Conditional UPDATE: only one caller can move the rental out of from_status
            result = await db.execute(
                update(Rental)
                .where(Rental.id == rental_id, Rental.status == from_status)
                .values(status=to_status, updated_at=datetime.now(timezone.utc), **fields)
            )
            if result.rowcount != 1:
                await db.rollback()
                return None

            rental = await db.get(Rental, rental_id)
            if release_car:
                await db.execute(update(Car).where(Car.id == rental.car_id).values(available=True))

            await db.commit()
            await db.refresh(rental)
            return RentalResponse.model_validate(rental)

    async def delete_rental(self, rental_id: int) -> bool:
        async with self.session_factory() as db:
            result = await db.execute(delete(Rental).where(Rental.id == rental_id))
            await db.commit()
            return result.rowcount > 0

    async def set_car_availability(self, car_id: int, available: bool) -> None:
        async with self.session_factory() as db:
            await db.execute(update(Car).where(Car.id == car_id).values(available=available))
            await db.commit()

    async def claim_car(self, car_id: int) -> bool:
        # Single conditional UPDATE: the row lock makes check-and-set atomic
        async with self.session_factory() as db:
            result = await db.execute(
                update(Car)
                .where(Car.id == car_id, Car.available == True)
                .values(available=False)
            )
            await db.commit()
            return result.rowcount == 1

    async def aggregate(self) -> RentalAggregate:
        async with self.session_factory() as db:
            total = (await db.execute(select(func.count(Rental.id)))).scalar() or 0
            active = (await db.execute(
                select(func.count(Rental.id)).where(Rental.status == RentalStatus.ONGOING)
            )).scalar() or 0
            revenue = (await db.execute(
                select(func.coalesce(func.sum(Rental.total_cost), 0)).where(
                    Rental.status.in_(REVENUE_STATUSES)
                )
            )).scalar()

        return RentalAggregate(
            total_rentals=total,
            active_rentals=active,
            total_revenue=to_money(revenue),
        )
