"""
Store contract tests.

Each test runs against the in-memory store and the SQLAlchemy store; both
must behave identically.
"""

import asyncio
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError

from car_rental.app.models.car import Car
from car_rental.app.models.enums import RentalStatus
from car_rental.app.stores.base import StoreIntegrityError


async def _rent(store, car_id=1, cost="105.00", renter="Alice"):
    return await store.create_rental(
        car_id=car_id,
        renter_name=renter,
        start_date=date(2025, 1, 1),
        end_date=date(2025, 1, 3),
        total_cost=Decimal(cost),
    )


@pytest.mark.asyncio
async def test_seeded_cars_in_id_order(store):
    cars = await store.list_cars()

    assert [car.id for car in cars] == [1, 2, 3]
    assert [(car.make, car.model, car.year) for car in cars] == [
        ("Toyota", "Corolla", 2020),
        ("Honda", "Civic", 2019),
        ("Ford", "Focus", 2018),
    ]
    assert [car.daily_rate for car in cars] == [Decimal("35.00"), Decimal("37.50"), Decimal("30.00")]
    assert all(car.available for car in cars)


@pytest.mark.asyncio
async def test_get_car(store):
    car = await store.get_car(2)
    assert car.model == "Civic"
    assert await store.get_car(99) is None


@pytest.mark.asyncio
async def test_create_rental_allocates_ids_and_stamps(store):
    first = await _rent(store)
    second = await _rent(store, car_id=2, cost="187.50", renter="Bob")

    assert first.id == 1
    assert second.id == 2
    assert first.status == RentalStatus.ONGOING
    assert first.total_cost == Decimal("105.00")
    assert first.start_date == date(2025, 1, 1)
    assert first.created_at is not None
    assert first.updated_at is not None


@pytest.mark.asyncio
async def test_create_rental_for_unknown_car_fails(store):
    with pytest.raises(StoreIntegrityError):
        await _rent(store, car_id=42)


@pytest.mark.asyncio
async def test_list_rentals_joins_car_fields_most_recent_first(store):
    await _rent(store, car_id=1, renter="Alice")
    await _rent(store, car_id=2, cost="187.50", renter="Bob")

    rentals = await store.list_rentals()

    assert [r.renter_name for r in rentals] == ["Bob", "Alice"]
    assert rentals[0].make == "Honda"
    assert rentals[0].model == "Civic"
    assert rentals[0].year == 2019
    assert rentals[0].daily_rate == Decimal("37.50")


@pytest.mark.asyncio
async def test_update_rental(store):
    rental = await _rent(store)

    updated = await store.update_rental(
        rental.id,
        end_date=date(2025, 1, 5),
        total_cost=Decimal("175.00"),
        status=RentalStatus.RETURNED,
    )

    assert updated.end_date == date(2025, 1, 5)
    assert updated.total_cost == Decimal("175.00")
    assert updated.status == RentalStatus.RETURNED
    assert updated.updated_at >= rental.updated_at

    fetched = await store.get_rental(rental.id)
    assert fetched.status == RentalStatus.RETURNED


@pytest.mark.asyncio
async def test_update_missing_rental_returns_none(store):
    assert await store.update_rental(404, status=RentalStatus.RETURNED) is None


@pytest.mark.asyncio
async def test_delete_rental(store):
    rental = await _rent(store)

    assert await store.delete_rental(rental.id) is True
    assert await store.get_rental(rental.id) is None
    assert await store.delete_rental(rental.id) is False


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(store):
    first = await _rent(store)
    await store.delete_rental(first.id)
    second = await _rent(store)

    assert second.id > first.id


@pytest.mark.asyncio
async def test_set_car_availability(store):
    await store.set_car_availability(1, False)
    assert (await store.get_car(1)).available is False

    await store.set_car_availability(1, True)
    assert (await store.get_car(1)).available is True


@pytest.mark.asyncio
async def test_claim_car_is_check_and_set(store):
    assert await store.claim_car(1) is True
    assert (await store.get_car(1)).available is False

    # Already taken
    assert await store.claim_car(1) is False
    # Unknown car
    assert await store.claim_car(99) is False


@pytest.mark.asyncio
async def test_concurrent_claims_have_one_winner(memory_store):
    results = await asyncio.gather(*(memory_store.claim_car(3) for _ in range(5)))
    assert results.count(True) == 1


@pytest.mark.asyncio
async def test_transition_rental_applies_fields(store):
    rental = await _rent(store)
    await store.claim_car(1)

    updated = await store.transition_rental(
        rental.id,
        RentalStatus.ONGOING,
        RentalStatus.CANCELLED,
        end_date=date(2025, 1, 5),
        total_cost=Decimal("175.00"),
    )

    assert updated.status == RentalStatus.CANCELLED
    assert updated.end_date == date(2025, 1, 5)
    assert updated.total_cost == Decimal("175.00")
    assert updated.updated_at >= rental.updated_at
    assert (await store.get_rental(rental.id)).status == RentalStatus.CANCELLED
    # Cancelling leaves the car taken
    assert (await store.get_car(1)).available is False


@pytest.mark.asyncio
async def test_transition_rental_releases_car(store):
    rental = await _rent(store)
    await store.claim_car(1)

    updated = await store.transition_rental(
        rental.id, RentalStatus.ONGOING, RentalStatus.RETURNED, release_car=True
    )

    assert updated.status == RentalStatus.RETURNED
    assert (await store.get_car(1)).available is True


@pytest.mark.asyncio
async def test_transition_rental_from_wrong_status_changes_nothing(store):
    rental = await _rent(store)
    await store.update_rental(rental.id, status=RentalStatus.RETURNED)
    # Car re-rented by someone else
    await store.claim_car(1)

    result = await store.transition_rental(
        rental.id,
        RentalStatus.ONGOING,
        RentalStatus.RETURNED,
        release_car=True,
        total_cost=Decimal("1.00"),
    )

    assert result is None
    fetched = await store.get_rental(rental.id)
    assert fetched.status == RentalStatus.RETURNED
    assert fetched.total_cost == Decimal("105.00")
    assert (await store.get_car(1)).available is False


@pytest.mark.asyncio
async def test_transition_missing_rental_returns_none(store):
    result = await store.transition_rental(
        404, RentalStatus.ONGOING, RentalStatus.RETURNED, release_car=True
    )
    assert result is None


@pytest.mark.asyncio
async def test_concurrent_transitions_have_one_winner(memory_store):
    rental = await _rent(memory_store)

    results = await asyncio.gather(*(
        memory_store.transition_rental(rental.id, RentalStatus.ONGOING, RentalStatus.RETURNED)
        for _ in range(5)
    ))

    assert sum(1 for r in results if r is not None) == 1


@pytest.mark.asyncio
async def test_aggregate_excludes_cancelled_from_revenue(store):
    assert (await store.aggregate()).total_revenue == Decimal("0.00")

    ongoing = await _rent(store, car_id=1, cost="105.00")
    returned = await _rent(store, car_id=2, cost="187.50")
    cancelled = await _rent(store, car_id=3, cost="90.00")
    await store.update_rental(returned.id, status=RentalStatus.RETURNED)
    await store.update_rental(cancelled.id, status=RentalStatus.CANCELLED)

    stats = await store.aggregate()

    assert stats.total_rentals == 3
    assert stats.active_rentals == 1
    assert stats.total_revenue == Decimal("292.50")
    assert ongoing.status == RentalStatus.ONGOING


@pytest.mark.asyncio
async def test_database_refuses_to_delete_rented_car(database_store):
    await _rent(database_store, car_id=1)

    async with database_store.session_factory() as db:
        with pytest.raises(IntegrityError):
            await db.execute(delete(Car).where(Car.id == 1))
            await db.commit()


@pytest.mark.asyncio
async def test_database_seeds_only_once(database_store):
    await database_store.initialize()
    assert len(await database_store.list_cars()) == 3
