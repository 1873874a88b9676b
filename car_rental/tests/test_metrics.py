"""
Metrics snapshot tests.
"""

import time

import pytest

from car_rental.app.models.enums import RentalStatus
from car_rental.app.schemas.rental import RentalCreate, RentalUpdate
from car_rental.app.services.metrics import MetricsService, RequestMetrics
from car_rental.app.services.rentals import RentalService


@pytest.mark.asyncio
async def test_empty_snapshot(store):
    snapshot = await MetricsService(store, RequestMetrics()).snapshot()

    assert snapshot.status == "healthy"
    assert snapshot.rentals.total == 0
    assert snapshot.rentals.active == 0
    assert snapshot.rentals.completed == 0
    assert snapshot.revenue.total == "0.00"
    assert snapshot.revenue.currency == "USD"
    assert snapshot.requests.total == 0
    assert snapshot.storage == store.backend


@pytest.mark.asyncio
async def test_cancelled_counts_as_completed_but_not_revenue(store):
    rentals = RentalService(store)
    kept = await rentals.create_rental(RentalCreate(
        car_id=1, renter_name="Alice", start_date="2025-01-01", end_date="2025-01-03"
    ))
    dropped = await rentals.create_rental(RentalCreate(
        car_id=2, renter_name="Bob", start_date="2025-01-01", end_date="2025-01-05"
    ))
    await rentals.update_rental(dropped.id, RentalUpdate(status=RentalStatus.CANCELLED))

    snapshot = await MetricsService(store, RequestMetrics()).snapshot()

    assert snapshot.rentals.total == 2
    assert snapshot.rentals.active == 1
    assert snapshot.rentals.completed == 1
    assert snapshot.rentals.total == snapshot.rentals.active + snapshot.rentals.completed
    assert snapshot.revenue.total == "105.00"
    assert kept.status == RentalStatus.ONGOING


def test_request_metrics_counts_and_uptime():
    metrics = RequestMetrics(start_time=time.time() - 42.7)
    for _ in range(3):
        metrics.record_request()

    assert metrics.request_count == 3
    assert metrics.uptime_seconds() in (42, 43)
