"""
Metrics Service.

Point-in-time operational statistics for the /metrics endpoint.
Focused on READ-ONLY operations.
"""

import time
from datetime import datetime, timezone

from car_rental.app.domain.rentals.pricing import format_money
from car_rental.app.schemas.metrics import (
    MetricsResponse, RentalStats, RevenueStats, RequestStats
)
from car_rental.app.stores.base import RentalStore


class RequestMetrics:
    """
    Process-scoped request counter and start time.

    One instance per application, created at startup and owned by
    `app.state`; the observability middleware is the only writer.
    """

    def __init__(self, start_time: float = None):
        self.start_time = start_time if start_time is not None else time.time()
        self.request_count = 0

    def record_request(self) -> None:
        self.request_count += 1

    def uptime_seconds(self) -> int:
        return int(time.time() - self.start_time)


class MetricsService:

    def __init__(self, store: RentalStore, request_metrics: RequestMetrics):
        self.store = store
        self.request_metrics = request_metrics

    async def snapshot(self) -> MetricsResponse:
        """
        Build the metrics snapshot.

        `completed` is total minus active, so cancelled rentals count as
        completed here even though revenue leaves them out.
        """
        stats = await self.store.aggregate()

        return MetricsResponse(
            timestamp=datetime.now(timezone.utc),
            uptime_seconds=self.request_metrics.uptime_seconds(),
            storage=self.store.backend,
            rentals=RentalStats(
                total=stats.total_rentals,
                active=stats.active_rentals,
                completed=stats.total_rentals - stats.active_rentals,
            ),
            revenue=RevenueStats(total=format_money(stats.total_revenue)),
            requests=RequestStats(total=self.request_metrics.request_count),
        )
