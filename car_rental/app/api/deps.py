"""
FastAPI dependencies.

The store and request metrics are created once per application (see
`main.lifespan`) and live on `app.state`; endpoints get services built
around them through these dependencies.
"""

import asyncio
from typing import Awaitable, TypeVar

from fastapi import Depends, Request

from car_rental.app.core.config import settings
from car_rental.app.services.metrics import MetricsService, RequestMetrics
from car_rental.app.services.rentals import RentalService
from car_rental.app.stores.base import RentalStore

T = TypeVar("T")


def get_store(request: Request) -> RentalStore:
    return request.app.state.store


def get_request_metrics(request: Request) -> RequestMetrics:
    return request.app.state.metrics


def get_rental_service(store: RentalStore = Depends(get_store)) -> RentalService:
    return RentalService(store)


def get_metrics_service(
    store: RentalStore = Depends(get_store),
    request_metrics: RequestMetrics = Depends(get_request_metrics),
) -> MetricsService:
    return MetricsService(store, request_metrics)


async def bounded(operation: Awaitable[T]) -> T:
    """
    Await a service call, giving up after `request_timeout_seconds`.

    The caller stops waiting; work already sent to the store is not rolled back.
    """
    return await asyncio.wait_for(operation, timeout=settings.request_timeout_seconds)
