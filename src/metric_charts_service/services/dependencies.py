"""Wiring of the repository and services into the aiohttp application."""
from __future__ import annotations

import structlog
from aiohttp import web

from metric_charts_service.db.pool import close_pool, init_pool
from metric_charts_service.repositories.base import MetricRepository
from metric_charts_service.repositories.memory import InMemoryMetricRepository
from metric_charts_service.repositories.metrics import PostgresMetricRepository
from metric_charts_service.services.badge import BadgeCacheController
from metric_charts_service.services.ingest import MetricIngestService
from metric_charts_service.services.query import MetricQueryService
from metric_charts_service.settings import settings

logger = structlog.get_logger(__name__)

REPOSITORY_KEY = web.AppKey("metric_repository", MetricRepository)


async def init_repository(app: web.Application) -> None:
    """Startup hook: pick the storage backend unless one is already set."""
    if REPOSITORY_KEY in app:
        return
    if settings.storage_backend == "memory":
        app[REPOSITORY_KEY] = InMemoryMetricRepository()
    else:
        pool = await init_pool(app)
        app[REPOSITORY_KEY] = PostgresMetricRepository(pool)
    logger.info("storage_ready", backend=settings.storage_backend)


async def close_repository(app: web.Application) -> None:
    if settings.storage_backend == "postgres":
        await close_pool(app)


def get_repository(request: web.Request) -> MetricRepository:
    return request.app[REPOSITORY_KEY]


def get_ingest_service(request: web.Request) -> MetricIngestService:
    return MetricIngestService(get_repository(request))


def get_query_service(request: web.Request) -> MetricQueryService:
    return MetricQueryService(get_repository(request))


def get_badge_controller(_request: web.Request) -> BadgeCacheController:
    return BadgeCacheController(max_age_seconds=settings.badge_max_age_seconds)
