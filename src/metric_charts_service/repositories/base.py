"""Repository contracts and the asyncpg helper base."""
from __future__ import annotations

import abc
import time
from typing import Any, Callable, List

import asyncpg  # type: ignore[import-untyped]
import structlog
from asyncpg import Pool, Record  # type: ignore[import-untyped]

from metric_charts_service.core.exceptions import StorageError
from metric_charts_service.domain.models import MetricPoint, MetricSample, StreamStats

logger = structlog.get_logger(__name__)

Clock = Callable[[], int]


def wall_clock() -> int:
    """Current wall-clock time in whole seconds."""
    return int(time.time())


class MetricRepository(abc.ABC):
    """Append-only store of metric samples plus the reads built on it.

    Implementations stamp timestamps themselves and must make the owner check
    and the insert a single atomic step.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or wall_clock

    @abc.abstractmethod
    async def append(
        self, namespace: str, metric_id: str, value: float, owner_token: str | None = None
    ) -> MetricSample:
        """Insert one sample, raising PermissionDeniedError on owner conflict.

        An empty ``owner_token`` is stored as no token.
        """

    @abc.abstractmethod
    async def get_series(self, namespace: str, metric_id: str) -> List[MetricPoint]:
        """All points of a stream, oldest first."""

    @abc.abstractmethod
    async def get_recent(self, namespace: str, metric_id: str, limit: int) -> List[MetricPoint]:
        """Up to ``limit`` newest points of a stream, oldest first."""

    @abc.abstractmethod
    async def count_streams(self, namespace: str) -> int:
        """Number of distinct ids in a namespace."""

    @abc.abstractmethod
    async def list_stream_stats(
        self, namespace: str, *, limit: int, offset: int
    ) -> List[StreamStats]:
        """Per-id aggregates, most recently updated first."""


class BaseRepository:
    """Thin asyncpg wrappers that turn driver failures into StorageError."""

    def __init__(self, pool: Pool):
        self._pool = pool

    async def _fetch(self, query: str, *args: Any) -> List[Record]:
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetch(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("storage_error", operation="fetch", error=str(exc))
            raise StorageError() from exc

    async def _fetchval(self, query: str, *args: Any) -> Any:
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetchval(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("storage_error", operation="fetchval", error=str(exc))
            raise StorageError() from exc
