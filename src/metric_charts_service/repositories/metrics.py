"""Metric sample repository backed by asyncpg."""
from __future__ import annotations

from typing import List

import asyncpg  # type: ignore[import-untyped]
import structlog
from asyncpg import Pool, Record  # type: ignore[import-untyped]

from metric_charts_service.core.exceptions import PermissionDeniedError, StorageError
from metric_charts_service.domain.models import MetricPoint, MetricSample, StreamStats
from metric_charts_service.repositories.base import BaseRepository, Clock, MetricRepository

logger = structlog.get_logger(__name__)


class PostgresMetricRepository(BaseRepository, MetricRepository):
    """Samples stored in the ``metrics`` table."""

    def __init__(self, pool: Pool, clock: Clock | None = None):
        BaseRepository.__init__(self, pool)
        MetricRepository.__init__(self, clock)

    @staticmethod
    def _to_point(record: Record) -> MetricPoint:
        return MetricPoint(timestamp=int(record["timestamp"]), value=float(record["value"]))

    async def append(
        self, namespace: str, metric_id: str, value: float, owner_token: str | None = None
    ) -> MetricSample:
        owner_token = owner_token or None
        timestamp = self._clock()
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    if owner_token:
                        # Serializes claimed writes per stream so two first
                        # writers cannot both pass the NOT EXISTS check.
                        await conn.execute(
                            "SELECT pg_advisory_xact_lock(hashtext($1), hashtext($2))",
                            namespace,
                            metric_id,
                        )
                    record = await conn.fetchrow(
                        """
                        INSERT INTO metrics (namespace, id, value, timestamp, owner_token)
                        SELECT $1::text, $2::text, $3::float8, $4::bigint, $5::text
                        WHERE $5::text IS NULL OR NOT EXISTS (
                            SELECT 1
                            FROM metrics
                            WHERE namespace = $1
                              AND id = $2
                              AND owner_token IS NOT NULL
                              AND owner_token <> ''
                              AND owner_token <> $5
                        )
                        RETURNING seq, namespace, id, value, timestamp, owner_token
                        """,
                        namespace,
                        metric_id,
                        value,
                        timestamp,
                        owner_token,
                    )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.error("storage_error", operation="append", error=str(exc))
            raise StorageError() from exc
        if record is None:
            raise PermissionDeniedError()
        return MetricSample.from_row(dict(record))

    async def get_series(self, namespace: str, metric_id: str) -> List[MetricPoint]:
        records = await self._fetch(
            """
            SELECT value, timestamp
            FROM metrics
            WHERE namespace = $1 AND id = $2
            ORDER BY timestamp ASC, seq ASC
            """,
            namespace,
            metric_id,
        )
        return [self._to_point(rec) for rec in records]

    async def get_recent(self, namespace: str, metric_id: str, limit: int) -> List[MetricPoint]:
        records = await self._fetch(
            """
            SELECT value, timestamp
            FROM metrics
            WHERE namespace = $1 AND id = $2
            ORDER BY timestamp DESC, seq DESC
            LIMIT $3
            """,
            namespace,
            metric_id,
            limit,
        )
        points = [self._to_point(rec) for rec in records]
        points.reverse()
        return points

    async def count_streams(self, namespace: str) -> int:
        count = await self._fetchval(
            "SELECT COUNT(DISTINCT id) FROM metrics WHERE namespace = $1",
            namespace,
        )
        return int(count or 0)

    async def list_stream_stats(
        self, namespace: str, *, limit: int, offset: int
    ) -> List[StreamStats]:
        records = await self._fetch(
            """
            SELECT id,
                   COUNT(*) AS point_count,
                   MAX(timestamp) AS last_timestamp
            FROM metrics
            WHERE namespace = $1
            GROUP BY id
            ORDER BY MAX(timestamp) DESC, id ASC
            LIMIT $2 OFFSET $3
            """,
            namespace,
            limit,
            offset,
        )
        return [
            StreamStats(
                id=rec["id"],
                point_count=int(rec["point_count"]),
                last_timestamp=int(rec["last_timestamp"]) if rec["last_timestamp"] is not None else None,
            )
            for rec in records
        ]
