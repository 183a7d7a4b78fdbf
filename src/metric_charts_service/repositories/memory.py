"""In-process metric repository for development and tests."""
from __future__ import annotations

import asyncio
import itertools
from collections import defaultdict
from typing import List

from metric_charts_service.core.exceptions import PermissionDeniedError
from metric_charts_service.domain.models import MetricPoint, MetricSample, StreamStats
from metric_charts_service.repositories.base import Clock, MetricRepository


class InMemoryMetricRepository(MetricRepository):
    """Keeps every stream as a list of samples in insertion order.

    Nothing survives a restart; intended for ``storage_backend=memory``.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        super().__init__(clock)
        self._streams: dict[tuple[str, str], list[MetricSample]] = defaultdict(list)
        self._owners: dict[tuple[str, str], str] = {}
        self._seq = itertools.count(1)
        self._lock = asyncio.Lock()

    async def append(
        self, namespace: str, metric_id: str, value: float, owner_token: str | None = None
    ) -> MetricSample:
        owner_token = owner_token or None
        key = (namespace, metric_id)
        async with self._lock:
            if owner_token:
                owner = self._owners.get(key)
                if owner is not None and owner != owner_token:
                    raise PermissionDeniedError()
                self._owners.setdefault(key, owner_token)
            sample = MetricSample(
                namespace=namespace,
                id=metric_id,
                value=value,
                timestamp=self._clock(),
                owner_token=owner_token,
                seq=next(self._seq),
            )
            self._streams[key].append(sample)
        return sample

    def _ordered(self, namespace: str, metric_id: str) -> list[MetricSample]:
        samples = self._streams.get((namespace, metric_id), [])
        return sorted(samples, key=lambda s: (s.timestamp, s.seq))

    async def get_series(self, namespace: str, metric_id: str) -> List[MetricPoint]:
        return [MetricPoint(s.timestamp, s.value) for s in self._ordered(namespace, metric_id)]

    async def get_recent(self, namespace: str, metric_id: str, limit: int) -> List[MetricPoint]:
        if limit <= 0:
            return []
        window = self._ordered(namespace, metric_id)[-limit:]
        return [MetricPoint(s.timestamp, s.value) for s in window]

    async def count_streams(self, namespace: str) -> int:
        return sum(1 for ns, _ in self._streams if ns == namespace)

    async def list_stream_stats(
        self, namespace: str, *, limit: int, offset: int
    ) -> List[StreamStats]:
        stats = [
            StreamStats(
                id=metric_id,
                point_count=len(samples),
                last_timestamp=max(s.timestamp for s in samples),
            )
            for (ns, metric_id), samples in self._streams.items()
            if ns == namespace and samples
        ]
        stats.sort(key=lambda s: (-(s.last_timestamp or 0), s.id))
        return stats[offset : offset + limit]
