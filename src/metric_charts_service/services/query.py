"""Query engine: ordered series, recent windows and namespace aggregates."""
from __future__ import annotations

from typing import List

from metric_charts_service.domain.models import ChartInfo, MetricPoint, NamespacePage
from metric_charts_service.repositories.base import MetricRepository
from metric_charts_service.services.ingest import validate_stream_key

DEFAULT_PAGE_SIZE = 12


def total_pages_for(count: int, page_size: int) -> int:
    return (count + page_size - 1) // page_size


class MetricQueryService:
    """Read side of the service."""

    def __init__(self, repository: MetricRepository) -> None:
        self._repository = repository

    async def get_series(self, namespace: str, metric_id: str) -> List[MetricPoint]:
        validate_stream_key(namespace, metric_id)
        return await self._repository.get_series(namespace, metric_id)

    async def get_recent_window(self, namespace: str, metric_id: str, limit: int) -> List[MetricPoint]:
        """Up to ``limit`` newest points, returned in chronological order."""
        validate_stream_key(namespace, metric_id)
        if limit <= 0:
            return []
        return await self._repository.get_recent(namespace, metric_id, limit)

    async def get_namespace_summary(
        self, namespace: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> NamespacePage:
        page = max(page, 1)
        total = await self._repository.count_streams(namespace)
        total_pages = total_pages_for(total, page_size)
        stats = await self._repository.list_stream_stats(
            namespace,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return NamespacePage(
            namespace=namespace,
            charts=[ChartInfo.from_stats(item) for item in stats],
            current_page=page,
            total_pages=total_pages,
            has_prev=page > 1,
            has_next=page < total_pages,
        )
