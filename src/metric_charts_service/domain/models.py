"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

LAST_UPDATED_FORMAT = "%Y-%m-%d %H:%M:%S UTC"
UNKNOWN_LAST_UPDATED = "Unknown"


@dataclass(frozen=True, slots=True)
class MetricSample:
    """One immutable stored observation of a stream."""

    namespace: str
    id: str
    value: float
    timestamp: int
    owner_token: str | None = None
    seq: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> MetricSample:
        """Create MetricSample from database row."""
        return cls(
            namespace=row["namespace"],
            id=row["id"],
            value=float(row["value"]),
            timestamp=int(row["timestamp"]),
            owner_token=row.get("owner_token"),
            seq=row.get("seq"),
        )


@dataclass(frozen=True, slots=True)
class MetricPoint:
    """(timestamp, value) pair as exposed to chart and badge consumers."""

    timestamp: int
    value: float

    def to_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, "value": self.value}


@dataclass(frozen=True, slots=True)
class StreamStats:
    """Aggregate of one stream inside a namespace."""

    id: str
    point_count: int
    last_timestamp: int | None


@dataclass(frozen=True, slots=True)
class ChartInfo:
    """One row of the namespace summary."""

    id: str
    point_count: int
    last_updated: str

    @classmethod
    def from_stats(cls, stats: StreamStats) -> ChartInfo:
        return cls(
            id=stats.id,
            point_count=stats.point_count,
            last_updated=format_last_updated(stats.last_timestamp),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "point_count": self.point_count,
            "last_updated": self.last_updated,
        }


@dataclass(frozen=True, slots=True)
class NamespacePage:
    """One page of the per-namespace summary."""

    namespace: str
    charts: list[ChartInfo]
    current_page: int
    total_pages: int
    has_prev: bool
    has_next: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "charts": [chart.to_dict() for chart in self.charts],
            "current_page": self.current_page,
            "total_pages": self.total_pages,
            "has_prev": self.has_prev,
            "has_next": self.has_next,
        }


def format_last_updated(timestamp: int | None) -> str:
    if timestamp is None:
        return UNKNOWN_LAST_UPDATED
    try:
        dt = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_LAST_UPDATED
    return dt.strftime(LAST_UPDATED_FORMAT)
