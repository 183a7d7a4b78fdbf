"""Badge cache controller: conditional-response logic around the renderer."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Sequence

import structlog

from metric_charts_service.domain.models import MetricPoint
from metric_charts_service.services.rasterizer import render_badge_png

logger = structlog.get_logger(__name__)

EMPTY_TOKEN = "empty"
BADGE_CONTENT_TYPE = "image/png"

Renderer = Callable[[Sequence[MetricPoint], str], bytes]


def validation_token(points: Sequence[MetricPoint]) -> str:
    """``"<latest_timestamp>:<count>"`` for a chronological window, else ``"empty"``.

    "Latest" is the newest point, i.e. the last element of the window.
    """
    if not points:
        return EMPTY_TOKEN
    return f"{points[-1].timestamp}:{len(points)}"


def quote_etag(token: str) -> str:
    return f'"{token}"'


def if_none_match_satisfied(header: str | None, etag: str) -> bool:
    """Weak comparison of an ``If-None-Match`` header against our entity tag."""
    if not header:
        return False
    header = header.strip()
    if header == etag or header == "*":
        return True
    for candidate in header.split(","):
        candidate = candidate.strip()
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False


@dataclass(frozen=True, slots=True)
class BadgeResult:
    """Outcome of a badge request, ready to be turned into an HTTP response."""

    status: int
    etag: str
    cache_control: str
    body: bytes | None = None
    content_type: str | None = None

    @property
    def not_modified(self) -> bool:
        return self.status == 304


class BadgeCacheController:
    """Decides between a 304 and a fresh render for a recent-window badge."""

    def __init__(self, max_age_seconds: int = 300, renderer: Renderer = render_badge_png) -> None:
        self._cache_control = f"public, max-age={max_age_seconds}"
        self._renderer = renderer

    async def respond(
        self,
        points: Sequence[MetricPoint],
        label: str,
        if_none_match: str | None = None,
    ) -> BadgeResult:
        token = validation_token(points)
        etag = quote_etag(token)
        if if_none_match_satisfied(if_none_match, etag):
            logger.debug("badge_not_modified", label=label, etag=etag)
            return BadgeResult(status=304, etag=etag, cache_control=self._cache_control)

        loop = asyncio.get_running_loop()
        png = await loop.run_in_executor(None, self._renderer, list(points), label)
        logger.info("badge_rendered", label=label, etag=etag, points=len(points), size=len(png))
        return BadgeResult(
            status=200,
            etag=etag,
            cache_control=self._cache_control,
            body=png,
            content_type=BADGE_CONTENT_TYPE,
        )
