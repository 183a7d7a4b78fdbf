"""Ingest store: appends immutable samples and enforces stream ownership."""
from __future__ import annotations

import structlog

from metric_charts_service.core.exceptions import PermissionDeniedError, ValidationError
from metric_charts_service.domain.models import MetricSample
from metric_charts_service.repositories.base import MetricRepository

logger = structlog.get_logger(__name__)

MAX_KEY_LENGTH = 255

# GET /health is the health check, so a namespace by that name could never be listed
RESERVED_NAMESPACES = frozenset({"health"})


def validate_stream_key(namespace: str, metric_id: str) -> None:
    for label, value in (("namespace", namespace), ("id", metric_id)):
        if not value:
            raise ValidationError(f"{label} must not be empty")
        if len(value) > MAX_KEY_LENGTH:
            raise ValidationError(f"{label} must be at most {MAX_KEY_LENGTH} characters")


class MetricIngestService:
    """Write side of the service."""

    def __init__(self, repository: MetricRepository) -> None:
        self._repository = repository

    async def append_sample(
        self,
        namespace: str,
        metric_id: str,
        value: float,
        owner_token: str | None = None,
    ) -> MetricSample:
        """Append one sample stamped with the store's wall clock.

        A non-empty ``owner_token`` claims an unowned stream and must match the
        owner of an already claimed one. Writes without a token are always
        accepted.
        """
        validate_stream_key(namespace, metric_id)
        if namespace in RESERVED_NAMESPACES:
            raise ValidationError(f"namespace {namespace!r} is reserved")
        token = owner_token.strip() if owner_token else None
        try:
            sample = await self._repository.append(namespace, metric_id, value, token or None)
        except PermissionDeniedError:
            logger.warning("owner_conflict", namespace=namespace, metric_id=metric_id)
            raise
        logger.info(
            "sample_appended",
            namespace=namespace,
            metric_id=metric_id,
            timestamp=sample.timestamp,
            owned=sample.owner_token is not None,
        )
        return sample
