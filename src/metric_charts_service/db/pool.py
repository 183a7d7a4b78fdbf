"""Asyncpg connection pool helpers."""
from __future__ import annotations

from importlib import resources
from typing import Any

import asyncpg  # type: ignore[import-untyped]
import structlog

from metric_charts_service.settings import settings

logger = structlog.get_logger(__name__)

pool: asyncpg.Pool | None = None


def load_schema_sql() -> str:
    """Return the bundled DDL for the ``metrics`` table."""
    return (
        resources.files("metric_charts_service.db")
        .joinpath("schemas")
        .joinpath("postgresql")
        .joinpath("metric_charts_service.sql")
        .read_text(encoding="utf-8")
    )


async def apply_schema(target: asyncpg.Pool) -> None:
    async with target.acquire() as conn:
        await conn.execute(load_schema_sql())


async def init_pool(_app: Any = None) -> asyncpg.Pool:
    """Initialize global asyncpg pool."""
    global pool
    if pool is None:
        pool = await asyncpg.create_pool(
            dsn=str(settings.database_url),
            max_size=settings.db_pool_size,
        )
        logger.info("db_pool_initialized", max_size=settings.db_pool_size)
        if settings.db_apply_schema:
            await apply_schema(pool)
            logger.info("db_schema_applied")
    assert pool is not None  # for type checkers
    return pool


async def close_pool(_app: Any = None) -> None:
    """Close pool on shutdown."""
    global pool
    if pool is not None:
        await pool.close()
        pool = None

