from __future__ import annotations

from pathlib import Path

import pytest
from testsuite.databases.pgsql import discover

from metric_charts_service.main import create_app
from metric_charts_service.repositories.memory import InMemoryMetricRepository
from metric_charts_service.services.dependencies import REPOSITORY_KEY
from metric_charts_service.settings import settings

pytest_plugins = (
    "testsuite.pytest_plugin",
    "testsuite.databases.pgsql.pytest_plugin",
)

PG_SCHEMAS_PATH = (
    Path(__file__).resolve().parent.parent
    / "src"
    / "metric_charts_service"
    / "db"
    / "schemas"
    / "postgresql"
)


class FakeClock:
    """Settable stand-in for the store's wall clock."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int = 1) -> int:
        self.now += seconds
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository(clock) -> InMemoryMetricRepository:
    return InMemoryMetricRepository(clock=clock)


@pytest.fixture
async def service_client(aiohttp_client, repository, monkeypatch):
    monkeypatch.setattr(settings, "storage_backend", "memory")
    app = create_app()
    app[REPOSITORY_KEY] = repository
    return await aiohttp_client(app)


@pytest.fixture(scope="session")
def pgsql_local(pgsql_local_create):
    databases = discover.find_schemas(
        service_name=None,
        schema_dirs=[PG_SCHEMAS_PATH],
    )
    return pgsql_local_create(list(databases.values()))


@pytest.fixture
def database_uri(pgsql) -> str:
    return pgsql["metric_charts_service"].conninfo.get_uri()


@pytest.fixture
async def pg_service_client(aiohttp_client, database_uri, monkeypatch):
    monkeypatch.setattr(settings, "storage_backend", "postgres")
    monkeypatch.setattr(settings, "database_url", database_uri)
    app = create_app()
    return await aiohttp_client(app)
