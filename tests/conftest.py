import os
from typing import Dict, Iterator, List

import pytest

from assetsvc.core.dependencies import reset_dependencies
from assetsvc.domain.lookup import ChartLookupService
from assetsvc.domain.models import Chart, Repo
from assetsvc.storage.chart_store import ChartStore
from assetsvc.storage.memory_store import InMemoryChartStore
from assetsvc.storage.sqlite_store import SqliteChartStore

# Postgres tests are skipped entirely unless ENABLE_PG_INTEGRATION_TESTS is set.
PG_ENABLED = os.environ.get("ENABLE_PG_INTEGRATION_TESTS", "").lower() in {"1", "true", "yes"}
PG_DSN = os.environ.get("ASSETSVC_TEST_POSTGRES_DSN", "postgresql://postgres@localhost:5432/postgres")

REPO_NAME = "repo-name"


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("ASSETSVC_DATA_DIR", str(tmp_path / "data"))
    for var in (
        "ASSETSVC_CONFIG_FILE",
        "ASSETSVC_DATABASE_BACKEND",
        "ASSETSVC_DATABASE_PATH",
        "ASSETSVC_POSTGRES_DSN",
        "ASSETSVC_DEFAULT_PAGE_SIZE",
        "ASSETSVC_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_dependencies()
    yield
    reset_dependencies()


def _postgres_store() -> ChartStore:
    from assetsvc.storage.postgres_store import PostgresChartStore

    import psycopg

    with psycopg.connect(PG_DSN) as conn:
        conn.execute("DROP TABLE IF EXISTS charts, files")
    return PostgresChartStore(PG_DSN)


@pytest.fixture(
    params=[
        "memory",
        "sqlite",
        pytest.param(
            "postgres",
            marks=pytest.mark.skipif(not PG_ENABLED, reason="Set ENABLE_PG_INTEGRATION_TESTS to run postgres tests"),
        ),
    ]
)
def store(request, tmp_path) -> Iterator[ChartStore]:
    if request.param == "memory":
        s: ChartStore = InMemoryChartStore()
    elif request.param == "sqlite":
        s = SqliteChartStore(tmp_path / "charts.db")
    else:
        s = _postgres_store()
    s.initialize()
    yield s
    s.close()


@pytest.fixture
def service(store: ChartStore) -> ChartLookupService:
    return ChartLookupService(store)


def ensure_charts_exist(store: ChartStore, charts_by_namespace: Dict[str, List[Chart]]) -> None:
    for namespace, charts in charts_by_namespace.items():
        store.save_charts(Repo(name=REPO_NAME, namespace=namespace), charts)
