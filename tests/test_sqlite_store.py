import sqlite3
from datetime import datetime, timezone

import pytest

from assetsvc.domain.lookup import ChartLookupService
from assetsvc.domain.models import Chart, ChartVersion, Repo
from assetsvc.storage.sqlite_store import MIGRATIONS, SqliteChartStore


def test_initialize_is_idempotent(tmp_path) -> None:
    db_path = tmp_path / "nested" / "charts.db"
    store = SqliteChartStore(db_path)
    store.initialize()
    store.initialize()

    conn = sqlite3.connect(str(db_path))
    try:
        versions = [row[0] for row in conn.execute("SELECT version FROM migrations")]
    finally:
        conn.close()
    assert versions == [v for v, _ in MIGRATIONS]


def test_chart_survives_a_new_store_instance(tmp_path) -> None:
    db_path = tmp_path / "charts.db"
    created = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    store = SqliteChartStore(db_path)
    store.initialize()
    store.save_charts(
        Repo(name="repo-name", namespace="namespace-1", url="https://charts.example.com"),
        [Chart(id="chart-1", name="my-chart", chart_versions=[
            ChartVersion(version="1.2.3", created=created, urls=["https://charts.example.com/my-chart-1.2.3.tgz"]),
        ])],
    )

    reopened = SqliteChartStore(db_path)
    reopened.initialize()
    chart = reopened.get_chart("chart-1", "namespace-1")

    assert chart is not None
    assert chart.repo.url == "https://charts.example.com"
    assert chart.chart_versions[0].created == created
    assert chart.chart_versions[0].urls == ["https://charts.example.com/my-chart-1.2.3.tgz"]


def test_missing_row_returns_none(tmp_path) -> None:
    store = SqliteChartStore(tmp_path / "charts.db")
    store.initialize()

    assert store.get_chart("chart-1") is None
    assert store.get_chart_files("chart-1-1.2.3") is None
    assert store.get_charts() == []


def test_first_stored_match_wins_without_namespace(tmp_path) -> None:
    store = SqliteChartStore(tmp_path / "charts.db")
    store.initialize()
    store.save_charts(Repo(name="r", namespace="namespace-b"), [Chart(id="chart-1", name="first")])
    store.save_charts(Repo(name="r", namespace="namespace-a"), [Chart(id="chart-1", name="second")])
    # Updating the first row keeps its position.
    store.save_charts(Repo(name="r", namespace="namespace-b"), [Chart(id="chart-1", name="first-updated")])

    assert store.get_chart("chart-1").name == "first-updated"


def test_driver_errors_are_not_reported_as_not_found(tmp_path) -> None:
    # No initialize(): the charts table does not exist.
    service = ChartLookupService(SqliteChartStore(tmp_path / "charts.db"))

    with pytest.raises(sqlite3.OperationalError):
        service.get_chart("chart-1")
    with pytest.raises(sqlite3.OperationalError):
        service.get_chart_version("chart-1", "1.2.3")


def test_schema_has_no_unused_tables(tmp_path) -> None:
    db_path = tmp_path / "charts.db"
    SqliteChartStore(db_path).initialize()

    conn = sqlite3.connect(str(db_path))
    try:
        tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
    finally:
        conn.close()
    assert tables - {"sqlite_sequence"} == {"migrations", "charts", "files"}
