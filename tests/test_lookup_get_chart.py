import pytest

from assetsvc.domain.errors import ChartVersionNotFound, NotFound
from assetsvc.domain.lookup import ChartLookupService
from assetsvc.domain.models import Chart, ChartVersion
from assetsvc.storage.memory_store import InMemoryChartStore

from conftest import ensure_charts_exist


def test_get_chart_missing_raises_not_found(service) -> None:
    with pytest.raises(NotFound) as exc_info:
        service.get_chart("doesnt-exist-1", namespace="doesnt-exist")
    assert exc_info.value.chart_id == "doesnt-exist-1"
    assert exc_info.value.status_code == 404


def test_get_chart_missing_in_any_namespace(service) -> None:
    with pytest.raises(NotFound):
        service.get_chart("doesnt-exist-1")


def test_get_chart_empty_id_is_not_found(service, store) -> None:
    ensure_charts_exist(store, {"namespace-1": [Chart(id="", name="blank")]})
    with pytest.raises(NotFound):
        service.get_chart("")


def test_get_chart_returns_matching_chart(service, store) -> None:
    ensure_charts_exist(store, {"namespace-1": [Chart(id="chart-1", name="my-chart")]})

    chart = service.get_chart("chart-1", namespace="namespace-1")

    assert chart.name == "my-chart"
    assert chart.repo is not None
    assert chart.repo.namespace == "namespace-1"
    assert chart.repo.name == "repo-name"


def test_get_chart_returns_all_versions_in_stored_order(service, store) -> None:
    versions = [ChartVersion(version=v) for v in ("4.5.6", "1.2.3", "0.1.0")]
    ensure_charts_exist(store, {"namespace-1": [Chart(id="chart-1", name="my-chart", chart_versions=versions)]})

    chart = service.get_chart("chart-1")

    assert [v.version for v in chart.chart_versions] == ["4.5.6", "1.2.3", "0.1.0"]


def test_get_chart_respects_namespace(service, store) -> None:
    ensure_charts_exist(store, {"namespace-1": [Chart(id="chart-1", name="my-chart")]})

    with pytest.raises(NotFound) as exc_info:
        service.get_chart("chart-1", namespace="namespace-2")
    assert exc_info.value.namespace == "namespace-2"


def test_get_chart_same_id_in_two_namespaces(service, store) -> None:
    ensure_charts_exist(store, {
        "namespace-1": [Chart(id="chart-1", name="first")],
        "namespace-2": [Chart(id="chart-1", name="second")],
    })

    assert service.get_chart("chart-1", namespace="namespace-1").name == "first"
    assert service.get_chart("chart-1", namespace="namespace-2").name == "second"


def test_get_chart_is_idempotent(service, store) -> None:
    versions = [ChartVersion(version="1.2.3"), ChartVersion(version="4.5.6")]
    ensure_charts_exist(store, {"namespace-1": [Chart(id="chart-1", name="my-chart", chart_versions=versions)]})

    assert service.get_chart("chart-1") == service.get_chart("chart-1")
    assert service.get_chart_version("chart-1", "4.5.6") == service.get_chart_version("chart-1", "4.5.6")


def test_not_found_and_version_not_found_are_distinct() -> None:
    assert not issubclass(ChartVersionNotFound, NotFound)
    assert not issubclass(NotFound, ChartVersionNotFound)


class _FailingStore(InMemoryChartStore):
    def get_chart(self, chart_id, namespace=None):
        raise ConnectionError("store unavailable")


def test_store_failures_propagate_unchanged() -> None:
    service = ChartLookupService(_FailingStore())

    with pytest.raises(ConnectionError, match="store unavailable"):
        service.get_chart("chart-1")
    with pytest.raises(ConnectionError, match="store unavailable"):
        service.get_chart_version("chart-1", "1.2.3")
