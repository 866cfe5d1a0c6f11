from typing import List, Optional

from assetsvc.domain.chart_utils import chart_files_id, chart_matches_query, find_version, paginate
from assetsvc.domain.errors import ChartVersionNotFound, NotFound
from assetsvc.domain.models import Chart, ChartFiles, ChartPage
from assetsvc.storage.chart_store import ChartStore


class ChartLookupService:
    """
    Read-only chart catalog queries over a ChartStore.

    Holds no state besides the store, so one instance can serve concurrent
    callers. Errors are raised to the caller unchanged.
    """

    def __init__(self, store: ChartStore):
        self.store = store

    def get_chart(self, chart_id: str, namespace: Optional[str] = None) -> Chart:
        """
        Return the chart with all of its stored versions.

        Raises NotFound when the store has no such chart.
        """
        chart = self.store.get_chart(chart_id, namespace) if chart_id else None
        if chart is None:
            raise NotFound(chart_id, namespace)
        return chart

    def get_chart_version(self, chart_id: str, version: Optional[str], namespace: Optional[str] = None) -> Chart:
        """
        Return the chart narrowed to the single version matching ``version``.

        The version string is compared exactly. With duplicate version
        strings the first entry in stored order is returned. An empty
        ``version`` requests no narrowing.

        Raises NotFound when the chart is missing and ChartVersionNotFound
        when the chart exists without that version.
        """
        chart = self.get_chart(chart_id, namespace)
        if not version:
            return chart

        match = find_version(chart.chart_versions, version)
        if match is None:
            raise ChartVersionNotFound(chart_id, version)

        return chart.model_copy(update={"chart_versions": [match]})

    def list_charts(
        self,
        namespace: Optional[str] = None,
        repo: Optional[str] = None,
        page: int = 1,
        size: int = 0,
    ) -> ChartPage:
        charts = sorted(self.store.get_charts(namespace, repo), key=lambda c: (c.name, c.id))
        items, page, total_pages = paginate(charts, page, size)
        return ChartPage(charts=items, page=page, total_pages=total_pages)

    def search_charts(self, query: str, namespace: Optional[str] = None, repo: Optional[str] = None) -> List[Chart]:
        if not query:
            return []
        charts = self.store.get_charts(namespace, repo)
        return sorted(
            (c for c in charts if chart_matches_query(c, query)),
            key=lambda c: (c.name, c.id),
        )

    def get_chart_files(self, chart_id: str, version: str, namespace: Optional[str] = None) -> ChartFiles:
        files_id = chart_files_id(chart_id, version)
        files = self.store.get_chart_files(files_id, namespace)
        if files is None:
            raise NotFound(files_id, namespace)
        return files
