import logging
import threading
from typing import Dict, List, Optional, Sequence, Tuple

from assetsvc.domain.models import Chart, ChartFiles, Repo
from assetsvc.storage.chart_store import ChartStore, attach_repo, files_for_charts

logger = logging.getLogger(__name__)

# (namespace, repo name, id)
_Key = Tuple[str, str, str]


class InMemoryChartStore(ChartStore):
    """
    Dict-backed store. Used as the ``memory`` backend and as the test fake.

    Insertion order is preserved, so "first stored match" is well defined.
    """

    def __init__(self) -> None:
        self._charts: Dict[_Key, Chart] = {}
        self._files: Dict[_Key, ChartFiles] = {}
        self._lock = threading.Lock()

    def initialize(self) -> None:
        pass

    def get_chart(self, chart_id: str, namespace: Optional[str] = None) -> Optional[Chart]:
        for (ns, _repo, cid), chart in list(self._charts.items()):
            if cid == chart_id and (namespace is None or ns == namespace):
                # Callers always get copies of stored records.
                return chart.model_copy(deep=True)
        logger.debug("No chart %s in namespace %s", chart_id, namespace)
        return None

    def get_charts(self, namespace: Optional[str] = None, repo: Optional[str] = None) -> List[Chart]:
        return [
            chart.model_copy(deep=True)
            for (ns, repo_name, _cid), chart in list(self._charts.items())
            if (namespace is None or ns == namespace) and (repo is None or repo_name == repo)
        ]

    def get_chart_files(self, files_id: str, namespace: Optional[str] = None) -> Optional[ChartFiles]:
        for (ns, _repo, fid), files in list(self._files.items()):
            if fid == files_id and (namespace is None or ns == namespace):
                return files.model_copy(deep=True)
        return None

    def save_charts(self, repo: Repo, charts: Sequence[Chart]) -> None:
        with self._lock:
            for chart in attach_repo(repo, charts):
                self._charts[(repo.namespace, repo.name, chart.id)] = chart
            for files in files_for_charts(repo, charts):
                self._files[(repo.namespace, repo.name, files.id)] = files
        logger.info("Stored %d charts for repo %s/%s", len(charts), repo.namespace, repo.name)

    def delete_repo(self, repo: Repo) -> None:
        with self._lock:
            for store in (self._charts, self._files):
                for key in [k for k in store if k[0] == repo.namespace and k[1] == repo.name]:
                    del store[key]
