from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from assetsvc.domain.chart_utils import chart_files_id
from assetsvc.domain.models import Chart, ChartFiles, Repo


class ChartStore(ABC):
    """
    Abstract base class for chart storage backends.

    Read methods return ``None`` when no row matches; that value is the only
    "not found" signal. Backend failures propagate as exceptions.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the storage subsystem (create schema, open files). Idempotent."""
        pass

    @abstractmethod
    def get_chart(self, chart_id: str, namespace: Optional[str] = None) -> Optional[Chart]:
        """
        Get a chart with all of its versions by ID.

        With ``namespace`` set, only charts stored in that namespace match;
        otherwise the first stored match in any namespace is returned.
        """
        pass

    @abstractmethod
    def get_charts(self, namespace: Optional[str] = None, repo: Optional[str] = None) -> List[Chart]:
        """Get all charts, optionally restricted to a namespace and repo name."""
        pass

    @abstractmethod
    def get_chart_files(self, files_id: str, namespace: Optional[str] = None) -> Optional[ChartFiles]:
        """Get the files stored for one chart version."""
        pass

    @abstractmethod
    def save_charts(self, repo: Repo, charts: Sequence[Chart]) -> None:
        """
        Create or replace charts under a repository.

        The repo is attached to each stored chart. Files are recorded for
        every chart version that carries a readme, values or schema.
        """
        pass

    @abstractmethod
    def delete_repo(self, repo: Repo) -> None:
        """Delete every chart and chart files record stored under a repo."""
        pass

    def close(self) -> None:
        """Release any resources held by the store."""
        pass


def files_for_charts(repo: Repo, charts: Sequence[Chart]) -> List[ChartFiles]:
    """
    Extract the chart files records the seeding path should persist.
    """
    files: List[ChartFiles] = []
    for chart in charts:
        for v in chart.chart_versions:
            if v.readme is None and v.values is None and v.schema_ is None:
                continue
            files.append(ChartFiles(
                id=chart_files_id(chart.id, v.version),
                repo=repo,
                digest=v.digest,
                readme=v.readme,
                values=v.values,
                schema_=v.schema_,
            ))
    return files


def attach_repo(repo: Repo, charts: Sequence[Chart]) -> List[Chart]:
    """Return copies of ``charts`` carrying ``repo``."""
    return [chart.model_copy(update={"repo": repo}, deep=True) for chart in charts]
