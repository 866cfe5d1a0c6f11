import math
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from assetsvc.domain.models import Chart, ChartVersion

T = TypeVar("T")


def chart_files_id(chart_id: str, version: str) -> str:
    """
    Build the identifier under which a chart version's files are stored.
    """
    return f"{chart_id}-{version}"


def find_version(versions: Iterable[ChartVersion], version: str) -> Optional[ChartVersion]:
    """
    Return the first entry whose version string equals ``version`` exactly.

    Comparison is case-sensitive with no semantic-version range matching.
    If several entries share the string, the first in stored order wins.
    """
    for v in versions:
        if v.version == version:
            return v
    return None


def match_text(value: str, keyword: str) -> bool:
    """
    Case-insensitive substring match used by chart search.
    """
    if not keyword or not value:
        return False
    return keyword.lower() in value.lower()


def chart_matches_query(chart: Chart, query: str) -> bool:
    candidates = [
        chart.id,
        chart.name,
        chart.description or "",
        *chart.keywords,
        *chart.sources,
        *(m.name for m in chart.maintainers),
    ]
    for value in candidates:
        if match_text(value, query):
            return True
    return False


def paginate(items: Sequence[T], page: int, size: int) -> Tuple[List[T], int, int]:
    """
    Slice ``items`` into a 1-based page.

    ``size <= 0`` disables pagination and returns everything as page 1.
    Page numbers below 1 are treated as 1.
    Returns the page slice, the page number served and the total number
    of pages (at least 1).
    """
    if size <= 0:
        return list(items), 1, 1

    total_pages = max(1, math.ceil(len(items) / size))
    page = max(page, 1)
    start = (page - 1) * size
    return list(items[start:start + size]), page, total_pages
