"""
PostgreSQL-backed chart store.

Same layout as the SQLite store, with the chart and files records held in
JSONB ``info`` columns.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Json

from assetsvc.domain.models import Chart, ChartFiles, Repo
from assetsvc.storage.chart_store import ChartStore, attach_repo, files_for_charts

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS charts (
    id SERIAL PRIMARY KEY,
    repo_namespace TEXT NOT NULL,
    repo_name TEXT NOT NULL,
    chart_id TEXT NOT NULL,
    info JSONB NOT NULL,
    UNIQUE(repo_namespace, repo_name, chart_id)
);

CREATE TABLE IF NOT EXISTS files (
    id SERIAL PRIMARY KEY,
    repo_namespace TEXT NOT NULL,
    repo_name TEXT NOT NULL,
    chart_files_id TEXT NOT NULL,
    info JSONB NOT NULL,
    UNIQUE(repo_namespace, repo_name, chart_files_id)
);
"""


class PostgresChartStore(ChartStore):
    def __init__(self, dsn: str):
        self._dsn = dsn

    @contextmanager
    def _cursor(self) -> Iterator[psycopg.Cursor]:
        with psycopg.connect(self._dsn) as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                yield cur

    def initialize(self) -> None:
        with self._cursor() as cur:
            cur.execute(SCHEMA)
        logger.info("Chart store schema ready")

    def get_chart(self, chart_id: str, namespace: Optional[str] = None) -> Optional[Chart]:
        query = "SELECT info FROM charts WHERE chart_id = %(chart_id)s"
        params: Dict[str, Any] = {"chart_id": chart_id}
        if namespace is not None:
            query += " AND repo_namespace = %(namespace)s"
            params["namespace"] = namespace
        query += " ORDER BY id LIMIT 1"

        with self._cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()

        if row is None:
            logger.debug("No chart %s in namespace %s", chart_id, namespace)
            return None
        return Chart.model_validate(row["info"])

    def get_charts(self, namespace: Optional[str] = None, repo: Optional[str] = None) -> List[Chart]:
        clauses: List[str] = []
        params: Dict[str, Any] = {}
        if namespace is not None:
            clauses.append("repo_namespace = %(namespace)s")
            params["namespace"] = namespace
        if repo is not None:
            clauses.append("repo_name = %(repo)s")
            params["repo"] = repo

        query = "SELECT info FROM charts"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id"

        with self._cursor() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()
        return [Chart.model_validate(row["info"]) for row in rows]

    def get_chart_files(self, files_id: str, namespace: Optional[str] = None) -> Optional[ChartFiles]:
        query = "SELECT info FROM files WHERE chart_files_id = %(files_id)s"
        params: Dict[str, Any] = {"files_id": files_id}
        if namespace is not None:
            query += " AND repo_namespace = %(namespace)s"
            params["namespace"] = namespace
        query += " ORDER BY id LIMIT 1"

        with self._cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()

        if row is None:
            return None
        return ChartFiles.model_validate(row["info"])

    def save_charts(self, repo: Repo, charts: Sequence[Chart]) -> None:
        with self._cursor() as cur:
            for chart in attach_repo(repo, charts):
                cur.execute(
                    """
                    INSERT INTO charts (repo_namespace, repo_name, chart_id, info)
                    VALUES (%(namespace)s, %(repo)s, %(chart_id)s, %(info)s)
                    ON CONFLICT (repo_namespace, repo_name, chart_id) DO UPDATE SET info = EXCLUDED.info
                    """,
                    {
                        "namespace": repo.namespace,
                        "repo": repo.name,
                        "chart_id": chart.id,
                        "info": Json(chart.model_dump(mode="json", by_alias=True)),
                    },
                )
            for files in files_for_charts(repo, charts):
                cur.execute(
                    """
                    INSERT INTO files (repo_namespace, repo_name, chart_files_id, info)
                    VALUES (%(namespace)s, %(repo)s, %(files_id)s, %(info)s)
                    ON CONFLICT (repo_namespace, repo_name, chart_files_id) DO UPDATE SET info = EXCLUDED.info
                    """,
                    {
                        "namespace": repo.namespace,
                        "repo": repo.name,
                        "files_id": files.id,
                        "info": Json(files.model_dump(mode="json", by_alias=True)),
                    },
                )
        logger.info("Stored %d charts for repo %s/%s", len(charts), repo.namespace, repo.name)

    def delete_repo(self, repo: Repo) -> None:
        params = {"namespace": repo.namespace, "name": repo.name}
        with self._cursor() as cur:
            cur.execute("DELETE FROM charts WHERE repo_namespace = %(namespace)s AND repo_name = %(name)s", params)
            cur.execute("DELETE FROM files WHERE repo_namespace = %(namespace)s AND repo_name = %(name)s", params)