"""
SQLite-backed chart store and simple migration system.

Charts are stored one row per (namespace, repo, chart id) with the full chart
record serialized as JSON in the ``info`` column. Chart files are stored the
same way, keyed by the files id ``<chart-id>-<version>``.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from assetsvc.domain.models import Chart, ChartFiles, Repo
from assetsvc.storage.chart_store import ChartStore, attach_repo, files_for_charts

logger = logging.getLogger(__name__)


MIGRATIONS: List[Tuple[int, str]] = [
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS charts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            repo_namespace TEXT NOT NULL,
            repo_name TEXT NOT NULL,
            chart_id TEXT NOT NULL,
            info TEXT NOT NULL,
            UNIQUE(repo_namespace, repo_name, chart_id)
        );

        CREATE TABLE IF NOT EXISTS files (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            repo_namespace TEXT NOT NULL,
            repo_name TEXT NOT NULL,
            chart_files_id TEXT NOT NULL,
            info TEXT NOT NULL,
            UNIQUE(repo_namespace, repo_name, chart_files_id)
        );

        CREATE INDEX IF NOT EXISTS idx_charts_chart_id ON charts(chart_id);
        CREATE INDEX IF NOT EXISTS idx_files_chart_files_id ON files(chart_files_id);
        """,
    ),
]


class SqliteChartStore(ChartStore):
    """
    Relational chart store on an SQLite database file.

    A new connection is opened for each call, so one instance can be shared
    across threads.
    """

    def __init__(self, database_path: Path):
        self._database_path = Path(database_path)

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor and commit/close the connection on exit."""
        conn = sqlite3.connect(str(self._database_path))
        # Return rows as dict-like objects keyed by column name
        conn.row_factory = sqlite3.Row
        try:
            yield conn.cursor()
            conn.commit()
        finally:
            conn.close()

    def initialize(self) -> None:
        self._database_path.parent.mkdir(parents=True, exist_ok=True)
        with self._cursor() as cur:
            cur.execute(
                "CREATE TABLE IF NOT EXISTS migrations ("
                "version INTEGER PRIMARY KEY, "
                "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
            )
            cur.execute("SELECT MAX(version) FROM migrations")
            row = cur.fetchone()
            current = row[0] if row and row[0] is not None else 0

            for version, sql in MIGRATIONS:
                if version <= current:
                    continue
                logger.info("Applying chart store migration %d to %s", version, self._database_path)
                cur.executescript(sql)
                cur.execute("INSERT INTO migrations (version) VALUES (?)", (version,))

    def get_chart(self, chart_id: str, namespace: Optional[str] = None) -> Optional[Chart]:
        query = "SELECT info FROM charts WHERE chart_id = ?"
        params: List[str] = [chart_id]
        if namespace is not None:
            query += " AND repo_namespace = ?"
            params.append(namespace)
        query += " ORDER BY id LIMIT 1"

        with self._cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()

        if row is None:
            logger.debug("No chart %s in namespace %s", chart_id, namespace)
            return None
        return Chart.model_validate_json(row["info"])

    def get_charts(self, namespace: Optional[str] = None, repo: Optional[str] = None) -> List[Chart]:
        clauses: List[str] = []
        params: List[str] = []
        if namespace is not None:
            clauses.append("repo_namespace = ?")
            params.append(namespace)
        if repo is not None:
            clauses.append("repo_name = ?")
            params.append(repo)

        query = "SELECT info FROM charts"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY id"

        with self._cursor() as cur:
            cur.execute(query, params)
            rows = cur.fetchall()
        return [Chart.model_validate_json(row["info"]) for row in rows]

    def get_chart_files(self, files_id: str, namespace: Optional[str] = None) -> Optional[ChartFiles]:
        query = "SELECT info FROM files WHERE chart_files_id = ?"
        params: List[str] = [files_id]
        if namespace is not None:
            query += " AND repo_namespace = ?"
            params.append(namespace)
        query += " ORDER BY id LIMIT 1"

        with self._cursor() as cur:
            cur.execute(query, params)
            row = cur.fetchone()

        if row is None:
            return None
        return ChartFiles.model_validate_json(row["info"])

    def save_charts(self, repo: Repo, charts: Sequence[Chart]) -> None:
        with self._cursor() as cur:
            for chart in attach_repo(repo, charts):
                cur.execute(
                    "INSERT INTO charts (repo_namespace, repo_name, chart_id, info) VALUES (?, ?, ?, ?) "
                    "ON CONFLICT(repo_namespace, repo_name, chart_id) DO UPDATE SET info = excluded.info",
                    (repo.namespace, repo.name, chart.id, chart.model_dump_json(by_alias=True)),
                )
            for files in files_for_charts(repo, charts):
                cur.execute(
                    "INSERT INTO files (repo_namespace, repo_name, chart_files_id, info) VALUES (?, ?, ?, ?) "
                    "ON CONFLICT(repo_namespace, repo_name, chart_files_id) DO UPDATE SET info = excluded.info",
                    (repo.namespace, repo.name, files.id, files.model_dump_json(by_alias=True)),
                )
        logger.info("Stored %d charts for repo %s/%s", len(charts), repo.namespace, repo.name)

    def delete_repo(self, repo: Repo) -> None:
        with self._cursor() as cur:
            for table in ("charts", "files"):
                cur.execute(
                    f"DELETE FROM {table} WHERE repo_namespace = ? AND repo_name = ?",
                    (repo.namespace, repo.name),
                )
