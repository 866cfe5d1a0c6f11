from typing import Optional

from assetsvc.core.config import AssetServiceConfig, load_config
from assetsvc.domain.lookup import ChartLookupService
from assetsvc.storage.chart_store import ChartStore
from assetsvc.storage.memory_store import InMemoryChartStore
from assetsvc.storage.sqlite_store import SqliteChartStore

_config: Optional[AssetServiceConfig] = None
_chart_store: Optional[ChartStore] = None
_lookup_service: Optional[ChartLookupService] = None


def get_config() -> AssetServiceConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def create_chart_store(config: AssetServiceConfig) -> ChartStore:
    if config.database_backend == "memory":
        return InMemoryChartStore()
    if config.database_backend == "postgres":
        # psycopg is only imported when the postgres backend is selected.
        from assetsvc.storage.postgres_store import PostgresChartStore

        return PostgresChartStore(config.postgres_dsn)
    return SqliteChartStore(config.resolved_database_path())


def get_chart_store() -> ChartStore:
    global _chart_store
    if _chart_store is None:
        _chart_store = create_chart_store(get_config())
        _chart_store.initialize()
    return _chart_store


def get_lookup_service() -> ChartLookupService:
    global _lookup_service
    if _lookup_service is None:
        _lookup_service = ChartLookupService(get_chart_store())
    return _lookup_service


def reset_dependencies() -> None:
    """Forget cached singletons so the next call re-reads the environment."""
    global _config, _chart_store, _lookup_service
    if _chart_store is not None:
        _chart_store.close()
    _config = None
    _chart_store = None
    _lookup_service = None
