"""
Configuration for the chart asset service.

Settings are resolved in order: model defaults, an optional JSON file named
by ``ASSETSVC_CONFIG_FILE``, then individual ``ASSETSVC_*`` environment
variables.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DATA_ROOT_ENV_VAR = "ASSETSVC_DATA_DIR"
CONFIG_FILE_ENV_VAR = "ASSETSVC_CONFIG_FILE"

# Resolve repository root (project root, not the Python package root)
_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _REPO_ROOT / "data"

# Environment variable -> config field
_ENV_OVERRIDES = {
    "ASSETSVC_DATABASE_BACKEND": "database_backend",
    "ASSETSVC_DATABASE_PATH": "database_path",
    "ASSETSVC_POSTGRES_DSN": "postgres_dsn",
    "ASSETSVC_DEFAULT_PAGE_SIZE": "default_page_size",
    "ASSETSVC_LOG_LEVEL": "log_level",
}


def get_data_dir() -> Path:
    """
    Determine the data directory path.

    Priority:
    1. Environment variable ASSETSVC_DATA_DIR
    2. '<project root>/data'
    """
    env_path = os.environ.get(DATA_ROOT_ENV_VAR)
    if env_path:
        d = Path(env_path).expanduser()
    else:
        d = _DEFAULT_DATA_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


class AssetServiceConfig(BaseModel):
    """
    Settings for the asset service store and CLI.
    """

    database_backend: Literal["sqlite", "postgres", "memory"] = Field(
        default="sqlite",
        description="Which chart store implementation to use.",
    )
    database_path: Optional[Path] = Field(
        default=None,
        description="SQLite database file. Defaults to '<data dir>/assetsvc.db'.",
    )
    postgres_dsn: str = Field(
        default="",
        description="Connection string for the postgres backend.",
    )
    default_page_size: int = Field(
        default=0,
        ge=0,
        description="Page size used by chart listings when none is given. 0 disables pagination.",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logging level for the CLI. Case-insensitive.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    def resolved_database_path(self) -> Path:
        if self.database_path is not None:
            return self.database_path.expanduser()
        return get_data_dir() / "assetsvc.db"


def load_config() -> AssetServiceConfig:
    """
    Build the configuration from the optional JSON file and the environment.
    """
    raw: dict = {}

    config_file = os.environ.get(CONFIG_FILE_ENV_VAR)
    if config_file:
        raw.update(json.loads(Path(config_file).expanduser().read_text(encoding="utf-8")))

    for env_var, field in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            raw[field] = value

    return AssetServiceConfig(**raw)
