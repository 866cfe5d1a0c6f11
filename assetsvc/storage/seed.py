"""
Seeding chart stores from fixture documents.

A seed document is YAML (JSON documents are accepted too) of the form::

    repos:
      - name: repo-name
        namespace: namespace-1
        url: https://charts.example.com
        charts:
          - id: repo-name/my-chart
            name: my-chart
            chart_versions:
              - version: 1.2.3

Seeding is an operator/test convenience for populating a store before
lookups; it is not an ingestion pipeline.
"""

import logging
from pathlib import Path
from typing import Any, List, Tuple

import yaml
from pydantic import ValidationError

from assetsvc.domain.errors import SeedError
from assetsvc.domain.models import Chart, Repo
from assetsvc.storage.chart_store import ChartStore

logger = logging.getLogger(__name__)

SeedEntries = List[Tuple[Repo, List[Chart]]]


def parse_seed_document(raw: Any) -> SeedEntries:
    """
    Convert an already-parsed seed document into (Repo, charts) pairs.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get("repos"), list):
        raise SeedError("seed document must be a mapping with a 'repos' list")

    entries: SeedEntries = []
    for i, repo_raw in enumerate(raw["repos"]):
        if not isinstance(repo_raw, dict):
            raise SeedError(f"repos[{i}] must be a mapping")
        repo_raw = dict(repo_raw)
        charts_raw = repo_raw.pop("charts", None) or []
        try:
            repo = Repo(**repo_raw)
            charts = []
            for c in charts_raw:
                _require_string_versions(c)
                charts.append(Chart.model_validate(c))
        except (TypeError, ValidationError) as e:
            raise SeedError(f"repos[{i}] is invalid: {e}") from e
        entries.append((repo, charts))
    return entries


def _require_string_versions(chart_raw: Any) -> None:
    # YAML reads unquoted versions such as 1.10 as floats, losing the original text.
    if not isinstance(chart_raw, dict) or not isinstance(chart_raw.get("chart_versions"), list):
        return
    for v in chart_raw["chart_versions"]:
        if not isinstance(v, dict):
            continue
        for key in ("version", "app_version"):
            value = v.get(key)
            if value is not None and not isinstance(value, str):
                raise SeedError(
                    f"chart {chart_raw.get('id')!r}: {key} {value!r} must be a quoted string"
                )


def load_seed_document(path: Path) -> SeedEntries:
    """
    Read and parse a seed document from disk.
    """
    try:
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SeedError(f"{path}: {e}") from e
    return parse_seed_document(raw)


def seed_store(store: ChartStore, path: Path) -> int:
    """
    Load a seed document into ``store``. Returns the number of charts stored.
    """
    total = 0
    for repo, charts in load_seed_document(path):
        store.save_charts(repo, charts)
        total += len(charts)
    logger.info("Seeded %d charts from %s", total, path)
    return total
