"""
Pydantic models for the chart asset service.

This module defines the records served by the catalog:
- Repositories (namespace-scoped groupings of charts)
- Charts and their per-version metadata
- Per-version chart files (readme, values, schema)
- Paginated listing results

All models use Pydantic for validation, serialization, and type safety.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Repository Models
# ---------------------------------------------------------------------------


class Repo(BaseModel):
    """
    A chart repository scoped to a namespace.

    The (namespace, name) pair partitions stored charts, so the same chart
    identifier may exist independently in several namespaces.
    """

    name: str = Field(
        description="Repository name, e.g. 'bitnami'.",
    )
    namespace: str = Field(
        description="Namespace the repository belongs to.",
    )
    url: Optional[str] = Field(
        default=None,
        description="Base URL of the repository index.",
    )


# ---------------------------------------------------------------------------
# Chart Models
# ---------------------------------------------------------------------------


class Maintainer(BaseModel):
    name: str
    email: Optional[str] = None


class ChartVersion(BaseModel):
    """
    Metadata for a single published version of a chart.
    """

    version: str = Field(
        description="Chart version string, e.g. '1.2.3'. Matched exactly on lookup.",
    )
    app_version: Optional[str] = Field(
        default=None,
        description="Version of the application packaged by the chart.",
    )
    created: Optional[datetime] = Field(
        default=None,
        description="Timestamp when this chart version was published.",
    )
    digest: Optional[str] = Field(
        default=None,
        description="Digest of the chart archive.",
    )
    urls: List[str] = Field(
        default_factory=list,
        description="Download URLs for the chart archive.",
    )

    # Chart files carried along with the version by the seeding path.
    readme: Optional[str] = Field(
        default=None,
        description="README.md contents for this version.",
    )
    values: Optional[str] = Field(
        default=None,
        description="values.yaml contents for this version.",
    )
    schema_: Optional[str] = Field(
        default=None,
        alias="schema",
        serialization_alias="schema",
        description="values.schema.json contents for this version.",
    )

    model_config = ConfigDict(populate_by_name=True)


class Chart(BaseModel):
    """
    A chart with all of its known versions.

    The order of ``chart_versions`` is the storage order; lookups only rely
    on membership and exact version-string equality.
    """

    id: str = Field(
        description="Unique chart identifier, conventionally '<repo-name>/<chart-name>'.",
    )
    name: str = Field(
        default="",
        description="Display name of the chart.",
    )
    repo: Optional[Repo] = Field(
        default=None,
        description="Repository this chart was stored under. Populated by the store.",
    )
    description: Optional[str] = None
    home: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)
    maintainers: List[Maintainer] = Field(default_factory=list)
    chart_versions: List[ChartVersion] = Field(
        default_factory=list,
        description="All versions of this chart in storage order.",
    )


class ChartFiles(BaseModel):
    """
    Files extracted from one chart version.

    Keyed by the files id '<chart-id>-<version>'.
    """

    id: str
    repo: Optional[Repo] = None
    digest: Optional[str] = None
    readme: Optional[str] = None
    values: Optional[str] = None
    schema_: Optional[str] = Field(
        default=None,
        alias="schema",
        serialization_alias="schema",
    )

    model_config = ConfigDict(populate_by_name=True)


class ChartPage(BaseModel):
    """
    One page of a chart listing.
    """

    charts: List[Chart] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1
