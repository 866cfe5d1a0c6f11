"""
Operator command line for the chart asset service.

Seeds a chart store from a fixture document and runs catalog lookups against
it, printing results as JSON.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from assetsvc.core.dependencies import get_chart_store, get_config, get_lookup_service
from assetsvc.domain.errors import AssetServiceError
from assetsvc.storage.seed import seed_store

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def _cmd_seed(args: argparse.Namespace) -> None:
    count = seed_store(get_chart_store(), Path(args.file))
    _print_json({"seeded": count})


def _cmd_chart(args: argparse.Namespace) -> None:
    service = get_lookup_service()
    if args.version:
        chart = service.get_chart_version(args.chart_id, args.version, namespace=args.namespace)
    else:
        chart = service.get_chart(args.chart_id, namespace=args.namespace)
    _print_json(chart.model_dump(mode="json", by_alias=True))


def _cmd_list(args: argparse.Namespace) -> None:
    size = args.size if args.size is not None else get_config().default_page_size
    page = get_lookup_service().list_charts(
        namespace=args.namespace,
        repo=args.repo,
        page=args.page,
        size=size,
    )
    _print_json(page.model_dump(mode="json", by_alias=True))


def _cmd_search(args: argparse.Namespace) -> None:
    charts = get_lookup_service().search_charts(args.query, namespace=args.namespace, repo=args.repo)
    _print_json([c.model_dump(mode="json", by_alias=True) for c in charts])


def _cmd_files(args: argparse.Namespace) -> None:
    files = get_lookup_service().get_chart_files(args.chart_id, args.version, namespace=args.namespace)
    _print_json(files.model_dump(mode="json", by_alias=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="assetsvc", description="Chart catalog lookups.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("seed", help="Load charts from a YAML/JSON seed document.")
    p.add_argument("file")
    p.set_defaults(func=_cmd_seed)

    p = sub.add_parser("chart", help="Show a chart, optionally narrowed to one version.")
    p.add_argument("chart_id")
    p.add_argument("--version", default=None)
    p.add_argument("--namespace", default=None)
    p.set_defaults(func=_cmd_chart)

    p = sub.add_parser("list", help="List charts.")
    p.add_argument("--namespace", default=None)
    p.add_argument("--repo", default=None)
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--size", type=int, default=None)
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("search", help="Search charts by name, keyword, source or maintainer.")
    p.add_argument("query")
    p.add_argument("--namespace", default=None)
    p.add_argument("--repo", default=None)
    p.set_defaults(func=_cmd_search)

    p = sub.add_parser("files", help="Show the readme/values/schema of a chart version.")
    p.add_argument("chart_id")
    p.add_argument("version")
    p.add_argument("--namespace", default=None)
    p.set_defaults(func=_cmd_files)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # pydantic ValidationError and json.JSONDecodeError are both ValueErrors.
    try:
        config = get_config()
    except (ValueError, OSError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Each CLI run starts with an empty memory store, so only seeding makes sense there.
    if config.database_backend == "memory" and args.command != "seed":
        print("error: the memory backend does not persist between runs; use sqlite or postgres", file=sys.stderr)
        return 1

    try:
        args.func(args)
    except AssetServiceError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
