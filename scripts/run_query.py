"""Run one named query from the catalog and push graph results to Cytoscape.

Usage: python scripts/run_query.py INDEX [name=value ...]
       python scripts/run_query.py --list
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from adb_query_runner.arangodb.executor import ArangoQueryExecutor
from adb_query_runner.config import get_settings
from adb_query_runner.cytoscape.client import CytoscapeClient
from adb_query_runner.cytoscape.exporter import GraphExporter
from adb_query_runner.queries import load_query_catalog
from adb_query_runner.services.query_service import QueryService
from adb_query_runner.utils.exceptions import QueryRunnerError
from adb_query_runner.utils.logging import setup_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("index", nargs="?", type=int, help="query index in the catalog")
    parser.add_argument("params", nargs="*", metavar="name=value", help="bind variables")
    parser.add_argument("--list", action="store_true", help="list configured queries")
    parser.add_argument("--output", help="write the raw results to this JSON file")
    args = parser.parse_args(argv)
    if not args.list and args.index is None:
        parser.error("a query index is required unless --list is given")
    return args


def _split_params(pairs: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep:
            raise SystemExit(f"Parameter '{pair}' must look like name=value")
        params[name] = value
    return params


async def main(argv: list[str]) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL, log_format="console")

    catalog = load_query_catalog(settings.QUERY_CONFIG_PATH)
    if args.list:
        for index, definition in enumerate(catalog.queries):
            params = ", ".join(f"{p.name}:{p.parameter_type}" for p in definition.parameters)
            print(f"[{index}] {definition.name} ({params}): {definition.description}")
        return 0

    executor = ArangoQueryExecutor(settings)
    cytoscape = CytoscapeClient(settings)
    await executor.connect()
    await cytoscape.connect()

    try:
        service = QueryService(
            executor,
            GraphExporter(
                cytoscape,
                network_name=settings.CYTOSCAPE_NETWORK_NAME,
                max_concurrent_columns=settings.CYTOSCAPE_MAX_CONCURRENT_COLUMNS,
            ),
            catalog,
        )
        result = await service.run(args.index, _split_params(args.params))
    except QueryRunnerError as exc:
        print(json.dumps(exc.to_dict(), indent=2, default=str), file=sys.stderr)
        return 1
    finally:
        await cytoscape.close()
        await executor.close()

    if args.output:
        with open(args.output, "w") as f:
            json.dump(result.results, f, indent=2, default=str)
        print(f"Results written to {args.output}")

    print(f"Query: {result.query_name}")
    print(f"  Documents: {len(result.results)}")
    if not result.is_graph:
        print(f"  Not a graph: {result.classification_error['error']}")
        return 0

    print(f"  Vertices: {result.vertex_count}")
    print(f"  Edges: {result.edge_count}")
    if result.export:
        print(f"  Cytoscape network SUID: {result.export.network_suid}")
        if result.export.skipped_edges:
            print(f"  Edges skipped (no _key): {len(result.export.skipped_edges)}")
    if result.export_error:
        print(json.dumps(result.export_error, indent=2, default=str), file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
