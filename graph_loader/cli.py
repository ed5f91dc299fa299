"""
Graph Loader CLI.

Loads Parquet files or SQL query results into Neo4j in batches.

Commands:
- parquet:       one node per Parquet row, with a fixed label
- sql:           one node per row of a DuckDB query, with a fixed label
- stackoverflow: Stack Overflow posts and users, linked into a graph
- preview:       print hydrated Parquet rows as JSON lines, no database needed
"""

import sys
import json
import argparse
from itertools import islice
from pathlib import Path
from typing import List, Optional


from .graph.schema import NODE_LABELS, get_schema_statements
from .graph.stackoverflow import link_posts
from .graph.strategies import WriteMode
from .hydrator import MapResult
from .pipeline import GraphLoadPipeline, LoadResult, apply_schema, clean_label, connect
from .sources import ParquetSource, SqlSource
from .utils.config import BatchConfig, LoaderConfig, Neo4jConfig, load_config
from .utils.logging import get_logger, setup_logging


def write_mode(value: str) -> WriteMode:
    """argparse type for --mode."""
    return WriteMode.parse(value)


def _add_store_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-a", "--address", help="The address of the Neo4j host")
    parser.add_argument("-u", "--username", help="The login of the user connecting to the database")
    parser.add_argument("-p", "--password", help="The password of the user connecting to the database")
    parser.add_argument("--batch-size", type=int, help="Batch size to use")
    parser.add_argument("--database", help="The target database")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graph-loader",
        description="Load Parquet files or SQL query results into Neo4j in batches",
    )
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    parquet = commands.add_parser("parquet", help="Load a Parquet file as nodes")
    _add_store_options(parquet)
    parquet.add_argument(
        "--label",
        required=True,
        help="The label to use for the nodes (existing nodes with that label will be deleted)",
    )
    parquet.add_argument(
        "--mode",
        type=write_mode,
        help="Using server side or client side batching (default: SERVER_SIDE_BATCHING)",
    )
    parquet.add_argument("file", help="Parquet file path or URL")

    sql = commands.add_parser("sql", help="Load the result of a SQL query as nodes")
    _add_store_options(sql)
    sql.add_argument(
        "--label",
        required=True,
        help="The label to use for the nodes (existing nodes with that label will be deleted)",
    )
    sql.add_argument("--db-path", default=":memory:", help="DuckDB database file")
    sql.add_argument(
        "--mode",
        type=write_mode,
        help="Using server side or client side batching (default: SERVER_SIDE_BATCHING)",
    )
    sql.add_argument("query", help="SQL query producing the node properties")

    so = commands.add_parser("stackoverflow", help="Load a Stack Overflow dump converted to Parquet")
    _add_store_options(so)
    so.add_argument("file", help="Parquet file path or URL")

    preview = commands.add_parser("preview", help="Print hydrated Parquet rows as JSON lines")
    preview.add_argument("--limit", type=int, help="Maximum number of rows to print")
    preview.add_argument("file", help="Parquet file path or URL")

    return parser


def resolve_config(args: argparse.Namespace) -> LoaderConfig:
    """Load the configuration file and apply command line overrides."""
    config = load_config(args.config)

    neo4j_overrides = {
        key: value for key, value in (
            ("uri", getattr(args, "address", None)),
            ("username", getattr(args, "username", None)),
            ("password", getattr(args, "password", None)),
            ("database", getattr(args, "database", None)),
        ) if value is not None
    }
    batch_overrides = {
        key: value for key, value in (
            ("batch_size", getattr(args, "batch_size", None)),
            ("mode", getattr(args, "mode", None)),
        ) if value is not None
    }

    # Rebuild rather than copy so that overrides are validated
    return config.model_copy(update={
        "neo4j": Neo4jConfig(**{**config.neo4j.model_dump(), **neo4j_overrides}),
        "batch": BatchConfig(**{**config.batch.model_dump(), **batch_overrides}),
    })


def load_nodes(source, label: str, config: LoaderConfig) -> LoadResult:
    """Replace every node carrying ``label`` with the records of ``source``."""
    batch = config.batch
    with connect(config.neo4j) as driver:
        with driver.session(database=config.neo4j.database) as session:
            clean_label(session, label, batch.batch_size)
            pipeline = GraphLoadPipeline(session, batch.batch_size, batch.mode, label)
            return pipeline.run(source.stream_content())


def load_stackoverflow(source: ParquetSource, config: LoaderConfig) -> LoadResult:
    """Replace the Stack Overflow graph with the posts of ``source``."""
    batch_size = config.batch.batch_size
    with connect(config.neo4j) as driver:
        with driver.session(database=config.neo4j.database) as session:
            for label in NODE_LABELS:
                clean_label(session, label, batch_size)
            apply_schema(session, get_schema_statements())
            pipeline = GraphLoadPipeline(session, batch_size, link_posts)
            return pipeline.run(source.stream_content())


def preview(source: ParquetSource, limit: Optional[int] = None, out=None) -> int:
    """Write hydrated rows to ``out`` as JSON lines. Returns the row count."""
    out = out or sys.stdout
    count = 0
    for result in islice(source.stream_content(MapResult), limit):
        out.write(json.dumps(dict(result.row), default=str) + "\n")
        count += 1
    return count


def run(args: argparse.Namespace, config: LoaderConfig):
    chunk_size = config.batch.read_chunk_size

    if args.command == "parquet":
        return load_nodes(ParquetSource(args.file, chunk_size), args.label, config)
    if args.command == "sql":
        source = SqlSource(args.query, db_path=args.db_path, fetch_size=chunk_size)
        return load_nodes(source, args.label, config)
    if args.command == "stackoverflow":
        return load_stackoverflow(ParquetSource(args.file, chunk_size), config)
    if args.command == "preview":
        return preview(ParquetSource(args.file, chunk_size), args.limit)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log = get_logger("CLI")
    setup_logging(level="DEBUG" if args.verbose else "INFO")
    try:
        config = resolve_config(args)
        level = "DEBUG" if args.verbose else config.logging.level
        setup_logging(
            log_dir=config.logging.log_dir,
            level=level,
            log_format=config.logging.format,
            console=config.logging.console,
            file=config.logging.file,
        )
        run(args, config)
    except Exception as e:
        log.error(f"Load failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
