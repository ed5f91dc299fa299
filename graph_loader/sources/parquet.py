"""
Parquet record source - Polars-based.

Reads a Parquet file in bounded chunks and yields one hydrated record per
row. The column list is read from the file schema before the first row.

Usage:
    source = ParquetSource("people.parquet")
    for record in source.stream_content():
        ...
"""

from pathlib import Path
from typing import Any, Callable, Iterator, List, Union
from urllib.parse import unquote, urlparse

import polars as pl

from ..hydrator import PropertiesHydrator
from .values import to_graph_value
from ..utils.logging import get_logger

DEFAULT_CHUNK_SIZE = 10_000


def resolve_resource(resource: Union[str, Path]) -> Union[str, Path]:
    """
    Resolve a resource into something ``pl.scan_parquet`` can open.

    Plain paths and ``file:`` URIs become local paths, which must exist.
    Other URIs (http, https, s3, ...) are handed to Polars as-is.
    """
    if isinstance(resource, Path):
        path = resource
    else:
        parsed = urlparse(resource)
        # Single letters are Windows drive letters, not schemes
        if parsed.scheme and len(parsed.scheme) > 1 and parsed.scheme != "file":
            return resource
        path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(resource)

    if not path.exists():
        raise FileNotFoundError(f"Parquet file not found: {path}")
    return path


class ParquetSource:
    """
    Sequential, single-pass reader over a Parquet resource.

    Args:
        resource: Local path, ``file:`` URI or remote URL.
        chunk_size: Rows materialized per read.
    """

    def __init__(self, resource: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be at least 1, got {chunk_size}")
        self.resource = resolve_resource(resource)
        self.chunk_size = chunk_size
        self._frame = pl.scan_parquet(self.resource)
        self.logger = get_logger("ParquetSource")

    @property
    def columns(self) -> List[str]:
        return self._frame.collect_schema().names()

    def row_count(self) -> int:
        return self._frame.select(pl.len()).collect().item()

    def iter_rows(self) -> Iterator[tuple]:
        """Yield raw rows as tuples, in file order."""
        total = self.row_count()
        self.logger.info(f"Reading {self.resource}: {total} rows, {len(self.columns)} columns")
        for offset in range(0, total, self.chunk_size):
            chunk = self._frame.slice(offset, self.chunk_size).collect()
            yield from chunk.iter_rows()

    def stream_content(self, finisher: Callable[[dict], Any] = dict) -> Iterator[Any]:
        """
        Yield hydrated records.

        Args:
            finisher: Applied to every property map (see ``PropertiesHydrator``).
        """
        hydrator = PropertiesHydrator(self.columns, finisher)
        for row in self.iter_rows():
            yield hydrator.hydrate([to_graph_value(v) for v in row])
