"""
SQL record source - DuckDB-based.

Runs a query against a DuckDB database and yields one hydrated record per
result row, fetching rows in chunks from a forward-only cursor. DuckDB can
read Parquet/CSV files directly and attach PostgreSQL, MySQL or SQLite
databases, so any of those can feed the loader through a query.
"""

from pathlib import Path
from typing import Any, Callable, Iterator, List, Union

import duckdb

from ..exceptions import ConfigurationError
from ..hydrator import PropertiesHydrator
from .values import to_graph_value
from ..utils.logging import get_logger

DEFAULT_FETCH_SIZE = 10_000


class SqlSource:
    """
    Query result reader.

    Args:
        query: SQL query whose columns become node properties.
        db_path: DuckDB database file, or ``:memory:``.
        fetch_size: Rows fetched per cursor round-trip.
        connection: Existing DuckDB connection to use instead of ``db_path``.
    """

    def __init__(
        self,
        query: str,
        db_path: Union[str, Path] = ":memory:",
        fetch_size: int = DEFAULT_FETCH_SIZE,
        connection: "duckdb.DuckDBPyConnection" = None,
    ):
        if fetch_size < 1:
            raise ValueError(f"Fetch size must be at least 1, got {fetch_size}")
        self.query = query
        self.db_path = db_path
        self.fetch_size = fetch_size
        self._connection = connection
        self.logger = get_logger("SqlSource")

    def stream_content(self, finisher: Callable[[dict], Any] = dict) -> Iterator[Any]:
        """
        Execute the query and yield hydrated records.

        The connection is closed once the result is exhausted, unless it was
        passed in by the caller.
        """
        owns_connection = self._connection is None
        if owns_connection:
            read_only = str(self.db_path) != ":memory:"
            conn = duckdb.connect(str(self.db_path), read_only=read_only)
            self.logger.info(f"DuckDB: {self.db_path}")
        else:
            conn = self._connection

        try:
            cursor = conn.execute(self.query)
            if cursor.description is None:
                raise ConfigurationError("Query did not return a result set")
            columns: List[str] = [col[0] for col in cursor.description]
            self.logger.info(f"Query returned {len(columns)} columns: {', '.join(columns)}")
            hydrator = PropertiesHydrator(columns, finisher)
            while True:
                rows = cursor.fetchmany(self.fetch_size)
                if not rows:
                    break
                for row in rows:
                    yield hydrator.hydrate([to_graph_value(v) for v in row])
        finally:
            if owns_connection:
                conn.close()
