"""
Exception types raised by the loader.

Source-read and store-write failures are not wrapped: Polars, DuckDB and
Neo4j driver exceptions propagate unchanged so the operator sees the
original error.
"""


class LoaderError(Exception):
    """Base class for loader errors."""


class ConfigurationError(LoaderError, ValueError):
    """Raised when the loader is misconfigured before any data is written."""


class UnknownColumnError(ConfigurationError):
    """Raised when a row references a column missing from the column index."""

    def __init__(self, column: str):
        super().__init__(f"Unknown column: {column!r}")
        self.column = column
