"""
Record sources - Parquet (Polars) and SQL (DuckDB).
"""

from .parquet import ParquetSource
from .sql import SqlSource
from .values import to_graph_value

__all__ = [
    "ParquetSource",
    "SqlSource",
    "to_graph_value",
]
