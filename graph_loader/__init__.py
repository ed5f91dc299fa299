"""
Graph Batch Loader - Parquet / SQL to Neo4j.

Technologies:
- Sources: Polars (Parquet), DuckDB (SQL)
- Graph: Neo4j Python driver (batched writes)
- Config: Pydantic Settings + YAML
- Logging: Loguru
"""

from .graph import BufferedGraphWriter, Counters, WriteMode
from .hydrator import MapResult, PropertiesHydrator
from .pipeline import GraphLoadPipeline, LoadResult

__all__ = [
    "BufferedGraphWriter",
    "Counters",
    "GraphLoadPipeline",
    "LoadResult",
    "MapResult",
    "PropertiesHydrator",
    "WriteMode",
]

__version__ = "1.0.0"
