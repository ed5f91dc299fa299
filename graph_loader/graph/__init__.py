"""
Graph Layer - Neo4j batch writing.

Buffers property maps and writes them to Neo4j with a pluggable strategy.
"""

from .counters import Counters
from .queries import CYPHER_QUERIES
from .stackoverflow import link_posts
from .strategies import WriteMode, client_side_batching, server_side_batching
from .writer import BufferedGraphWriter

__all__ = [
    "BufferedGraphWriter",
    "Counters",
    "CYPHER_QUERIES",
    "WriteMode",
    "client_side_batching",
    "link_posts",
    "server_side_batching",
]
