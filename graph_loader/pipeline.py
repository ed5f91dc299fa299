"""
Load pipeline.

Wires a record source to a BufferedGraphWriter: optional cleanup and schema
statements first, then every record is appended in order, and a final flush
drains the last partial batch.

Usage:
    with connect(config.neo4j) as driver, driver.session(database="neo4j") as session:
        clean_label(session, "Person", batch_size)
        pipeline = GraphLoadPipeline(session, batch_size, WriteMode.SERVER_SIDE_BATCHING, "Person")
        result = pipeline.run(ParquetSource("people.parquet").stream_content())
"""

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from neo4j import GraphDatabase

from .graph.counters import Counters
from .graph.queries import get_query
from .graph.strategies import WriteStrategy
from .graph.writer import BufferedGraphWriter
from .utils.config import Neo4jConfig
from .utils.logging import get_logger


@dataclass
class LoadResult:
    """Outcome of one pipeline run."""
    strategy: str
    label: Optional[str]
    batch_size: int
    records_read: int = 0
    batches_written: int = 0
    counters: Counters = field(default_factory=Counters)
    elapsed_ms: int = 0

    def summary(self) -> str:
        c = self.counters
        return (
            f"Added {c.labels_added} labels, created {c.nodes_created} nodes "
            f"and {c.relationships_created} relationships, set {c.properties_set} "
            f"properties, completed after {self.elapsed_ms} ms"
        )


def connect(config: Neo4jConfig):
    """Open a Neo4j driver and check that the server is reachable."""
    driver = GraphDatabase.driver(config.uri, auth=(config.username, config.password))
    try:
        driver.verify_connectivity()
    except Exception:
        driver.close()
        raise
    get_logger("Pipeline").info(f"Connected to Neo4j: {config.uri} ({config.database})")
    return driver


def clean_label(session: Any, label: str, batch_size: int) -> int:
    """Delete every node carrying ``label`` in chunks of ``batch_size`` rows. Returns the count deleted."""
    log = get_logger("Pipeline")
    summary = session.run(
        get_query("delete_label"), {"label": label, "rows": batch_size}
    ).consume()
    deleted = summary.counters.nodes_deleted
    log.info(f"Removed {deleted} existing :{label} nodes")
    return deleted


def apply_schema(session: Any, statements: List[str]) -> None:
    """Run schema statements (constraints, indexes) one by one."""
    log = get_logger("Pipeline")
    log.info(f"Applying schema: {len(statements)} statements")
    for stmt in statements:
        session.run(stmt).consume()


class GraphLoadPipeline:
    """
    Streams records from a source into Neo4j through a BufferedGraphWriter.

    Args:
        session: Neo4j session used for every batch.
        batch_size: Records per batch.
        strategy: Write strategy (a WriteMode member or any compatible callable).
        label: Node label handed to the strategy.
    """

    def __init__(
        self,
        session: Any,
        batch_size: int,
        strategy: WriteStrategy,
        label: Optional[str] = None,
    ):
        self.session = session
        self.batch_size = batch_size
        self.strategy = strategy
        self.label = label
        self.logger = get_logger("Pipeline")

    def run(self, records: Iterable[Any]) -> LoadResult:
        """
        Write every record and return the totals.

        Errors from the source or the store abort the run; batches already
        committed stay in the database.
        """
        strategy_name = str(getattr(self.strategy, "__name__", self.strategy))
        self.logger.info(
            f"Using {strategy_name} with a batch size of {self.batch_size}"
            + (f", creating nodes with the label {self.label}" if self.label else "")
        )

        start = time.monotonic()
        records_read = 0
        writer = BufferedGraphWriter(self.session, self.batch_size, self.strategy, self.label)
        with writer:
            for record in records:
                writer.append(record)
                records_read += 1

        result = LoadResult(
            strategy=strategy_name,
            label=self.label,
            batch_size=self.batch_size,
            records_read=records_read,
            batches_written=writer.batches_written,
            counters=writer.counters,
            elapsed_ms=int((time.monotonic() - start) * 1000),
        )
        self.logger.info(f"{records_read} records in {result.batches_written} batches")
        self.logger.info(result.summary())
        return result
