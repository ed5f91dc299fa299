"""
Buffered graph writer.

Buffers property maps up to a batch size and hands every full batch to a
write strategy. Counters returned by the strategy are added to a running
total.

Usage:
    writer = BufferedGraphWriter(session, 50_000, WriteMode.SERVER_SIDE_BATCHING, "Person")
    for record in records:
        writer.append(record)
    writer.flush()
    print(writer.counters)

Not thread-safe: appends and flushes must come from a single caller, in order.
"""

from typing import Any, Iterable, List, Optional

from ..exceptions import ConfigurationError
from .counters import Counters
from .strategies import WriteStrategy
from ..utils.logging import get_logger


class BufferedGraphWriter:
    """
    Accumulates records and writes them in batches.

    Args:
        session: Neo4j session handed to the strategy on every flush.
        batch_size: Number of buffered records that triggers a flush.
        strategy: Callable ``(session, label, batch) -> Counters``.
        label: Node label passed through to the strategy.
    """

    def __init__(
        self,
        session: Any,
        batch_size: int,
        strategy: WriteStrategy,
        label: Optional[str] = None,
    ):
        if batch_size < 1:
            raise ConfigurationError(f"Batch size must be at least 1, got {batch_size}")

        self.session = session
        self.batch_size = batch_size
        self.strategy = strategy
        self.label = label
        self._buffer: List[Any] = []
        self._counters = Counters()
        self.batches_written = 0
        self.records_written = 0
        self.logger = get_logger("BufferedGraphWriter")

    def __enter__(self) -> "BufferedGraphWriter":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        # Only drain on success; a failed run must not write more batches
        if exc_type is None:
            self.flush()

    @property
    def counters(self) -> Counters:
        """Counters accumulated over every flush so far."""
        return self._counters

    def get_counters(self) -> Counters:
        return self._counters

    @property
    def pending(self) -> int:
        """Number of buffered records not yet written."""
        return len(self._buffer)

    def append(self, record: Any) -> None:
        """Buffer a record, flushing when the buffer reaches the batch size."""
        self._buffer.append(record)
        if len(self._buffer) >= self.batch_size:
            self.flush()

    def extend(self, records: Iterable[Any]) -> None:
        for record in records:
            self.append(record)

    def flush(self) -> Counters:
        """
        Write the buffered records, if any.

        Returns:
            The counters reported for this flush (zero when nothing was buffered).

        Raises:
            Whatever the strategy raises. The buffer is kept as-is in that case.
        """
        if not self._buffer:
            return Counters()

        size = len(self._buffer)
        try:
            delta = self.strategy(self.session, self.label, self._buffer)
        except Exception:
            self.logger.error(
                f"Batch {self.batches_written + 1} ({size} records) failed to write"
            )
            raise

        self._counters = self._counters + delta
        self._buffer = []
        self.batches_written += 1
        self.records_written += size
        self.logger.debug(
            f"Batch {self.batches_written}: {size} records, "
            f"{delta.nodes_created} nodes created"
        )
        return delta
