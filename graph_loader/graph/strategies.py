"""
Write strategies.

A write strategy takes a Neo4j session, a node label and a batch of property
maps, writes the batch inside one transaction and returns the counters the
server reported. Any callable with that signature can be handed to
``BufferedGraphWriter``; the two built-in strategies are exposed through
``WriteMode``.

Client-side batching issues one CREATE per record inside the transaction
(one round-trip per record). Server-side batching sends the whole batch as a
list parameter and expands it with UNWIND (one round-trip per batch).
"""

from enum import Enum
from typing import Any, Callable, List, Optional

from ..exceptions import ConfigurationError
from .counters import Counters
from .queries import render_query
from ..utils.logging import get_logger

WriteStrategy = Callable[[Any, Optional[str], List[Any]], Counters]

_log = get_logger("WriteStrategy")


def _require_label(label: Optional[str]) -> str:
    if not label or not label.strip():
        raise ConfigurationError("A node label is required for this write mode")
    return label


def client_side_batching(session: Any, label: Optional[str], batch: List[Any]) -> Counters:
    """Create every record with its own statement, all in one transaction."""
    query = render_query("create_node", _require_label(label))
    result = Counters()
    with session.begin_transaction() as tx:
        for properties in batch:
            summary = tx.run(query, {"properties": properties}).consume()
            result = result + summary.counters
        tx.commit()
    _log.debug(f"Client-side batch committed: {len(batch)} statements")
    return result


def server_side_batching(session: Any, label: Optional[str], batch: List[Any]) -> Counters:
    """Create the whole batch with a single UNWIND statement."""
    query = render_query("unwind_create_nodes", _require_label(label))
    with session.begin_transaction() as tx:
        summary = tx.run(query, {"data": list(batch)}).consume()
        result = Counters.from_summary(summary.counters)
        tx.commit()
    _log.debug(f"Server-side batch committed: {len(batch)} rows")
    return result


class WriteMode(str, Enum):
    """Selects one of the built-in strategies. Parsing ignores case."""
    CLIENT_SIDE_BATCHING = "CLIENT_SIDE_BATCHING"
    SERVER_SIDE_BATCHING = "SERVER_SIDE_BATCHING"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, value: Any) -> "WriteMode":
        """Parse a mode name, raising ConfigurationError for unknown names."""
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError(
                f"Invalid write mode {value!r}. Choose one of: {choices}"
            ) from None

    @property
    def strategy(self) -> WriteStrategy:
        return _STRATEGIES[self]

    def __call__(self, session: Any, label: Optional[str], batch: List[Any]) -> Counters:
        return self.strategy(session, label, batch)

    def __str__(self) -> str:
        return self.value


_STRATEGIES = {
    WriteMode.CLIENT_SIDE_BATCHING: client_side_batching,
    WriteMode.SERVER_SIDE_BATCHING: server_side_batching,
}
