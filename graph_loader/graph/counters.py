"""
Write-outcome counters.

Neo4j reports a ``SummaryCounters`` object for every consumed result.
``Counters`` keeps the four metrics the loader cares about and combines
them by addition.
"""

from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class Counters:
    """Immutable accumulator of labels, nodes, relationships and properties written."""
    labels_added: int = 0
    nodes_created: int = 0
    relationships_created: int = 0
    properties_set: int = 0

    @classmethod
    def from_summary(cls, counters: Any) -> "Counters":
        """Build from a Neo4j ``SummaryCounters`` (or anything with the same attributes)."""
        return cls(
            labels_added=counters.labels_added,
            nodes_created=counters.nodes_created,
            relationships_created=counters.relationships_created,
            properties_set=counters.properties_set,
        )

    def __add__(self, other: Any) -> "Counters":
        if not isinstance(other, Counters):
            try:
                other = Counters.from_summary(other)
            except AttributeError:
                return NotImplemented
        return Counters(*(
            getattr(self, f.name) + getattr(other, f.name) for f in fields(self)
        ))

    combine = __add__

    def as_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


ZERO = Counters()
