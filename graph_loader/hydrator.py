"""
Record hydration.

Turns positional rows into sparse property maps. The column index is built
once from the source's column names; each row fills a slot array which is
then materialized into a map without the null columns.

Usage:
    hydrator = PropertiesHydrator(["id", "name"])
    hydrator.hydrate((1, None))   # -> {"id": 1}
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Sequence, TypeVar

from .exceptions import UnknownColumnError

R = TypeVar("R")

PropertyRecord = Dict[str, Any]

# Sentinel for slots that were never written
_UNSET = object()


@dataclass(frozen=True)
class MapResult:
    """A single streamed row, wrapping the hydrated properties."""
    row: Mapping[str, Any]


def freeze(properties: PropertyRecord) -> Mapping[str, Any]:
    """Finisher that exposes the properties as a read-only mapping."""
    return MappingProxyType(properties)


class PropertiesHydrator(Generic[R]):
    """
    Hydrates positional records into property maps.

    Args:
        columns: Column names in source order. Duplicate names share a slot.
        finisher: Applied to every finished property map. Defaults to ``dict``.
    """

    def __init__(
        self,
        columns: Iterable[str],
        finisher: Callable[[PropertyRecord], R] = dict,
    ):
        self._source_columns = list(columns)
        self.index: Dict[str, int] = {}
        for column in self._source_columns:
            self.index.setdefault(column, len(self.index))
        self.finisher = finisher

    @property
    def columns(self) -> List[str]:
        return list(self.index)

    def start(self) -> List[Any]:
        return [_UNSET] * len(self.index)

    def add(self, target: List[Any], column: str, value: Any) -> List[Any]:
        try:
            slot = self.index[column]
        except KeyError:
            raise UnknownColumnError(column) from None
        target[slot] = value
        return target

    def finish(self, target: Sequence[Any]) -> R:
        properties = {
            column: target[slot]
            for column, slot in self.index.items()
            if target[slot] is not _UNSET and target[slot] is not None
        }
        return self.finisher(properties)

    def hydrate(self, values: Sequence[Any]) -> R:
        """Hydrate a row whose values are in the same order as ``columns``."""
        target = self.start()
        for column, value in zip(self._source_columns, values):
            self.add(target, column, value)
        return self.finish(target)

    def hydrate_pairs(self, pairs: Iterable[tuple]) -> R:
        """Hydrate a row given as ``(column, value)`` pairs."""
        target = self.start()
        for column, value in pairs:
            self.add(target, column, value)
        return self.finish(target)
