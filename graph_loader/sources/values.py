"""
Value normalization for graph properties.

Neo4j accepts Python temporal types natively but not every value a source
driver hands out. Values are converted here before hydration.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID


def to_graph_value(value: Any) -> Any:
    """
    Convert a source value into something Neo4j can store.

    - timezone-aware timestamps become local date-times
    - dates, times and naive timestamps are kept
    - Decimal becomes float, UUID becomes str
    - everything else is passed through unchanged
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    return value
