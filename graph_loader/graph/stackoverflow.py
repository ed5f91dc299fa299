"""
Stack Overflow graph-linking strategy.

Loads posts from a Stack Overflow dump (converted to Parquet) and links them
into a graph in a single statement per batch:

1. MERGE the author as (:User {id})
2. CREATE the (:Post) and its CREATED_BY edge
3. Link the post to its parent with HAS_PARENT
4. Turn the parent's accepted_answer_id into an IS_ACCEPTED_ANSWER_OF edge

Step 3 only finds parents that are already stored, either earlier in the
same statement or by an earlier, committed batch. Batches therefore have to
be written strictly one after another, each committed before the next one
starts. Writing batches in parallel would silently drop HAS_PARENT and
IS_ACCEPTED_ANSWER_OF edges.
"""

from typing import Any, List, Optional

from .counters import Counters
from .queries import get_query
from ..utils.logging import get_logger

# Columns the ingest statement reads from every row
POST_COLUMNS = [
    "id",
    "parent_id",
    "accepted_answer_id",
    "title_or_excerpt",
    "created_at",
    "last_activity_date",
    "user_id",
    "user_name",
    "user_reputation",
]

_log = get_logger("StackOverflowStrategy")


def post_row(record: Any) -> dict:
    """Project a record onto POST_COLUMNS."""
    return {column: record.get(column) for column in POST_COLUMNS}


def link_posts(session: Any, label: Optional[str], batch: List[Any]) -> Counters:
    """
    Write a batch of post rows and link them to users and parent posts.

    Args:
        session: Neo4j session.
        label: Ignored; the statement uses the fixed User and Post labels.
        batch: Row maps. Only the keys in POST_COLUMNS are sent; missing keys
            are sent as null, other keys are dropped.

    Returns:
        Counters reported for the statement.
    """
    rows = [post_row(record) for record in batch]
    with session.begin_transaction() as tx:
        summary = tx.run(get_query("ingest_posts"), {"rows": rows}).consume()
        result = Counters.from_summary(summary.counters)
        tx.commit()
    _log.debug(
        f"Linked {len(batch)} posts: {result.nodes_created} nodes, "
        f"{result.relationships_created} relationships"
    )
    return result
