"""
Cypher statements used by the loader.

Each statement is documented with what it writes or reads. Statements that
need a node label take it through ``{label}`` and must be rendered with
``render_query``; labels cannot be bound as query parameters.
"""

from typing import Dict, List


# Named collection of statements
CYPHER_QUERIES: Dict[str, Dict[str, str]] = {
    # ─────────────────────────────────────────────────────────────────
    # Pre-load cleanup
    # ─────────────────────────────────────────────────────────────────
    "delete_label": {
        "description": (
            "Detach-delete every node carrying the given label, committing "
            "in chunks of $rows rows. Must run in an auto-commit transaction."
        ),
        "query": """
            MATCH (p) WHERE $label IN labels(p)
            CALL {
                WITH p DETACH DELETE p
            } IN TRANSACTIONS OF $rows ROWS
        """,
    },

    # ─────────────────────────────────────────────────────────────────
    # Node writes
    # ─────────────────────────────────────────────────────────────────
    "create_node": {
        "description": (
            "Create a single node with a fixed label and set all of its "
            "properties from $properties. Issued once per record."
        ),
        "query": """
            CREATE (n:{label}) SET n = $properties
        """,
    },
    "unwind_create_nodes": {
        "description": (
            "Create one node per element of $data, all with the same label, "
            "in a single statement."
        ),
        "query": """
            UNWIND $data AS properties CREATE (n:{label}) SET n = properties
        """,
    },

    # ─────────────────────────────────────────────────────────────────
    # Stack Overflow graph
    # ─────────────────────────────────────────────────────────────────
    "ingest_posts": {
        "description": (
            "Merge the author of every row in $rows, create the post and its "
            "CREATED_BY edge, link it to an already stored parent post and "
            "mark accepted answers with IS_ACCEPTED_ANSWER_OF."
        ),
        "query": """
            UNWIND $rows AS row
            MERGE (u:User {id: row.user_id})
            ON CREATE
            SET u.name = row.user_name,
                u.reputation = row.user_reputation
            CREATE (p:Post {id: row.id, title_or_excerpt: row.title_or_excerpt, last_activity: row.last_activity_date, accepted_answer_id: row.accepted_answer_id})
            CREATE (p) -[:CREATED_BY {at: row.created_at}]-> (u)
            WITH row, p
            CALL {
                WITH row, p
                MATCH (pp:Post {id: row.parent_id})
                CREATE (p) -[:HAS_PARENT]-> (pp)
            }
            WITH p
            CALL {
                WITH p
                MATCH (p) -[:HAS_PARENT]-> (pp:Post {accepted_answer_id: p.id})
                CREATE (p) -[:IS_ACCEPTED_ANSWER_OF]-> (pp)
                SET pp.accepted_answer_id = null
            }
        """,
    },

    # ─────────────────────────────────────────────────────────────────
    # Post-load checks
    # ─────────────────────────────────────────────────────────────────
    "count_label": {
        "description": "Count the nodes carrying the given label.",
        "query": """
            MATCH (n) WHERE $label IN labels(n) RETURN count(n) AS count
        """,
    },
    "count_relationships": {
        "description": "Count the relationships of the given $type.",
        "query": """
            MATCH ()-[r]->() WHERE type(r) = $type RETURN count(r) AS count
        """,
    },
}


def get_query(name: str) -> str:
    """
    Get a statement by name.

    Args:
        name: Statement name from CYPHER_QUERIES.

    Returns:
        The Cypher statement, stripped of surrounding whitespace.

    Raises:
        KeyError: If the name is not in the catalog.
    """
    if name not in CYPHER_QUERIES:
        available = ", ".join(CYPHER_QUERIES.keys())
        raise KeyError(f"Unknown query '{name}'. Available: {available}")
    return CYPHER_QUERIES[name]["query"].strip()


def list_queries() -> List[str]:
    """List all statement names."""
    return list(CYPHER_QUERIES.keys())


def quote_label(label: str) -> str:
    """Backtick-quote a label for embedding into statement text."""
    return "`" + label.replace("`", "``") + "`"


def render_query(name: str, label: str) -> str:
    """Get a statement with its ``{label}`` placeholder filled in."""
    return get_query(name).replace("{label}", quote_label(label))
