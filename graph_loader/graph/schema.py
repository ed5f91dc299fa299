"""
Neo4j Schema Definition for the Stack Overflow graph.

Defines uniqueness constraints for users and posts and an index on the
accepted answer id used while linking answers.

Node labels: User, Post
Relationship types: CREATED_BY, HAS_PARENT, IS_ACCEPTED_ANSWER_OF
"""

from pathlib import Path

SCHEMA_PATH = Path(__file__).parent / "schema.cypher"


def get_schema_statements() -> list[str]:
    """
    Parse schema.cypher into individual executable statements.

    Uses semicolon-based splitting to handle multi-line statements.

    Returns:
        List of Cypher statements ready for execution.
    """
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"Schema file not found at {SCHEMA_PATH}")

    return parse_schema(SCHEMA_PATH.read_text())


def parse_schema(schema_ddl: str) -> list[str]:
    """
    Split schema DDL into single-line statements.

    Comment lines are dropped before splitting, so a `;` inside a comment
    never ends a statement.
    """
    code = "\n".join(
        l for l in schema_ddl.splitlines()
        if l.strip() and not l.strip().startswith("--")
    )
    statements = []
    for raw_stmt in code.split(";"):
        cleaned = " ".join(l.strip() for l in raw_stmt.splitlines()).strip()
        if cleaned:
            statements.append(cleaned)
    return statements


# Labels cleared before a Stack Overflow load, in deletion order
NODE_LABELS = ["Post", "User"]

RELATIONSHIP_TYPES = ["CREATED_BY", "HAS_PARENT", "IS_ACCEPTED_ANSWER_OF"]
