"""
Shared test fixtures for the graph loader tests.

The fake Neo4j session below understands the handful of statements the
loader issues, rejects any other text the way the server would reject a
syntax error, and reports counters like the server, so strategies, the
writer and the pipeline can be tested without a database.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime

import pytest
import polars as pl


@dataclass
class FakeSummaryCounters:
    labels_added: int = 0
    nodes_created: int = 0
    relationships_created: int = 0
    properties_set: int = 0
    nodes_deleted: int = 0


class FakeSummary:
    def __init__(self, counters: FakeSummaryCounters):
        self.counters = counters


class FakeResult:
    def __init__(self, counters: FakeSummaryCounters):
        self._counters = counters

    def consume(self) -> FakeSummary:
        return FakeSummary(self._counters)


class FakeNeo4jError(Exception):
    """Stands in for neo4j.exceptions.Neo4jError."""


class FakeGraph:
    """Committed state: nodes per label and Stack Overflow posts/users."""

    def __init__(self):
        self.nodes = {}
        self.users = set()
        self.posts = {}
        self.relationships = []

    def copy(self) -> "FakeGraph":
        clone = FakeGraph()
        clone.nodes = {label: list(items) for label, items in self.nodes.items()}
        clone.users = set(self.users)
        clone.posts = {k: dict(v) for k, v in self.posts.items()}
        clone.relationships = list(self.relationships)
        return clone


SCHEMA_STATEMENT = re.compile(r"^CREATE (CONSTRAINT|INDEX) \w+ IF NOT EXISTS FOR \(\w+:\w+\) \S")


def _label_of(query: str) -> str:
    return query.split("(n:", 1)[1].split(")", 1)[0].strip("`")


def _execute(graph: FakeGraph, query: str, params: dict) -> FakeSummaryCounters:
    counters = FakeSummaryCounters()

    if SCHEMA_STATEMENT.match(query):
        return counters

    if query.startswith("MATCH (p) WHERE $label IN labels(p)") and "DETACH DELETE" in query:
        removed = graph.nodes.pop(params["label"], [])
        counters.nodes_deleted = len(removed)
        if params["label"] == "Post":
            counters.nodes_deleted += len(graph.posts)
            graph.posts.clear()
        if params["label"] == "User":
            counters.nodes_deleted += len(graph.users)
            graph.users.clear()
        return counters

    if query.startswith("UNWIND $rows"):
        for row in params["rows"]:
            if row.get("user_id") not in graph.users:
                graph.users.add(row.get("user_id"))
                counters.nodes_created += 1
                counters.labels_added += 1
            graph.posts[row["id"]] = {"accepted_answer_id": row.get("accepted_answer_id")}
            counters.nodes_created += 1
            counters.labels_added += 1
            graph.relationships.append(("CREATED_BY", row["id"], row.get("user_id")))
            counters.relationships_created += 1
            parent = graph.posts.get(row.get("parent_id"))
            if parent is not None and row.get("parent_id") != row["id"]:
                graph.relationships.append(("HAS_PARENT", row["id"], row["parent_id"]))
                counters.relationships_created += 1
                if parent["accepted_answer_id"] == row["id"]:
                    graph.relationships.append(
                        ("IS_ACCEPTED_ANSWER_OF", row["id"], row["parent_id"])
                    )
                    counters.relationships_created += 1
                    parent["accepted_answer_id"] = None
        return counters

    if query.startswith("UNWIND $data"):
        rows = params["data"]
    elif query.startswith("CREATE (n:"):
        rows = [params["properties"]]
    else:
        raise FakeNeo4jError(f"Invalid input: {query[:60]!r}")

    label = _label_of(query)
    for properties in rows:
        graph.nodes.setdefault(label, []).append(dict(properties))
        counters.nodes_created += 1
        counters.labels_added += 1
        counters.properties_set += len(properties)
    return counters


class FakeTransaction:
    def __init__(self, session: "FakeSession"):
        self.session = session
        self.staged = session.graph.copy()
        self.statements = []
        self.committed = False
        self.rolled_back = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if not self.committed:
            self.rolled_back = True

    def run(self, query, parameters=None):
        self.session.run_calls += 1
        if self.session.fail_on_run == self.session.run_calls:
            raise FakeNeo4jError(f"Statement {self.session.run_calls} failed")
        params = parameters or {}
        self.statements.append((query, params))
        return FakeResult(_execute(self.staged, query, params))

    def commit(self):
        self.committed = True
        self.session.graph = self.staged


class FakeSession:
    """Records transactions and auto-commit statements."""

    def __init__(self):
        self.graph = FakeGraph()
        self.transactions = []
        self.auto_commit = []
        self.run_calls = 0
        self.fail_on_run = None

    def begin_transaction(self) -> FakeTransaction:
        tx = FakeTransaction(self)
        self.transactions.append(tx)
        return tx

    def run(self, query, parameters=None):
        params = parameters or {}
        self.auto_commit.append((query, params))
        return FakeResult(_execute(self.graph, query, params))

    @property
    def committed(self):
        return [tx for tx in self.transactions if tx.committed]


class RecordingStrategy:
    """Write strategy that remembers every batch it was given."""

    def __init__(self):
        self.batches = []

    def __call__(self, session, label, batch):
        from graph_loader.graph.counters import Counters
        self.batches.append(list(batch))
        return Counters(
            labels_added=len(batch),
            nodes_created=len(batch),
            properties_set=sum(len(r) for r in batch),
        )


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def recording_strategy():
    return RecordingStrategy()


@pytest.fixture
def people_parquet(tmp_path):
    """A small Parquet file with nulls, temporals and a struct column."""
    df = pl.DataFrame({
        "id": [1, 2, 3],
        "name": ["Alice", None, "Carol"],
        "born": [date(1990, 1, 1), date(1985, 6, 15), None],
        "last_seen": [datetime(2024, 1, 1, 12, 0), None, datetime(2024, 3, 1, 8, 30)],
        "address": [{"city": "Berlin"}, {"city": "Paris"}, None],
    })
    path = tmp_path / "people.parquet"
    df.write_parquet(path)
    return path


@pytest.fixture
def posts_parquet(tmp_path):
    """Stack Overflow posts: a question, its accepted answer and another answer."""
    df = pl.DataFrame({
        "id": [1, 2, 3],
        "parent_id": [None, 1, 1],
        "accepted_answer_id": [3, None, None],
        "title_or_excerpt": ["How do I batch writes?", "Use UNWIND", "Use UNWIND with a batch size"],
        "created_at": [datetime(2024, 1, 1), datetime(2024, 1, 2), datetime(2024, 1, 3)],
        "last_activity_date": [datetime(2024, 2, 1), datetime(2024, 1, 2), datetime(2024, 1, 3)],
        "user_id": [10, 11, 10],
        "user_name": ["ann", "bob", "ann"],
        "user_reputation": [100, 5, 100],
    })
    path = tmp_path / "posts.parquet"
    df.write_parquet(path)
    return path


@pytest.fixture
def summary_counters():
    """Factory for Neo4j-style SummaryCounters."""
    return FakeSummaryCounters


@pytest.fixture
def neo4j_error():
    return FakeNeo4jError


@pytest.fixture
def session_factory():
    """Build independent fake sessions."""
    return FakeSession
