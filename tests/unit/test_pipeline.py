"""
Unit tests for the load pipeline helpers.
"""

import pytest

from graph_loader.graph.counters import Counters
from graph_loader.graph.queries import get_query
from graph_loader.graph.schema import get_schema_statements
from graph_loader.graph.strategies import WriteMode, server_side_batching
from graph_loader.pipeline import (
    GraphLoadPipeline,
    LoadResult,
    apply_schema,
    clean_label,
)
from graph_loader.sources import ParquetSource


class TestLoadResult:
    """Tests for the run summary."""

    def test_summary_line(self):
        result = LoadResult(
            strategy="SERVER_SIDE_BATCHING",
            label="Person",
            batch_size=2,
            counters=Counters(3, 3, 1, 9),
            elapsed_ms=42,
        )
        assert result.summary() == (
            "Added 3 labels, created 3 nodes and 1 relationships, "
            "set 9 properties, completed after 42 ms"
        )

    def test_defaults(self):
        result = LoadResult(strategy="x", label=None, batch_size=1)
        assert result.counters == Counters()
        assert result.records_read == 0


class TestCleanLabel:
    """Tests for deleting existing nodes before a load."""

    def test_deletes_only_that_label(self, fake_session):
        fake_session.graph.nodes = {"Person": [{"id": 1}, {"id": 2}], "City": [{"id": 9}]}
        deleted = clean_label(fake_session, "Person", 1000)
        assert deleted == 2
        assert "Person" not in fake_session.graph.nodes
        assert fake_session.graph.nodes["City"] == [{"id": 9}]

    def test_runs_in_auto_commit_with_chunk_size(self, fake_session):
        clean_label(fake_session, "Person", 500)
        assert fake_session.transactions == []
        query, params = fake_session.auto_commit[0]
        assert query == get_query("delete_label")
        assert params == {"label": "Person", "rows": 500}

    def test_nothing_to_delete(self, fake_session):
        assert clean_label(fake_session, "Person", 10) == 0


class TestApplySchema:
    """Tests for schema statements."""

    def test_runs_every_statement_in_order(self, fake_session):
        statements = get_schema_statements()
        apply_schema(fake_session, statements)
        assert [q for q, _ in fake_session.auto_commit] == statements

    def test_empty(self, fake_session):
        apply_schema(fake_session, [])
        assert fake_session.auto_commit == []

    def test_shipped_schema_is_valid_cypher(self, fake_session):
        apply_schema(fake_session, get_schema_statements())
        sent = [q for q, _ in fake_session.auto_commit]
        assert len(sent) == 3
        assert all(q.startswith("CREATE ") for q in sent), sent

    def test_malformed_statement_fails(self, fake_session, neo4j_error):
        with pytest.raises(neo4j_error):
            apply_schema(fake_session, ["every statement is idempotent. CREATE CONSTRAINT x"])


class TestGraphLoadPipeline:
    """Tests for streaming records through the writer."""

    def test_run_with_recording_strategy(self, recording_strategy):
        pipeline = GraphLoadPipeline(None, 2, recording_strategy, "Person")
        result = pipeline.run({"id": i} for i in range(5))

        assert [len(b) for b in recording_strategy.batches] == [2, 2, 1]
        assert result.records_read == 5
        assert result.batches_written == 3
        assert result.counters.nodes_created == 5
        assert result.label == "Person"

    @pytest.mark.parametrize("mode", list(WriteMode))
    def test_run_with_write_mode(self, fake_session, mode):
        pipeline = GraphLoadPipeline(fake_session, 2, mode, "Person")
        result = pipeline.run([{"id": 1}, {"id": 2}, {"id": 3}])

        assert result.strategy == mode.value
        assert result.counters == Counters(3, 3, 0, 3)
        assert len(fake_session.committed) == 2
        assert fake_session.graph.nodes["Person"] == [{"id": 1}, {"id": 2}, {"id": 3}]

    def test_strategy_name_from_function(self, fake_session):
        result = GraphLoadPipeline(fake_session, 10, server_side_batching, "Person").run([])
        assert result.strategy == "server_side_batching"
        assert result.batches_written == 0
        assert fake_session.transactions == []

    def test_from_parquet(self, fake_session, people_parquet):
        pipeline = GraphLoadPipeline(fake_session, 2, WriteMode.SERVER_SIDE_BATCHING, "Person")
        result = pipeline.run(ParquetSource(people_parquet).stream_content())

        people = fake_session.graph.nodes["Person"]
        assert result.records_read == 3
        assert [p["id"] for p in people] == [1, 2, 3]
        assert "name" not in people[1]
        assert result.counters.properties_set == sum(len(p) for p in people)

    def test_store_error_aborts_without_final_flush(self, fake_session, neo4j_error):
        fake_session.fail_on_run = 2
        pipeline = GraphLoadPipeline(fake_session, 1, WriteMode.SERVER_SIDE_BATCHING, "Person")
        with pytest.raises(neo4j_error):
            pipeline.run([{"id": 1}, {"id": 2}, {"id": 3}])

        assert fake_session.graph.nodes["Person"] == [{"id": 1}]
        assert fake_session.transactions[-1].rolled_back
        assert fake_session.run_calls == 2

    def test_source_error_keeps_committed_batches(self, fake_session):
        def broken():
            yield {"id": 1}
            yield {"id": 2}
            raise RuntimeError("source broke")

        pipeline = GraphLoadPipeline(fake_session, 1, WriteMode.SERVER_SIDE_BATCHING, "Person")
        with pytest.raises(RuntimeError):
            pipeline.run(broken())
        assert len(fake_session.graph.nodes["Person"]) == 2
