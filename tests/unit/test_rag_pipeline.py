"""Unit tests for the RAG ingestion and search orchestrator."""

from unittest.mock import MagicMock

import pytest

from src.errors import CollaboratorError, NotInitializedError
from src.ingestion.document_store import DocumentStore
from src.models.enums import IngestionStage, SimilarityLevel
from src.models.search import IndexMatch
from src.pipeline.rag import RAGPipeline, build_context
from tests.fakes import FakeEmbeddingProvider, InMemoryVectorIndex


def _words(n: int) -> str:
    return " ".join(f"w{i}" for i in range(n))


@pytest.fixture
def pipeline(embedding_provider, vector_index):
    rag = RAGPipeline(embedding_provider, vector_index)
    assert rag.initialize() is True
    return rag


class TestInitialize:
    def test_ready_when_both_collaborators_healthy(self, embedding_provider, vector_index):
        rag = RAGPipeline(embedding_provider, vector_index)
        assert rag.initialize() is True
        assert rag.is_initialized

    def test_fails_when_embedding_unhealthy(self, vector_index):
        rag = RAGPipeline(FakeEmbeddingProvider(healthy=False), vector_index)
        assert rag.initialize() is False
        assert not rag.is_initialized

    def test_fails_when_index_unreachable(self, embedding_provider):
        rag = RAGPipeline(embedding_provider, InMemoryVectorIndex(healthy=False))
        assert rag.initialize() is False
        assert not rag.is_initialized

    @pytest.mark.parametrize(
        "call",
        [
            lambda rag: rag.add_document("d1", "T", "text"),
            lambda rag: rag.add_documents([]),
            lambda rag: rag.search("query"),
            lambda rag: rag.get_system_stats(),
            lambda rag: rag.delete_document("d1"),
        ],
    )
    def test_operations_fail_fast_before_initialize(self, embedding_provider, vector_index, call):
        rag = RAGPipeline(embedding_provider, vector_index)
        with pytest.raises(NotInitializedError):
            call(rag)
        assert embedding_provider.calls == []

    def test_close_requires_reinitialize(self, pipeline):
        pipeline.close()
        with pytest.raises(NotInitializedError):
            pipeline.search("query")


class TestAddDocument:
    def test_ingests_all_chunks(self, pipeline, vector_index):
        result = pipeline.add_document("d1", "Title", _words(250), {"source": "test"})

        assert result.success
        assert result.chunk_count == 3
        assert result.embedded_count == 3
        assert result.error is None
        assert set(vector_index.namespaces["default"]) == {"d1_chunk_0", "d1_chunk_1", "d1_chunk_2"}

    def test_records_local_embeddings(self, pipeline):
        pipeline.add_document("d1", "Title", "a b c")
        entries = pipeline.document_store.get_all_chunks_with_embeddings()
        assert [e.chunk_id for e in entries] == ["d1_chunk_0"]

    def test_indexed_metadata_describes_chunk(self, pipeline, vector_index):
        pipeline.add_document("d1", "Title", "a b c")
        metadata = vector_index.namespaces["default"]["d1_chunk_0"].metadata
        assert metadata["document_id"] == "d1"
        assert metadata["document_title"] == "Title"
        assert metadata["content"] == "a b c"
        assert metadata["chunk_index"] == 0

    def test_uses_requested_namespace(self, pipeline, vector_index):
        pipeline.add_document("d1", "Title", "a b c", namespace="other")
        assert "d1_chunk_0" in vector_index.namespaces["other"]
        assert "default" not in vector_index.namespaces

    def test_empty_document_succeeds_without_collaborator_calls(self, pipeline, embedding_provider, vector_index):
        embedding_provider.calls.clear()
        result = pipeline.add_document("d1", "Empty", "   ")
        assert result.success
        assert result.chunk_count == 0
        assert embedding_provider.calls == []
        assert vector_index.upsert_calls == 0

    def test_partially_embedded_document_indexes_embedded_chunks(self, vector_index):
        content = _words(250)
        store = DocumentStore()
        second_chunk = " ".join(f"w{i}" for i in range(90, 190))
        provider = FakeEmbeddingProvider(fail_on={second_chunk})
        rag = RAGPipeline(provider, vector_index, document_store=store)
        rag.initialize()

        result = rag.add_document("d1", "T", content)

        assert result.success
        assert result.chunk_count == 3
        assert result.embedded_count == 2
        assert set(vector_index.namespaces["default"]) == {"d1_chunk_0", "d1_chunk_2"}

    def test_embed_stage_failure_aborts_document(self, vector_index):
        provider = FakeEmbeddingProvider(fail_on={"a b c"})
        rag = RAGPipeline(provider, vector_index)
        rag.initialize()

        result = rag.add_document("d1", "T", "a b c")

        assert not result.success
        assert result.stage == IngestionStage.EMBED
        assert "No chunk embeddings" in result.error
        assert vector_index.upsert_calls == 0

    def test_upsert_failure_is_reported(self, embedding_provider):
        rag = RAGPipeline(embedding_provider, InMemoryVectorIndex(fail_upsert=True))
        rag.initialize()

        result = rag.add_document("d1", "T", "a b c")

        assert not result.success
        assert result.stage == IngestionStage.UPSERT

    def test_invalid_id_fails_register_stage(self, pipeline):
        result = pipeline.add_document("", "T", "a b c")
        assert not result.success
        assert result.stage == IngestionStage.REGISTER

    def test_readding_replaces_indexed_chunks(self, pipeline, vector_index):
        pipeline.add_document("d1", "T", _words(250))
        pipeline.add_document("d1", "T", "short replacement")
        assert set(vector_index.namespaces["default"]) == {"d1_chunk_0"}
        assert vector_index.namespaces["default"]["d1_chunk_0"].metadata["content"] == "short replacement"

    def test_readding_replaces_vectors_left_by_another_store(self, embedding_provider, vector_index):
        first = RAGPipeline(embedding_provider, vector_index, document_store=DocumentStore())
        first.initialize()
        first.add_document("d1", "T", _words(250))

        second = RAGPipeline(embedding_provider, vector_index, document_store=DocumentStore())
        second.initialize()
        result = second.add_document("d1", "T", "short replacement")

        assert result.success
        assert set(vector_index.namespaces["default"]) == {"d1_chunk_0"}

    def test_empty_replacement_removes_old_vectors(self, pipeline, vector_index):
        pipeline.add_document("d1", "T", _words(250))
        result = pipeline.add_document("d1", "T", "")
        assert result.success
        assert vector_index.namespaces["default"] == {}

    def test_failed_removal_of_old_vectors_fails_register_stage(self, pipeline):
        pipeline.vector_index = MagicMock()
        pipeline.vector_index.delete_by_metadata.return_value = False
        result = pipeline.add_document("d1", "T", "a b c")
        assert not result.success
        assert result.stage == IngestionStage.REGISTER
        pipeline.vector_index.upsert.assert_not_called()

    @pytest.mark.parametrize(
        "title,content,metadata",
        [
            ("T", None, None),
            (None, "a b c", None),
            ("T", 42, None),
            ("T", "a b c", ["not", "a", "mapping"]),
        ],
    )
    def test_malformed_fields_fail_register_stage(self, pipeline, vector_index, title, content, metadata):
        result = pipeline.add_document("d1", title, content, metadata)
        assert not result.success
        assert result.stage == IngestionStage.REGISTER
        assert vector_index.upsert_calls == 0

    def test_collaborator_exception_is_contained(self, vector_index):
        provider = MagicMock()
        provider.health_check.return_value = True
        provider.embed_batch.side_effect = CollaboratorError("rate limited")
        rag = RAGPipeline(provider, vector_index)
        rag.initialize()

        result = rag.add_document("d1", "T", "a b c")

        assert not result.success
        assert result.error == "rate limited"


class TestAddDocuments:
    def test_failure_does_not_stop_batch(self, vector_index):
        provider = FakeEmbeddingProvider(fail_on={"broken doc"})
        rag = RAGPipeline(provider, vector_index)
        rag.initialize()

        report = rag.add_documents([
            {"id": "d1", "title": "One", "content": "first doc"},
            {"id": "d2", "title": "Two", "content": "broken doc"},
            {"id": "d3", "title": "Three", "content": "third doc", "metadata": {"k": "v"}},
        ])

        assert [r.document_id for r in report.succeeded] == ["d1", "d3"]
        assert [r.document_id for r in report.failed] == ["d2"]
        assert report.chunks_stored == 2

    def test_malformed_record_does_not_stop_batch(self, pipeline):
        report = pipeline.add_documents([
            {"id": "bad", "title": "Bad", "content": None},
            {"id": "ok", "title": "Ok", "content": "good content"},
        ])

        assert [r.document_id for r in report.succeeded] == ["ok"]
        assert [r.document_id for r in report.failed] == ["bad"]
        assert report.failed[0].stage == IngestionStage.REGISTER

    def test_record_missing_keys_is_reported(self, pipeline):
        report = pipeline.add_documents([
            {"id": "partial", "content": "no title here"},
            "not a mapping",
            {"id": "ok", "title": "Ok", "content": "good content"},
        ])

        assert [r.document_id for r in report.succeeded] == ["ok"]
        partial, garbage = report.failed
        assert partial.document_id == "partial"
        assert partial.stage == IngestionStage.REGISTER
        assert "title" in partial.error
        assert garbage.document_id == ""
        assert pipeline.document_store.get_document("partial") is None


class TestSearch:
    def test_returns_ranked_chunks_with_context(self):
        provider = FakeEmbeddingProvider(
            vectors={
                "cats purr": [1.0, 0.0, 0.0],
                "dogs bark": [0.0, 1.0, 0.0],
                "about cats": [0.9, 0.1, 0.0],
            }
        )
        rag = RAGPipeline(provider, InMemoryVectorIndex())
        rag.initialize()
        rag.add_document("cats", "Cats", "cats purr")
        rag.add_document("dogs", "Dogs", "dogs bark")

        response = rag.search("about cats", top_k=2)

        assert response.query == "about cats"
        assert response.total_results == 2
        assert [item.rank for item in response.results] == [1, 2]
        assert response.results[0].document_id == "cats"
        assert response.results[0].interpretation is SimilarityLevel.NEARLY_IDENTICAL
        assert response.results[0].chunk.content == "cats purr"
        assert response.context == (
            '[Context 1 from "Cats"]\ncats purr\n\n'
            '[Context 2 from "Dogs"]\ndogs bark'
        )

    def test_uses_query_embedding(self, vector_index):
        provider = MagicMock()
        provider.health_check.return_value = True
        provider.embed_query.return_value = [1.0, 0.0, 0.0]
        rag = RAGPipeline(provider, vector_index)
        rag.initialize()

        rag.search("question")

        provider.embed_query.assert_called_once_with("question")

    def test_passes_filter_to_index(self, pipeline):
        pipeline.vector_index = MagicMock()
        pipeline.vector_index.query.return_value = []
        pipeline.search("q", top_k=3, namespace="ns", where={"document_id": "d1"})
        args = pipeline.vector_index.query.call_args[0]
        assert args[0] == "ns"
        assert args[2] == 3
        assert args[3] == {"document_id": "d1"}

    def test_empty_index_gives_empty_response(self, pipeline):
        response = pipeline.search("anything")
        assert response.total_results == 0
        assert response.context == ""

    def test_query_embedding_failure_returns_none(self, vector_index):
        provider = FakeEmbeddingProvider(fail_on={"bad query"})
        rag = RAGPipeline(provider, vector_index)
        rag.initialize()
        assert rag.search("bad query") is None

    def test_index_failure_returns_none(self, pipeline):
        pipeline.vector_index = MagicMock()
        pipeline.vector_index.query.side_effect = CollaboratorError("timeout")
        assert pipeline.search("q") is None


class TestBuildContext:
    def test_empty(self):
        assert build_context([]) == ""

    def test_headers_follow_rank_order(self):
        items = []
        for title in ["B", "A"]:
            item = MagicMock()
            item.document_title = title
            item.chunk.content = f"text {title}"
            items.append(item)
        assert build_context(items) == '[Context 1 from "B"]\ntext B\n\n[Context 2 from "A"]\ntext A'


class TestStatsAndDelete:
    def test_system_stats(self, pipeline):
        pipeline.add_document("d1", "T", "a b c")
        stats = pipeline.get_system_stats()
        assert stats["documents"]["total_documents"] == 1
        assert stats["vectors"].vector_count == 1
        assert stats["namespace"] == "default"
        assert stats["system_status"] == "healthy"

    def test_system_stats_for_one_namespace(self, pipeline, vector_index):
        pipeline.add_document("d1", "T", "a b c")
        pipeline.add_document("d2", "T", "d e f", namespace="other")

        all_stats = pipeline.get_system_stats()
        assert all_stats["vectors"].namespaces == {"default": 1, "other": 1}

        scoped = pipeline.get_system_stats("other")
        assert scoped["namespace"] == "other"
        assert scoped["vectors"].namespaces == {"other": 1}
        assert scoped["vectors"].vector_count == 1

    def test_system_stats_reports_index_error(self, pipeline):
        pipeline.vector_index = MagicMock()
        pipeline.vector_index.stats.return_value = None
        assert pipeline.get_system_stats()["system_status"] == "error"

    def test_delete_removes_vectors_and_local_document(self, pipeline, vector_index):
        pipeline.add_document("d1", "T", _words(250))
        pipeline.add_document("d2", "T2", "keep me")

        assert pipeline.delete_document("d1") is True
        assert set(vector_index.namespaces["default"]) == {"d2_chunk_0"}
        assert pipeline.document_store.get_document("d1") is None

    def test_delete_failure_keeps_local_document(self, pipeline):
        pipeline.add_document("d1", "T", "a b c")
        pipeline.vector_index = MagicMock()
        pipeline.vector_index.delete_by_metadata.return_value = False
        assert pipeline.delete_document("d1") is False
        assert pipeline.document_store.get_document("d1") is not None

    def test_index_match_metadata_round_trip(self, pipeline):
        pipeline.vector_index = MagicMock()
        pipeline.vector_index.query.return_value = [
            IndexMatch(
                id="x_chunk_4",
                score=0.42,
                metadata={
                    "document_id": "x",
                    "document_title": "X",
                    "content": "body",
                    "chunk_index": 4,
                    "word_count": 1,
                    "start_position": 10,
                    "end_position": 14,
                },
            )
        ]
        item = pipeline.search("q").results[0]
        assert item.chunk.chunk_index == 4
        assert item.chunk.start_position == 10
        assert item.interpretation == "Somewhat related"
