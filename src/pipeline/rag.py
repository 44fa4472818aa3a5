"""Retrieval-augmented generation pipeline orchestrator.

Wires together: document store → chunker → embedding provider → vector index
for ingestion, and embedding provider → vector index → similarity labels for
search.
"""

import logging
from typing import Any, Iterable, Mapping

from src.embedding.provider import EmbeddingProvider
from src.errors import CollaboratorError, NotInitializedError, RAGError
from src.ingestion.document_store import DocumentStore
from src.models.chunk import Chunk
from src.models.enums import IngestionStage
from src.models.search import (
    IndexMatch,
    IndexRecord,
    IngestionReport,
    IngestionResult,
    SearchResponse,
    SearchResultItem,
)
from src.retrieval.similarity import interpret_similarity
from src.vectorstore.index import DEFAULT_NAMESPACE, VectorIndex

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5

REQUIRED_DOCUMENT_KEYS = ("id", "title", "content")


def _missing_keys(doc: Any) -> list[str]:
    if not isinstance(doc, Mapping):
        return list(REQUIRED_DOCUMENT_KEYS)
    return [key for key in REQUIRED_DOCUMENT_KEYS if key not in doc]


def _rejected_record(doc: Any, missing: list[str]) -> IngestionResult:
    fields = doc if isinstance(doc, Mapping) else {}
    return IngestionResult(
        document_id=str(fields.get("id", "")),
        title=str(fields.get("title", "")),
        success=False,
        stage=IngestionStage.REGISTER,
        error=f"Document record is missing {', '.join(missing)}",
    )


def build_context(items: Iterable[SearchResultItem]) -> str:
    """Concatenate ranked chunks, each headed by its source document title."""
    return "\n\n".join(
        f'[Context {n} from "{item.document_title}"]\n{item.chunk.content}'
        for n, item in enumerate(items, start=1)
    )


class RAGPipeline:
    """Document ingestion and semantic search over an external vector index.

    ``initialize()`` must succeed before any other operation; until then
    every operation raises NotInitializedError.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_index: VectorIndex,
        document_store: DocumentStore | None = None,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.embedding_provider = embedding_provider
        self.vector_index = vector_index
        self.document_store = document_store or DocumentStore()
        self.namespace = namespace
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> bool:
        """Check both collaborators and mark the pipeline ready."""
        logger.info("Initializing RAG system...")
        self._initialized = False

        if not self.embedding_provider.health_check():
            logger.error("Failed to initialize RAG system: embedding service is not available")
            return False
        logger.info("Embedding service ready")

        if not self.vector_index.health_check():
            logger.error("Failed to initialize RAG system: vector index is not available")
            return False
        stats = self.vector_index.stats()
        if stats is not None:
            logger.info(
                "Vector index ready: %d vectors, dimension %s, %d namespaces",
                stats.vector_count, stats.dimension, len(stats.namespaces),
            )

        self._initialized = True
        logger.info("RAG system initialized")
        return True

    def close(self) -> None:
        self._initialized = False

    def add_document(
        self,
        id: str,
        title: str,
        content: str,
        metadata: Mapping[str, Any] | None = None,
        namespace: str | None = None,
    ) -> IngestionResult:
        """Register, chunk, embed and index a single document.

        A failure at any stage stops the remaining stages for this document
        and is reported in the returned result.
        """
        self._require_initialized()
        namespace = namespace or self.namespace
        result = IngestionResult(document_id=id, title=title, success=False)

        try:
            # Stage 1: register and chunk
            result.stage = IngestionStage.REGISTER
            self.document_store.add_document(id, title, content, metadata)
            chunks = self.document_store.get_document_chunks(id)
            result.chunk_count = len(chunks)
            logger.info("Processing document %r: %d chunks", title, len(chunks))

            # The index may hold vectors from an earlier process with its own store
            if not self.vector_index.delete_by_metadata(namespace, "document_id", id):
                raise CollaboratorError(f"Could not remove previous vectors for {id!r}")

            if not chunks:
                logger.warning("No chunks produced for %r", title)
                result.stage = None
                result.success = True
                return result

            # Stage 2: embed chunk texts
            result.stage = IngestionStage.EMBED
            chunk_texts = [chunk.content for chunk in chunks]
            embeddings = self.embedding_provider.embed_batch(chunk_texts)
            vectors = [embeddings.get(text) for text in chunk_texts]
            if all(vector is None for vector in vectors):
                raise CollaboratorError("No chunk embeddings could be generated")

            # Stage 3: pair chunks with embeddings
            result.stage = IngestionStage.PAIR
            result.embedded_count = self.document_store.store_chunk_embeddings(id, vectors)
            records = [
                self._to_record(chunk, vector)
                for chunk, vector in zip(chunks, vectors)
                if vector is not None
            ]
            if len(records) < len(chunks):
                logger.warning(
                    "%d of %d chunks of %r have no embedding and will not be indexed",
                    len(chunks) - len(records), len(chunks), title,
                )

            # Stage 4: upsert into the vector index
            result.stage = IngestionStage.UPSERT
            if not self.vector_index.upsert(namespace, records):
                raise CollaboratorError(f"Vector index rejected {len(records)} chunks")
        except RAGError as e:
            result.error = str(e)
            logger.error("Failed to add document %r at %s stage: %s", title, result.stage.value, e)
            return result

        result.stage = None
        result.success = True
        logger.info("Document %r added to RAG system", title)
        return result

    def add_documents(
        self,
        documents: Iterable[Mapping[str, Any]],
        namespace: str | None = None,
    ) -> IngestionReport:
        """Ingest documents sequentially; one failure never stops the batch.

        Each mapping needs ``id``, ``title`` and ``content`` keys and may carry
        ``metadata``.
        """
        self._require_initialized()
        report = IngestionReport()
        for doc in documents:
            missing = _missing_keys(doc)
            if missing:
                result = _rejected_record(doc, missing)
                logger.error("Skipping document record %r: %s", result.document_id, result.error)
                report.results.append(result)
                continue
            report.results.append(
                self.add_document(
                    doc["id"],
                    doc["title"],
                    doc["content"],
                    doc.get("metadata"),
                    namespace=namespace,
                )
            )
        logger.info(
            "Ingested %d/%d documents (%d chunks)",
            len(report.succeeded), len(report.results), report.chunks_stored,
        )
        return report

    def search(
        self,
        query: str,
        top_k: int = DEFAULT_TOP_K,
        namespace: str | None = None,
        where: dict[str, Any] | None = None,
    ) -> SearchResponse | None:
        """Embed the query and return the most similar indexed chunks.

        Returns None if the query could not be embedded or searched.
        """
        self._require_initialized()
        namespace = namespace or self.namespace
        logger.info("Searching for: %r", query)

        try:
            query_embedding = self.embedding_provider.embed_query(query)
            matches = self.vector_index.query(namespace, query_embedding, top_k, where)
            items = [self._to_result_item(rank, match) for rank, match in enumerate(matches, start=1)]
        except RAGError as e:
            logger.error("Search failed: %s", e)
            return None

        return SearchResponse(
            query=query,
            top_k=top_k,
            results=items,
            context=build_context(items),
        )

    def get_system_stats(self, namespace: str | None = None) -> dict[str, Any]:
        """Local document stats plus index stats.

        Index stats cover only ``namespace`` when one is given, otherwise
        every namespace of the index.
        """
        self._require_initialized()
        vectors = self.vector_index.stats(namespace)
        return {
            "documents": self.document_store.get_stats(),
            "vectors": vectors,
            "namespace": namespace or self.namespace,
            "system_status": "healthy" if vectors is not None else "error",
        }

    def delete_document(self, document_id: str, namespace: str | None = None) -> bool:
        """Remove a document's vectors from the index and from the local store."""
        self._require_initialized()
        namespace = namespace or self.namespace
        logger.info("Deleting document %r", document_id)

        if not self.vector_index.delete_by_metadata(namespace, "document_id", document_id):
            return False
        self.document_store.remove_document(document_id)
        return True

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError("RAG system not initialized. Call initialize() first.")

    @staticmethod
    def _to_record(chunk: Chunk, vector: list[float]) -> IndexRecord:
        return IndexRecord(id=chunk.id, vector=vector, metadata=chunk.to_metadata())

    @staticmethod
    def _to_result_item(rank: int, match: IndexMatch) -> SearchResultItem:
        chunk = Chunk.from_metadata(match.id, match.metadata)
        return SearchResultItem(
            rank=rank,
            similarity=match.score,
            interpretation=interpret_similarity(match.score),
            document_id=chunk.document_id,
            document_title=chunk.document_title,
            chunk=chunk,
        )
