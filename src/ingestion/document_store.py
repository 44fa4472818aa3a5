"""In-memory registry of documents, their chunks and chunk embeddings."""

import logging
import math
import threading
from typing import Any, Sequence

from src.errors import NotFoundError
from src.ingestion.chunker import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, chunk_text
from src.models.chunk import Chunk, ChunkEmbedding
from src.models.document import Document

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class DocumentStore:
    """Local bookkeeping for ingested documents.

    Re-adding an existing document id replaces the document, its chunk set
    and any embeddings stored for the old chunks. Every mutation runs under a
    single store-wide lock.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
    ):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self._documents: dict[str, Document] = {}
        self._chunks: dict[str, list[Chunk]] = {}
        self._embeddings: dict[str, ChunkEmbedding] = {}
        self._lock = threading.Lock()

    def add_document(
        self,
        id: str,
        title: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> Document:
        """Register a document and chunk it immediately."""
        document = Document.create(id, title, content, metadata)
        chunks = chunk_text(
            content,
            document_id=id,
            title=title,
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
        )

        with self._lock:
            replaced = id in self._documents
            if replaced:
                self._drop_embeddings(id)
            self._documents[id] = document
            self._chunks[id] = chunks

        if replaced:
            logger.info("Replaced document %r (%d chunks)", title, len(chunks))
        else:
            logger.info("Added document %r (%d chunks)", title, len(chunks))
        return document

    def store_chunk_embeddings(
        self,
        document_id: str,
        embeddings: Sequence[list[float] | None],
    ) -> int:
        """Pair a document's chunks with embeddings by position.

        Positions with a missing embedding leave that chunk without one.
        Returns the number of embeddings stored.
        """
        with self._lock:
            chunks = self._chunks.get(document_id)
            if chunks is None:
                raise NotFoundError(f"Document {document_id} not found")

            stored = 0
            for chunk, embedding in zip(chunks, embeddings):
                if embedding is None or len(embedding) == 0:
                    continue
                self._embeddings[chunk.id] = ChunkEmbedding(
                    chunk_id=chunk.id,
                    embedding=list(embedding),
                    chunk=chunk,
                )
                stored += 1

        logger.info(
            "Stored embeddings for %d/%d chunks from document %r",
            stored, len(chunks), document_id,
        )
        return stored

    def get_all_chunks_with_embeddings(self) -> list[ChunkEmbedding]:
        return list(self._embeddings.values())

    def get_document(self, id: str) -> Document | None:
        return self._documents.get(id)

    def get_all_documents(self) -> list[Document]:
        return list(self._documents.values())

    def get_document_chunks(self, document_id: str) -> list[Chunk]:
        return list(self._chunks.get(document_id, []))

    def search_documents(self, query: str) -> list[Document]:
        """Case-insensitive substring match on title or content."""
        needle = query.lower()
        return [
            doc for doc in self._documents.values()
            if needle in doc.title.lower() or needle in doc.content.lower()
        ]

    def remove_document(self, id: str) -> bool:
        with self._lock:
            if id not in self._documents:
                return False
            self._drop_embeddings(id)
            del self._documents[id]
            self._chunks.pop(id, None)
        logger.info("Removed document %r", id)
        return True

    def clear_all(self) -> None:
        with self._lock:
            self._documents.clear()
            self._chunks.clear()
            self._embeddings.clear()
        logger.info("Cleared all documents and embeddings")

    def get_stats(self) -> dict[str, int]:
        total_documents = len(self._documents)
        total_chunks = sum(len(chunks) for chunks in self._chunks.values())
        total_words = sum(doc.word_count for doc in self._documents.values())
        total_characters = sum(doc.character_count for doc in self._documents.values())

        if total_documents:
            average_words = _round_half_up(total_words / total_documents)
            average_chunks = _round_half_up(total_chunks / total_documents)
        else:
            average_words = average_chunks = 0

        return {
            "total_documents": total_documents,
            "total_chunks": total_chunks,
            "total_embeddings": len(self._embeddings),
            "total_words": total_words,
            "total_characters": total_characters,
            "average_words_per_document": average_words,
            "average_chunks_per_document": average_chunks,
        }

    def _drop_embeddings(self, document_id: str) -> None:
        for chunk in self._chunks.get(document_id, []):
            self._embeddings.pop(chunk.id, None)
