"""Chunk and chunk-embedding data models."""

from dataclasses import dataclass
from typing import Any

from src.errors import InvalidInputError


def make_chunk_id(document_id: str, chunk_index: int) -> str:
    """Return the id of the chunk at ``chunk_index`` within a document."""
    return f"{document_id}_chunk_{chunk_index}"


@dataclass(frozen=True)
class Chunk:
    """A contiguous word window of a document, the unit of retrieval.

    ``start_position`` and ``end_position`` are running totals of the lengths
    of previously emitted chunks. With overlap they do not point into the
    original document text.
    """

    id: str
    document_id: str
    document_title: str
    content: str
    chunk_index: int
    start_position: int
    end_position: int
    word_count: int

    def __post_init__(self):
        if not self.content.strip():
            raise InvalidInputError("content must not be empty")
        if self.chunk_index < 0:
            raise InvalidInputError("chunk_index must be >= 0")
        if self.end_position < self.start_position:
            raise InvalidInputError("end_position must be >= start_position")

    def to_metadata(self) -> dict[str, Any]:
        """Flat metadata bag stored alongside the chunk vector."""
        return {
            "document_id": self.document_id,
            "document_title": self.document_title,
            "content": self.content,
            "chunk_index": self.chunk_index,
            "word_count": self.word_count,
            "start_position": self.start_position,
            "end_position": self.end_position,
        }

    @classmethod
    def from_metadata(cls, id: str, metadata: dict[str, Any]) -> "Chunk":
        return cls(
            id=id,
            document_id=str(metadata.get("document_id", "")),
            document_title=str(metadata.get("document_title", "")),
            content=str(metadata.get("content", "")),
            chunk_index=int(metadata.get("chunk_index", 0)),
            start_position=int(metadata.get("start_position", 0)),
            end_position=int(metadata.get("end_position", 0)),
            word_count=int(metadata.get("word_count", 0)),
        )


@dataclass(frozen=True)
class ChunkEmbedding:
    """A chunk paired with its embedding vector."""

    chunk_id: str
    embedding: list[float]
    chunk: Chunk

    def __post_init__(self):
        if not self.embedding:
            raise InvalidInputError("embedding must not be empty")
        if self.chunk_id != self.chunk.id:
            raise InvalidInputError(
                f"chunk_id {self.chunk_id!r} does not match chunk {self.chunk.id!r}"
            )
