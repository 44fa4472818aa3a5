"""Vector index, search and ingestion result data models."""

from dataclasses import dataclass, field
from typing import Any

from src.errors import InvalidInputError
from src.models.chunk import Chunk
from src.models.enums import IngestionStage, SimilarityLevel


@dataclass(frozen=True)
class IndexRecord:
    """A vector to upsert into the external index."""

    id: str
    vector: list[float]
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.id:
            raise InvalidInputError("id must not be empty")
        if not self.vector:
            raise InvalidInputError(f"vector for {self.id!r} must not be empty")


@dataclass(frozen=True)
class IndexMatch:
    """A ranked match returned by a vector index query."""

    id: str
    score: float
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class IndexStats:
    """Aggregate statistics reported by a vector index."""

    vector_count: int
    dimension: int | None
    namespaces: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SearchResultItem:
    """One ranked chunk in a search response."""

    rank: int
    similarity: float
    interpretation: SimilarityLevel
    document_id: str
    document_title: str
    chunk: Chunk


@dataclass(frozen=True)
class SearchResponse:
    """Ranked chunks for a query and the context assembled from them."""

    query: str
    top_k: int
    results: list[SearchResultItem]
    context: str

    @property
    def total_results(self) -> int:
        return len(self.results)


@dataclass
class IngestionResult:
    """Outcome of ingesting a single document."""

    document_id: str
    title: str
    success: bool
    chunk_count: int = 0
    embedded_count: int = 0
    stage: IngestionStage | None = None
    error: str | None = None

    def __post_init__(self):
        if self.stage is not None and not isinstance(self.stage, IngestionStage):
            self.stage = IngestionStage(self.stage)


@dataclass
class IngestionReport:
    """Collective outcome of a batch ingestion."""

    results: list[IngestionResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[IngestionResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[IngestionResult]:
        return [r for r in self.results if not r.success]

    @property
    def chunks_stored(self) -> int:
        return sum(r.embedded_count for r in self.succeeded)
