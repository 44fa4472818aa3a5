"""Abstract vector index interface."""

from abc import ABC, abstractmethod
from typing import Any

from src.models.search import IndexMatch, IndexRecord, IndexStats

DEFAULT_NAMESPACE = "default"
DEFAULT_UPSERT_BATCH_SIZE = 100


class VectorIndex(ABC):
    """Queryable external store of vectors partitioned into namespaces.

    Mutating calls report failure by returning False rather than raising, so
    callers can continue past a failed batch. A namespace the backend cannot
    store as given raises InvalidInputError.
    """

    @abstractmethod
    def upsert(self, namespace: str, records: list[IndexRecord]) -> bool:
        """Insert or replace records, in batches. Returns True on success."""
        ...

    @abstractmethod
    def query(
        self,
        namespace: str,
        vector: list[float],
        top_k: int = 5,
        where: dict[str, Any] | None = None,
    ) -> list[IndexMatch]:
        """Return up to top_k matches ranked by descending score.

        Raises:
            CollaboratorError: If the backend query fails.
        """
        ...

    @abstractmethod
    def delete_by_metadata(self, namespace: str, key: str, value: Any) -> bool:
        """Delete every record whose metadata ``key`` equals ``value``."""
        ...

    @abstractmethod
    def clear_namespace(self, namespace: str) -> bool:
        ...

    @abstractmethod
    def stats(self, namespace: str | None = None) -> IndexStats | None:
        """Vector counts and dimension for one namespace, or for all when
        namespace is None. Returns None if the stats cannot be read."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        ...
