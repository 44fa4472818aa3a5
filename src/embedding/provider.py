"""Abstract embedding provider interface."""

import logging
import time
from abc import ABC, abstractmethod

from src.errors import CollaboratorError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_DELAY = 0.1


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Implementations wrap a specific embedding backend (a remote API or a
    local model). Batch embedding defaults to a sequential loop of single
    calls paced by ``delay`` seconds to stay under rate limits; backends with
    a native batch API override ``embed_batch``.
    """

    delay: float = DEFAULT_BATCH_DELAY

    @abstractmethod
    def embed(self, text: str) -> list[float]:
        """Generate the embedding for a single document text.

        Raises:
            CollaboratorError: If the backend call fails.
        """
        ...

    def embed_query(self, text: str) -> list[float]:
        """Generate the embedding for a search query.

        Some backends embed queries differently from stored documents.
        Default delegates to embed().
        """
        return self.embed(text)

    def embed_batch(self, texts: list[str]) -> dict[str, list[float] | None]:
        """Embed texts one at a time, mapping each text to its vector.

        A failed item maps to None instead of aborting the batch. Duplicate
        texts share one entry.
        """
        embeddings: dict[str, list[float] | None] = {}
        logger.info("Processing %d embeddings...", len(texts))

        for i, text in enumerate(texts, start=1):
            logger.debug("  %d/%d: %.60r", i, len(texts), text)
            try:
                embeddings[text] = self.embed(text)
            except CollaboratorError as e:
                logger.warning("Embedding failed for item %d/%d: %s", i, len(texts), e)
                embeddings[text] = None
            if self.delay > 0:
                time.sleep(self.delay)

        failed = sum(1 for v in embeddings.values() if v is None)
        logger.info("Completed batch embedding (%d failed)", failed)
        return embeddings

    def health_check(self) -> bool:
        """Return True if the backend can embed a sample text."""
        try:
            return len(self.embed("test")) > 0
        except CollaboratorError as e:
            logger.error("Embedding provider health check failed: %s", e)
            return False

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension (e.g., 768)."""
        ...
