"""Sentence Transformer embedding provider implementation."""

import logging
import os

from sentence_transformers import SentenceTransformer

from src.embedding.provider import EmbeddingProvider
from src.errors import CollaboratorError

logger = logging.getLogger(__name__)


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Local embeddings from a sentence-transformers model.

    Default model: all-MiniLM-L6-v2 (384 dimensions, ~80MB). Batches are
    encoded in one call, so no pacing delay applies.
    """

    delay = 0.0

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        # Silence transformers load reports while the model is loading
        old_verbosity = os.environ.get("TRANSFORMERS_VERBOSITY")
        os.environ["TRANSFORMERS_VERBOSITY"] = "error"
        try:
            try:
                self._model = SentenceTransformer(model_name, local_files_only=True)
            except OSError:
                logger.info("Model %s not cached locally, downloading", model_name)
                self._model = SentenceTransformer(model_name)
        finally:
            if old_verbosity is None:
                os.environ.pop("TRANSFORMERS_VERBOSITY", None)
            else:
                os.environ["TRANSFORMERS_VERBOSITY"] = old_verbosity
        self._dimension = self._model.get_sentence_embedding_dimension()

    def embed(self, text: str) -> list[float]:
        return self._encode([text])[0]

    def embed_batch(self, texts: list[str]) -> dict[str, list[float] | None]:
        if not texts:
            return {}
        unique = list(dict.fromkeys(texts))
        try:
            vectors = self._encode(unique)
        except CollaboratorError as e:
            logger.warning("Batch encode failed, falling back to single items: %s", e)
            return super().embed_batch(texts)
        return dict(zip(unique, vectors))

    def _encode(self, texts: list[str]) -> list[list[float]]:
        try:
            embeddings = self._model.encode(texts, show_progress_bar=False)
        except Exception as e:
            raise CollaboratorError(f"sentence-transformers encode failed: {e}") from e
        return embeddings.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
