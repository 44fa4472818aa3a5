"""Gemini embedding provider backed by the Google GenAI API."""

import logging

from google import genai
from google.genai.types import EmbedContentConfig

from src.embedding.provider import DEFAULT_BATCH_DELAY, EmbeddingProvider
from src.errors import CollaboratorError

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "text-embedding-004"

# Output sizes of known Gemini embedding models
GEMINI_DIMENSIONS = {
    "text-embedding-004": 768,
    "gemini-embedding-001": 3072,
}


class GeminiEmbeddingProvider(EmbeddingProvider):
    """Remote embeddings from Google's text embedding models.

    Stored chunks are embedded with the RETRIEVAL_DOCUMENT task type and
    queries with RETRIEVAL_QUERY.
    """

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_GEMINI_MODEL,
        delay: float = DEFAULT_BATCH_DELAY,
        client: genai.Client | None = None,
    ):
        if client is None:
            if not api_key:
                raise CollaboratorError(
                    "GOOGLE_API_KEY not set. Add it to your .env file or environment."
                )
            client = genai.Client(api_key=api_key)
        self._client = client
        self._model = model
        self.delay = delay
        self._dimension = GEMINI_DIMENSIONS.get(model.removeprefix("models/"))

    @property
    def model_name(self) -> str:
        return self._model

    def embed(self, text: str) -> list[float]:
        return self._embed(text, task_type="RETRIEVAL_DOCUMENT")

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text, task_type="RETRIEVAL_QUERY")

    def _embed(self, text: str, task_type: str) -> list[float]:
        try:
            response = self._client.models.embed_content(
                model=self._model,
                contents=text,
                config=EmbedContentConfig(task_type=task_type),
            )
        except Exception as e:
            raise CollaboratorError(f"Gemini embedding request failed: {e}") from e

        if not response.embeddings or not response.embeddings[0].values:
            raise CollaboratorError("Gemini returned no embedding values")

        values = list(response.embeddings[0].values)
        if self._dimension is None:
            self._dimension = len(values)
        return values

    @property
    def dimension(self) -> int:
        if self._dimension is None:
            self._dimension = len(self.embed("dimension check"))
        return self._dimension
