"""Deterministic hash-based embedder for offline demos and tests."""

import hashlib
import math
import re

from src.embedding.provider import EmbeddingProvider

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class HashEmbeddingProvider(EmbeddingProvider):
    """Embed text by hashing tokens into buckets and L2-normalizing.

    Texts sharing words get similar vectors; no network access is needed.
    """

    delay = 0.0

    def __init__(self, dimension: int = 256):
        if dimension <= 0:
            raise ValueError("dimension must be > 0")
        self._dimension = dimension

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * self._dimension
        tokens = _TOKEN_RE.findall(text.lower())
        if not tokens:
            # Keep empty text off the origin so cosine similarity stays defined
            vector[0] = 1.0
            return vector

        for token in tokens:
            digest = hashlib.sha256(token.encode("utf-8")).digest()
            vector[int.from_bytes(digest[:4], "big") % self._dimension] += 1.0

        norm = math.sqrt(sum(v * v for v in vector))
        return [v / norm for v in vector]

    @property
    def dimension(self) -> int:
        return self._dimension
