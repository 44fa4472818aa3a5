"""Enumeration types for the RAG data models."""

from enum import Enum


class SimilarityLevel(str, Enum):
    NEARLY_IDENTICAL = "Nearly identical meaning"
    VERY_SIMILAR = "Very similar meaning"
    MODERATELY_SIMILAR = "Moderately similar"
    SOMEWHAT_RELATED = "Somewhat related"
    SLIGHTLY_RELATED = "Slightly related"
    VERY_DIFFERENT = "Very different meaning"

    def __str__(self) -> str:
        return self.value


class IngestionStage(str, Enum):
    REGISTER = "register"
    EMBED = "embed"
    PAIR = "pair"
    UPSERT = "upsert"
