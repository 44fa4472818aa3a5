"""Document data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from src.errors import InvalidInputError


@dataclass(frozen=True)
class Document:
    """A text document registered in the knowledge base."""

    id: str
    title: str
    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    added_at: datetime = field(default_factory=datetime.now)
    character_count: int = 0
    word_count: int = 0

    def __post_init__(self):
        if not self.id:
            raise InvalidInputError("id must not be empty")
        if self.character_count < 0 or self.word_count < 0:
            raise InvalidInputError("counts must be >= 0")

    @classmethod
    def create(
        cls,
        id: str,
        title: str,
        content: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> "Document":
        """Build a document, deriving its character and word counts from content.

        Raises:
            InvalidInputError: If id, title or content is not a string, or
                metadata is not a mapping.
        """
        for name, value in (("id", id), ("title", title), ("content", content)):
            if not isinstance(value, str):
                raise InvalidInputError(f"{name} must be a string, got {type(value).__name__}")
        if metadata is not None and not isinstance(metadata, Mapping):
            raise InvalidInputError(f"metadata must be a mapping, got {type(metadata).__name__}")
        return cls(
            id=id,
            title=title,
            content=content,
            metadata=dict(metadata or {}),
            character_count=len(content),
            word_count=len(content.split()),
        )
