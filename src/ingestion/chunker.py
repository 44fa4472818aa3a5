"""Overlapping word-window chunker."""

import logging

from src.errors import InvalidInputError
from src.models.chunk import Chunk, make_chunk_id

logger = logging.getLogger(__name__)

# Chunk sizes are configured in characters and converted with a fixed
# ~5 chars per word estimate; actual word lengths are never measured.
CHARS_PER_WORD = 5

DEFAULT_CHUNK_SIZE = 500
DEFAULT_CHUNK_OVERLAP = 50


def words_per_window(chunk_size: int, chunk_overlap: int) -> tuple[int, int]:
    """Convert character sizes to (words_per_chunk, step_words).

    The step is clamped to one word so the window always advances, even when
    the overlap is as large as the chunk itself.
    """
    if chunk_size <= 0:
        raise InvalidInputError(f"chunk_size must be > 0, got {chunk_size}")
    if chunk_overlap < 0:
        raise InvalidInputError(f"chunk_overlap must be >= 0, got {chunk_overlap}")

    words_per_chunk = max(1, chunk_size // CHARS_PER_WORD)
    overlap_words = chunk_overlap // CHARS_PER_WORD
    return words_per_chunk, max(1, words_per_chunk - overlap_words)


def chunk_text(
    content: str,
    document_id: str,
    title: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
) -> list[Chunk]:
    """Split content into overlapping fixed-size word windows.

    Chunk indices follow emission order starting at 0. Positions are a running
    total of emitted chunk lengths, so overlapping words are counted again.
    """
    words = content.split()
    words_per_chunk, step = words_per_window(chunk_size, chunk_overlap)

    chunks: list[Chunk] = []
    position = 0

    for start in range(0, len(words), step):
        window = words[start:start + words_per_chunk]
        window_text = " ".join(window)
        if not window_text.strip():
            break

        index = len(chunks)
        chunks.append(
            Chunk(
                id=make_chunk_id(document_id, index),
                document_id=document_id,
                document_title=title,
                content=window_text,
                chunk_index=index,
                start_position=position,
                end_position=position + len(window_text),
                word_count=len(window),
            )
        )
        position += len(window_text)

    logger.debug("Chunked %s into %d chunks", document_id, len(chunks))
    return chunks
