"""Unit tests for overlapping word-window chunking."""

import pytest

from src.errors import InvalidInputError
from src.ingestion.chunker import CHARS_PER_WORD, chunk_text, words_per_window
from src.models.chunk import Chunk


def _words(n: int) -> str:
    return " ".join(f"w{i}" for i in range(n))


class TestWordsPerWindow:
    def test_default_sizes(self):
        assert words_per_window(500, 50) == (100, 90)

    def test_uses_five_chars_per_word(self):
        assert CHARS_PER_WORD == 5
        assert words_per_window(29, 9) == (5, 4)

    def test_step_clamped_when_overlap_equals_chunk(self):
        assert words_per_window(50, 50) == (10, 1)

    def test_step_clamped_when_overlap_exceeds_chunk(self):
        assert words_per_window(50, 500) == (10, 1)

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(InvalidInputError):
            words_per_window(0, 0)

    def test_rejects_negative_overlap(self):
        with pytest.raises(InvalidInputError):
            words_per_window(100, -5)


class TestChunkText:
    def test_empty_content_yields_no_chunks(self):
        assert chunk_text("", "d1", "T") == []

    def test_whitespace_content_yields_no_chunks(self):
        assert chunk_text("   \n\t  ", "d1", "T") == []

    def test_short_content_is_single_chunk(self):
        chunks = chunk_text("a b c d e f g h", "d1", "T")
        assert len(chunks) == 1
        assert chunks[0].content == "a b c d e f g h"
        assert chunks[0].word_count == 8

    def test_chunks_are_chunk_records(self):
        for chunk in chunk_text(_words(250), "d1", "Title"):
            assert isinstance(chunk, Chunk)
            assert chunk.document_id == "d1"
            assert chunk.document_title == "Title"

    def test_chunk_ids_derive_from_document_and_index(self):
        chunks = chunk_text(_words(250), "doc", "T")
        assert [c.id for c in chunks] == [f"doc_chunk_{i}" for i in range(len(chunks))]

    def test_indices_are_contiguous_from_zero(self):
        chunks = chunk_text(_words(1000), "d1", "T", chunk_size=100, chunk_overlap=30)
        assert [c.chunk_index for c in chunks] == list(range(len(chunks)))

    def test_windows_overlap_by_configured_words(self):
        # 20 words per chunk, 5 words overlap, step 15
        chunks = chunk_text(_words(40), "d1", "T", chunk_size=100, chunk_overlap=25)
        assert len(chunks) == 3
        assert chunks[0].content.split()[-5:] == chunks[1].content.split()[:5]
        assert chunks[1].content.split()[0] == "w15"
        assert chunks[2].content.split()[0] == "w30"
        assert chunks[2].word_count == 10

    def test_window_starts_until_end_of_words(self):
        # 100 words per chunk, step 90: windows start at 0 and 90
        chunks = chunk_text(_words(150), "d1", "T")
        assert len(chunks) == 2
        assert chunks[1].word_count == 60

    def test_positions_are_running_content_totals(self):
        chunks = chunk_text(_words(40), "d1", "T", chunk_size=100, chunk_overlap=25)
        position = 0
        for chunk in chunks:
            assert chunk.start_position == position
            assert chunk.end_position == position + len(chunk.content)
            position = chunk.end_position

    def test_large_overlap_still_advances(self):
        chunks = chunk_text(_words(12), "d1", "T", chunk_size=50, chunk_overlap=100)
        assert len(chunks) == 12
        assert [c.content.split()[0] for c in chunks] == [f"w{i}" for i in range(12)]

    def test_collapses_irregular_whitespace(self):
        chunks = chunk_text("\n   alpha\t\tbeta \n\n gamma  ", "d1", "T")
        assert chunks[0].content == "alpha beta gamma"

    def test_tiny_chunk_size_uses_one_word_windows(self):
        chunks = chunk_text("one two three", "d1", "T", chunk_size=3, chunk_overlap=0)
        assert [c.content for c in chunks] == ["one", "two", "three"]
