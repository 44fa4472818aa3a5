"""Shared pytest fixtures."""

import pytest

from tests.fakes import FakeEmbeddingProvider, InMemoryVectorIndex


@pytest.fixture
def embedding_provider():
    return FakeEmbeddingProvider()


@pytest.fixture
def vector_index():
    return InMemoryVectorIndex()
