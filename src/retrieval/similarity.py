"""Cosine similarity, ranking and threshold clustering over embeddings.

All functions are pure computation on in-memory vectors. Embedding mappings
are iterated in insertion order, which makes ranking ties and clustering
deterministic.
"""

import logging
from typing import Mapping, Sequence

import numpy as np

from src.errors import InvalidInputError, NotFoundError
from src.models.enums import SimilarityLevel
from src.models.similarity import Cluster, ClusterAnalysis, SimilarityMatrix, SimilarWord

logger = logging.getLogger(__name__)

Vector = Sequence[float]

DEFAULT_CLUSTER_THRESHOLD = 0.7

# Checked in order; the first strictly exceeded bound wins.
INTERPRETATION_THRESHOLDS = [
    (0.9, SimilarityLevel.NEARLY_IDENTICAL),
    (0.7, SimilarityLevel.VERY_SIMILAR),
    (0.5, SimilarityLevel.MODERATELY_SIMILAR),
    (0.3, SimilarityLevel.SOMEWHAT_RELATED),
    (0.1, SimilarityLevel.SLIGHTLY_RELATED),
]


def _has_vector(vector: Vector | None) -> bool:
    return vector is not None and len(vector) > 0


def cosine_similarity(a: Vector | None, b: Vector | None) -> float:
    """Cosine of the angle between two vectors, in [-1, 1].

    Raises InvalidInputError if either vector is missing, empty, or the
    lengths differ. A zero-magnitude vector has similarity 0.0 to anything.
    """
    if not _has_vector(a) or not _has_vector(b):
        raise InvalidInputError("Invalid embeddings provided")
    if len(a) != len(b):
        raise InvalidInputError(f"Embedding dimension mismatch: {len(a)} != {len(b)}")

    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    norm_a = np.linalg.norm(va)
    norm_b = np.linalg.norm(vb)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = float(np.dot(va, vb) / (norm_a * norm_b))
    # Clamp float drift so identical vectors never exceed 1.0
    return max(-1.0, min(1.0, similarity))


def find_most_similar(
    target: str,
    embeddings: Mapping[str, Vector | None],
    top_k: int = 5,
) -> list[SimilarWord]:
    """Rank every other word by similarity to ``target``.

    Words without an embedding are skipped. Ties keep the mapping's order.
    """
    target_vector = embeddings.get(target)
    if not _has_vector(target_vector):
        raise NotFoundError(f'Target word "{target}" not found in embeddings')

    similarities = []
    for word, vector in embeddings.items():
        if word == target or not _has_vector(vector):
            continue
        similarities.append(SimilarWord(word, cosine_similarity(target_vector, vector)))

    similarities.sort(key=lambda s: s.similarity, reverse=True)
    return similarities[:max(0, top_k)]


def build_similarity_matrix(embeddings: Mapping[str, Vector | None]) -> SimilarityMatrix:
    """Pairwise similarity for all words.

    Each unordered pair is computed once and mirrored. The diagonal is
    exactly 1.0. Pairs involving a word without an embedding are left out.
    """
    words = list(embeddings)
    matrix: SimilarityMatrix = {word: {} for word in words}

    for i, first in enumerate(words):
        matrix[first][first] = 1.0
        first_vector = embeddings[first]
        if not _has_vector(first_vector):
            continue
        for second in words[i + 1:]:
            second_vector = embeddings[second]
            if not _has_vector(second_vector):
                continue
            score = cosine_similarity(first_vector, second_vector)
            matrix[first][second] = score
            matrix[second][first] = score

    logger.info("Built %dx%d similarity matrix", len(words), len(words))
    return matrix


def cluster_by_threshold(
    embeddings: Mapping[str, Vector | None],
    threshold: float = DEFAULT_CLUSTER_THRESHOLD,
) -> list[Cluster]:
    """Greedy single-pass clustering around seed words.

    Each unvisited word seeds a cluster and absorbs every unvisited word whose
    similarity to the seed is at least ``threshold``. Membership is not
    transitive and depends on iteration order. Words without an embedding
    become singleton clusters.
    """
    words = list(embeddings)
    visited: set[str] = set()
    clusters: list[Cluster] = []

    logger.info("Clustering %d words with threshold %s", len(words), threshold)

    for word in words:
        if word in visited:
            continue

        cluster = [word]
        visited.add(word)

        if _has_vector(embeddings[word]):
            for candidate in find_most_similar(word, embeddings, len(words) - 1):
                if candidate.word not in visited and candidate.similarity >= threshold:
                    cluster.append(candidate.word)
                    visited.add(candidate.word)

        clusters.append(cluster)

    logger.info("Created %d clusters", len(clusters))
    return clusters


def interpret_similarity(score: float) -> SimilarityLevel:
    """Human-readable label for a similarity score."""
    for bound, level in INTERPRETATION_THRESHOLDS:
        if score > bound:
            return level
    return SimilarityLevel.VERY_DIFFERENT


def generate_cluster_analysis(clusters: Sequence[Cluster]) -> ClusterAnalysis:
    """Summary statistics for a clustering result.

    The largest cluster is the first one of maximal size.
    """
    total_words = sum(len(cluster) for cluster in clusters)

    largest: Cluster = []
    for cluster in clusters:
        if len(cluster) > len(largest):
            largest = cluster

    average = round(total_words / len(clusters), 2) if clusters else 0.0

    return ClusterAnalysis(
        total_words=total_words,
        total_clusters=len(clusters),
        largest_cluster_size=len(largest),
        largest_cluster=list(largest),
        singleton_clusters=sum(1 for cluster in clusters if len(cluster) == 1),
        average_cluster_size=average,
    )
