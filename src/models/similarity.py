"""Word similarity and clustering result models."""

from dataclasses import dataclass, field

from src.models.enums import SimilarityLevel

SimilarityMatrix = dict[str, dict[str, float]]
Cluster = list[str]


@dataclass(frozen=True)
class SimilarWord:
    word: str
    similarity: float


@dataclass(frozen=True)
class WordComparison:
    """Similarity between two individual words."""

    word1: str
    word2: str
    similarity: float
    interpretation: SimilarityLevel


@dataclass(frozen=True)
class ClusterAnalysis:
    """Summary statistics for a set of word clusters."""

    total_words: int
    total_clusters: int
    largest_cluster_size: int
    largest_cluster: Cluster
    singleton_clusters: int
    average_cluster_size: float


@dataclass
class ClusterReport:
    """Full output of a word clustering run."""

    words: list[str]
    clusters: list[Cluster]
    similarity_matrix: SimilarityMatrix
    threshold: float
    analysis: ClusterAnalysis

    @property
    def cluster_count(self) -> int:
        return len(self.clusters)


@dataclass
class SimilarWordsResult:
    target_word: str
    similar_words: list[SimilarWord] = field(default_factory=list)
    top_k: int = 5
