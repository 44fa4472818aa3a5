"""Word similarity and clustering orchestrator."""

import logging

from src.embedding.provider import EmbeddingProvider
from src.errors import RAGError
from src.models.similarity import ClusterReport, SimilarWordsResult, WordComparison
from src.retrieval.similarity import (
    DEFAULT_CLUSTER_THRESHOLD,
    build_similarity_matrix,
    cluster_by_threshold,
    cosine_similarity,
    find_most_similar,
    generate_cluster_analysis,
    interpret_similarity,
)

logger = logging.getLogger(__name__)


class WordClusteringPipeline:
    """Compare, rank and cluster individual words by embedding similarity.

    Every operation returns None on failure instead of raising.
    """

    def __init__(self, embedding_provider: EmbeddingProvider):
        self.embedding_provider = embedding_provider

    def compare_words(self, word1: str, word2: str) -> WordComparison | None:
        logger.info("Analyzing similarity between %r and %r", word1, word2)
        try:
            embedding1 = self.embedding_provider.embed(word1)
            embedding2 = self.embedding_provider.embed(word2)
            similarity = cosine_similarity(embedding1, embedding2)
        except RAGError as e:
            logger.error("Error comparing words: %s", e)
            return None

        return WordComparison(
            word1=word1,
            word2=word2,
            similarity=round(similarity, 4),
            interpretation=interpret_similarity(similarity),
        )

    def analyze_word_clusters(
        self,
        words: list[str],
        threshold: float = DEFAULT_CLUSTER_THRESHOLD,
    ) -> ClusterReport | None:
        """Embed words, cluster them and build the full similarity matrix."""
        logger.info("Starting word clustering for %d words (threshold %s)", len(words), threshold)

        if not self.embedding_provider.health_check():
            logger.error("Embedding service is not available")
            return None

        try:
            embeddings = self.embedding_provider.embed_batch(words)
            clusters = cluster_by_threshold(embeddings, threshold)
            matrix = build_similarity_matrix(embeddings)
        except RAGError as e:
            logger.error("Error in word clustering analysis: %s", e)
            return None

        return ClusterReport(
            words=list(words),
            clusters=clusters,
            similarity_matrix=matrix,
            threshold=threshold,
            analysis=generate_cluster_analysis(clusters),
        )

    def find_similar_words(
        self,
        target_word: str,
        candidate_words: list[str],
        top_k: int = 5,
    ) -> SimilarWordsResult | None:
        logger.info("Finding words similar to %r", target_word)
        try:
            embeddings = self.embedding_provider.embed_batch([target_word, *candidate_words])
            similar = find_most_similar(target_word, embeddings, top_k)
        except RAGError as e:
            logger.error("Error finding similar words: %s", e)
            return None

        return SimilarWordsResult(target_word=target_word, similar_words=similar, top_k=top_k)
