"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Vector embedding RAG settings loaded from environment variables."""

    # Required for the Gemini embedding provider
    google_api_key: str = ""

    # Embedding
    rag_embedding_provider: str = "gemini"
    rag_embedding_model: str = "text-embedding-004"
    rag_local_embedding_model: str = "all-MiniLM-L6-v2"
    rag_hash_dimension: int = 256
    rag_embedding_delay: float = 0.1

    # Vector index
    rag_chroma_path: str = "./data/chroma"
    rag_chroma_host: str = ""
    rag_chroma_port: int = 8000
    rag_index_name: str = "vector-embedding-rag"
    rag_namespace: str = "default"
    rag_upsert_batch_size: int = 100

    # Ingestion
    rag_chunk_size: int = 500
    rag_chunk_overlap: int = 50

    # Retrieval and clustering
    rag_top_k: int = 5
    rag_cluster_threshold: float = 0.7

    @property
    def chroma_path(self) -> Path:
        return Path(self.rag_chroma_path)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


def get_embedding_provider(settings: Settings | None = None):
    """Build the embedding provider selected by ``rag_embedding_provider``."""
    settings = settings or get_settings()
    provider = settings.rag_embedding_provider.lower().strip()

    if provider == "gemini":
        from src.embedding.gemini import GeminiEmbeddingProvider
        return GeminiEmbeddingProvider(
            api_key=settings.google_api_key,
            model=settings.rag_embedding_model,
            delay=settings.rag_embedding_delay,
        )
    if provider in ("sentence-transformer", "sentence_transformer", "local"):
        from src.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider
        return SentenceTransformerEmbeddingProvider(settings.rag_local_embedding_model)
    if provider == "hash":
        from src.embedding.hash_embedder import HashEmbeddingProvider
        return HashEmbeddingProvider(dimension=settings.rag_hash_dimension)

    raise ValueError(f"Unknown embedding provider: {settings.rag_embedding_provider}")


def get_vector_index(settings: Settings | None = None):
    """Build the ChromaDB-backed vector index from settings."""
    from src.vectorstore.chroma_store import ChromaVectorIndex

    settings = settings or get_settings()
    return ChromaVectorIndex(
        path=settings.rag_chroma_path,
        host=settings.rag_chroma_host or None,
        port=settings.rag_chroma_port,
        index_name=settings.rag_index_name,
        batch_size=settings.rag_upsert_batch_size,
    )
