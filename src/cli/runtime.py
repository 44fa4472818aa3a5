"""Shared wiring and rendering helpers for CLI commands."""

import logging

import typer
from rich.console import Console
from rich.table import Table

from config.settings import Settings, get_embedding_provider, get_settings, get_vector_index
from src.errors import RAGError
from src.ingestion.document_store import DocumentStore
from src.models.search import SearchResponse
from src.models.similarity import ClusterReport
from src.pipeline.rag import RAGPipeline

console = Console()

PREVIEW_CHARS = 150


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)


def build_embedding_provider(settings: Settings):
    try:
        return get_embedding_provider(settings)
    except (RAGError, ValueError) as e:
        console.print(f"[bold red]Embedding provider unavailable:[/bold red] {e}")
        raise typer.Exit(1)


def build_rag_pipeline(settings: Settings | None = None) -> RAGPipeline:
    """Create and initialize a RAG pipeline, exiting if it cannot start."""
    settings = settings or get_settings()
    pipeline = RAGPipeline(
        embedding_provider=build_embedding_provider(settings),
        vector_index=get_vector_index(settings),
        document_store=DocumentStore(
            chunk_size=settings.rag_chunk_size,
            chunk_overlap=settings.rag_chunk_overlap,
        ),
        namespace=settings.rag_namespace,
    )

    with console.status("[bold green]Initializing RAG system..."):
        ready = pipeline.initialize()

    if not ready:
        console.print(
            "[bold red]RAG system initialization failed.[/bold red] Please check:\n"
            "1. GOOGLE_API_KEY is set in .env (or RAG_EMBEDDING_PROVIDER=hash)\n"
            "2. The Chroma path or RAG_CHROMA_HOST is reachable"
        )
        raise typer.Exit(1)
    return pipeline


def render_search_response(response: SearchResponse) -> None:
    console.print(f'\n[bold]Search Results for:[/bold] "{response.query}"')
    console.print(f"Found {response.total_results} relevant chunks\n")

    table = Table(show_lines=True)
    table.add_column("Rank", justify="right")
    table.add_column("Document")
    table.add_column("Similarity")
    table.add_column("Chunk")
    table.add_column("Content")

    for item in response.results:
        preview = item.chunk.content[:PREVIEW_CHARS]
        if len(item.chunk.content) > PREVIEW_CHARS:
            preview += "..."
        table.add_row(
            str(item.rank),
            item.document_title,
            f"{item.similarity:.4f}\n({item.interpretation})",
            f"{item.chunk.chunk_index + 1}: {item.chunk.word_count} words",
            preview,
        )

    console.print(table)
    console.print(f"\nCombined context length: {len(response.context)} characters")


def render_cluster_report(report: ClusterReport) -> None:
    analysis = report.analysis
    console.print("[bold]Clustering Results[/bold]")
    console.print(f"  Total words: {analysis.total_words}")
    console.print(f"  Total clusters: {analysis.total_clusters}")
    console.print(f"  Average cluster size: {analysis.average_cluster_size}")
    console.print(f"  Largest cluster size: {analysis.largest_cluster_size}")
    console.print(f"  Singleton clusters: {analysis.singleton_clusters}")
    console.print()

    for n, cluster in enumerate(report.clusters, start=1):
        console.print(f"  Cluster {n} ({len(cluster)} words): [{', '.join(cluster)}]")
