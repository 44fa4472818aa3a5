"""CLI command running the end-to-end RAG demonstration."""

import time
from typing import Annotated

import typer
from rich.panel import Panel

from config.settings import get_settings
from src.cli.runtime import build_rag_pipeline, configure_logging, console, render_search_response
from src.cli.sample_documents import SAMPLE_DOCUMENTS, SAMPLE_QUERIES

CONTEXT_PREVIEW_CHARS = 500


def demo(
    top_k: Annotated[
        int,
        typer.Option("--top-k", "-k", help="Chunks to retrieve per query"),
    ] = 3,
    pause: Annotated[
        float,
        typer.Option("--pause", help="Seconds to wait between queries"),
    ] = 1.0,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Build a sample knowledge base and run semantic search against it."""
    configure_logging(verbose)
    settings = get_settings()

    console.print("[bold]Step 1: Initializing RAG system[/bold]")
    pipeline = build_rag_pipeline(settings)

    console.print("[bold]Step 2: Building knowledge base[/bold]")
    with console.status("[bold green]Ingesting sample documents..."):
        report = pipeline.add_documents(
            {**doc, "metadata": {"category": "AI/ML", "source": "demo"}}
            for doc in SAMPLE_DOCUMENTS
        )
    console.print(
        f"  Ingested {len(report.succeeded)}/{len(report.results)} documents "
        f"({report.chunks_stored} chunks)"
    )
    for failed in report.failed:
        console.print(f"  [red]Failed[/red] {failed.title}: {failed.error}")

    console.print("[bold]Step 3: System statistics[/bold]")
    system_stats = pipeline.get_system_stats()
    for key, value in system_stats["documents"].items():
        console.print(f"  {key.replace('_', ' ')}: {value}")

    console.print("[bold]Step 4: Semantic search[/bold]")
    for n, query in enumerate(SAMPLE_QUERIES):
        if n and pause > 0:
            time.sleep(pause)
        response = pipeline.search(query, top_k=top_k)
        if response is None:
            console.print(f'[red]Search failed for[/red] "{query}"')
            continue
        render_search_response(response)
        preview = response.context[:CONTEXT_PREVIEW_CHARS]
        console.print(Panel(preview + "...", title="Top context for RAG", padding=(1, 2)))

    console.print("[bold green]RAG demo complete![/bold green]")
