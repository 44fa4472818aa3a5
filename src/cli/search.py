"""CLI commands for semantic search and index statistics."""

from typing import Annotated

import typer
from rich.panel import Panel

from config.settings import get_settings
from src.cli.runtime import build_rag_pipeline, configure_logging, console, render_search_response


def search(
    query: Annotated[
        str,
        typer.Argument(help="Natural language search query"),
    ],
    top_k: Annotated[
        int,
        typer.Option("--top-k", "-k", help="Number of chunks to retrieve"),
    ] = 5,
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Vector index namespace"),
    ] = None,
    show_context: Annotated[
        bool,
        typer.Option("--context", help="Print the assembled RAG context"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Find the chunks most similar to a query."""
    configure_logging(verbose)
    pipeline = build_rag_pipeline(get_settings())

    with console.status("[bold green]Searching..."):
        response = pipeline.search(query, top_k=top_k, namespace=namespace)

    if response is None:
        console.print("[bold red]Search failed.[/bold red] Run with --verbose for details.")
        raise typer.Exit(1)

    render_search_response(response)
    if show_context and response.context:
        console.print(Panel(response.context, title="Context", padding=(1, 2)))


def stats(
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Only report this namespace (default: all)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Show vector index statistics."""
    configure_logging(verbose)
    pipeline = build_rag_pipeline(get_settings())
    result = pipeline.get_system_stats(namespace)

    vectors = result["vectors"]
    console.print(f"[bold]System status:[/bold] {result['system_status']}")
    console.print(f"Namespace: {namespace or 'all'}")
    if vectors is not None:
        console.print(f"Total vectors: {vectors.vector_count}")
        console.print(f"Dimension: {vectors.dimension}")
        for name, count in vectors.namespaces.items():
            console.print(f"  {name}: {count} vectors")
