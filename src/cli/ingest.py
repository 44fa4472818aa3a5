"""CLI command for ingesting text documents."""

from pathlib import Path
from typing import Annotated

import typer

from config.settings import get_settings
from src.cli.runtime import build_rag_pipeline, configure_logging, console

SUPPORTED_SUFFIXES = {".txt", ".md"}


def load_documents(files: list[Path]) -> list[dict]:
    """Read text files into ingestion records keyed by file stem."""
    documents = []
    for path in files:
        if path.suffix.lower() not in SUPPORTED_SUFFIXES:
            console.print(f"[yellow]Skipping unsupported file:[/yellow] {path}")
            continue
        documents.append({
            "id": path.stem,
            "title": path.stem.replace("_", " ").replace("-", " ").title(),
            "content": path.read_text(encoding="utf-8"),
            "metadata": {"source": str(path)},
        })
    return documents


def ingest(
    files: Annotated[
        list[Path],
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Text or markdown files"),
    ],
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Vector index namespace"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Chunk, embed and index text documents."""
    configure_logging(verbose)
    settings = get_settings()

    documents = load_documents(files)
    if not documents:
        console.print("[bold red]No supported documents to ingest.[/bold red]")
        raise typer.Exit(1)

    pipeline = build_rag_pipeline(settings)

    with console.status(f"[bold green]Ingesting {len(documents)} documents..."):
        report = pipeline.add_documents(documents, namespace=namespace)

    console.print()
    console.print("[bold green]Ingestion complete![/bold green]")
    console.print(f"  Documents ingested: {len(report.succeeded)}")
    console.print(f"  Chunks stored: {report.chunks_stored}")
    for failed in report.failed:
        console.print(f"  [red]Failed[/red] {failed.title} ({failed.stage}): {failed.error}")

    if report.failed:
        raise typer.Exit(1)
