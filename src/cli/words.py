"""CLI commands for word similarity and clustering."""

from typing import Annotated

import typer

from config.settings import get_settings
from src.cli.runtime import build_embedding_provider, configure_logging, console, render_cluster_report
from src.cli.sample_documents import SAMPLE_WORDS
from src.pipeline.word_clustering import WordClusteringPipeline
from src.retrieval.similarity import interpret_similarity

VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging"),
]


def _pipeline() -> WordClusteringPipeline:
    return WordClusteringPipeline(build_embedding_provider(get_settings()))


def compare(
    word1: Annotated[str, typer.Argument(help="First word")],
    word2: Annotated[str, typer.Argument(help="Second word")],
    verbose: VerboseOption = False,
):
    """Compare the similarity of two words."""
    configure_logging(verbose)
    result = _pipeline().compare_words(word1, word2)
    if result is None:
        console.print("[bold red]Failed to get embeddings for one or both words.[/bold red]")
        raise typer.Exit(1)

    console.print(f'Similarity between "{word1}" and "{word2}": [bold]{result.similarity}[/bold]')
    console.print(f"Interpretation: {result.interpretation}")


def cluster(
    words: Annotated[
        list[str] | None,
        typer.Argument(help="Words to cluster (defaults to a sample vocabulary)"),
    ] = None,
    threshold: Annotated[
        float,
        typer.Option("--threshold", "-t", help="Minimum similarity to join a cluster"),
    ] = 0.7,
    verbose: VerboseOption = False,
):
    """Group words into clusters of similar meaning."""
    configure_logging(verbose)
    words = words or SAMPLE_WORDS
    with console.status(f"[bold green]Clustering {len(words)} words..."):
        report = _pipeline().analyze_word_clusters(words, threshold)
    if report is None:
        console.print("[bold red]Word clustering failed.[/bold red] Run with --verbose for details.")
        raise typer.Exit(1)
    render_cluster_report(report)


def similar(
    target: Annotated[str, typer.Argument(help="Word to find neighbours for")],
    candidates: Annotated[list[str], typer.Argument(help="Candidate words")],
    top_k: Annotated[
        int,
        typer.Option("--top-k", "-k", help="Number of similar words to show"),
    ] = 5,
    verbose: VerboseOption = False,
):
    """Rank candidate words by similarity to a target word."""
    configure_logging(verbose)
    result = _pipeline().find_similar_words(target, candidates, top_k)
    if result is None:
        console.print("[bold red]Similarity search failed.[/bold red] Run with --verbose for details.")
        raise typer.Exit(1)

    console.print(f'Top {top_k} words similar to "{target}":')
    for n, item in enumerate(result.similar_words, start=1):
        console.print(
            f"  {n}. {item.word} ({item.similarity:.4f}) - {interpret_similarity(item.similarity)}"
        )
