"""Vector embedding RAG CLI entry point."""

import typer

from src.cli.demo import demo
from src.cli.ingest import ingest
from src.cli.search import search, stats
from src.cli.words import cluster, compare, similar

app = typer.Typer(
    name="vectorrag",
    help="Vector Embedding RAG - chunk documents, index their embeddings and search them semantically.",
)

app.command(name="demo")(demo)
app.command(name="ingest")(ingest)
app.command(name="search")(search)
app.command(name="stats")(stats)
app.command(name="compare")(compare)
app.command(name="cluster")(cluster)
app.command(name="similar")(similar)


if __name__ == "__main__":
    app()
