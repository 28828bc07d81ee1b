from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich import box
from .config import SummarizerConfig
from .embedding import load_embedding_matrix
from .errors import ConfigError, MalformedEmbeddingMatrix, SummarizerError
from .loaders import load_text
from .summarize import summarize_batch

app = typer.Typer(help="Extractive summaries from a topic-model embedding space")
console = Console()
err_console = Console(stderr=True)

def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )

@app.command()
def summarize(
    documents: List[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Text files (.txt, .md, .rtf)"),
    embedding: Path = typer.Option(..., "--embedding", "-e", exists=True, dir_okay=False,
                                   help="phi_prime matrix (.csv, .tsv or .npz)"),
    config_path: Optional[Path] = typer.Option(None, "--config", exists=True, help="JSON config file"),
    top_k: Optional[int] = typer.Option(None, help="Sentences per summary"),
    neighbor_k: Optional[int] = typer.Option(None, help="Neighbours kept per sentence"),
    min_terms: Optional[int] = typer.Option(None, help="Drop sentences with this many terms or fewer"),
    metric: Optional[str] = typer.Option(None, help="hellinger | cosine"),
    separator: Optional[str] = typer.Option(None, help="Joins the selected sentences"),
    workers: int = typer.Option(1, help="Documents summarized in parallel"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Summarize one or more documents and print the summaries."""
    _setup_logging(verbose)
    try:
        cfg = SummarizerConfig.load(config_path) if config_path else SummarizerConfig()
        cfg = cfg.replace(top_k=top_k, neighbor_k=neighbor_k, min_terms=min_terms,
                          metric=metric, separator=separator)
        matrix = load_embedding_matrix(embedding)
        texts = [load_text(p) for p in documents]
        results = summarize_batch(texts, matrix, cfg, workers=workers)
    except (ConfigError, MalformedEmbeddingMatrix, UnicodeDecodeError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    failed = 0
    for path, result in zip(documents, results):
        if len(documents) > 1:
            console.print(f"[bold]{escape(str(path))}[/bold]", soft_wrap=True)
        if isinstance(result, SummarizerError):
            failed += 1
            err_console.print(f"[red]{escape(str(path))}:[/red] {escape(str(result))}")
            continue
        if not result.ok:
            err_console.print(f"[yellow]{escape(str(path))}:[/yellow] {result.status.value}")
        console.print(result.text, markup=False, highlight=False, soft_wrap=True)
    if failed:
        raise typer.Exit(code=1)

@app.command()
def inspect(
    embedding: Path = typer.Argument(..., exists=True, dir_okay=False),
    terms: int = typer.Option(10, help="Vocabulary terms to preview"),
):
    """Show the shape and vocabulary of an embedding matrix."""
    try:
        matrix = load_embedding_matrix(embedding)
    except MalformedEmbeddingMatrix as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    table = Table(title=str(embedding), box=box.SIMPLE)
    table.add_column("Property")
    table.add_column("Value")
    table.add_row("Dimensions", str(matrix.n_dimensions))
    table.add_row("Vocabulary size", str(len(matrix.vocabulary)))
    table.add_row("Non-negative", "yes" if matrix.is_nonnegative else "no")
    table.add_row("Terms", ", ".join(matrix.vocabulary[:terms]))
    console.print(table)

def main():
    app()

if __name__ == "__main__":
    main()
