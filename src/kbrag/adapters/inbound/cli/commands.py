"""CLI interface for the knowledge-base RAG engine."""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from ....common.exception_handler import format_exception_json
from ....common.utils import preview
from ....composition.container import build_embedder, build_engine
from ....config.logging import setup_logging
from ....config.settings import Settings
from ....core.domain import RagResult
from ....core.domain.exceptions import ConfigurationError, RagEngineError
from ....core.services.document_store import DocumentStore
from ....core.services.similarity_index import SimilarityIndex, validate_top_k

app = typer.Typer(
    name="kbrag",
    help="Answer questions from a small knowledge base using retrieval-augmented generation",
    add_completion=False,
)

console = Console()

# Debug mode shows full JSON error details
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"

EXIT_COMMANDS = {"quit", "exit", "q"}


def handle_cli_error(exc: Exception) -> None:
    """Display an error in the CLI.

    In debug mode, shows full JSON error details. Otherwise shows a short
    message with the error code.
    """
    error_data = format_exception_json(exc, include_trace=DEBUG_MODE)

    if DEBUG_MODE:
        console.print(
            Panel(
                json.dumps(error_data, indent=2),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_code = error_data["error"].get("code", "UNKNOWN")
    console.print(f"\n[red]Error [{error_code}]:[/] {error_data['error']['message']}")
    console.print(f"[dim]Type: {error_data['error']['type']}[/]")
    console.print("[dim]Set DEBUG=true for full details[/]")


def _load_settings(kb_dir: Path | None, top_k: int | None) -> Settings:
    """Settings from the environment with CLI overrides applied.

    Raises:
        InvalidTopKError: If ``--top-k`` is not a positive integer.
        ConfigurationError: If the environment holds invalid settings.
    """
    overrides: dict[str, object] = {}
    if kb_dir is not None:
        overrides["kb_directory"] = kb_dir
    if top_k is not None:
        overrides["top_k"] = validate_top_k(top_k)
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(
            f"Invalid configuration: {fields}",
            cause=e,
            context={"fields": fields},
        ) from e
    setup_logging(settings.log_level, json_format=settings.log_json)
    return settings


def _print_result(result: RagResult) -> None:
    console.print(Panel(Markdown(result.reply), title="Answer", border_style="green"))
    sources = ", ".join(f"{s.document.id} ({s.score:.2f})" for s in result.sources) or "none"
    console.print(f"[dim]Confidence: {result.confidence:.2f} | Sources: {sources}[/]")


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question to answer"),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Documents to retrieve"),
    kb_dir: Optional[Path] = typer.Option(None, "--kb-dir", help="Knowledge-base directory"),
) -> None:
    """Answer a single question."""
    try:
        engine = build_engine(_load_settings(kb_dir, top_k))
        result = engine.answer(question)
    except RagEngineError as e:
        handle_cli_error(e)
        raise typer.Exit(1) from e
    _print_result(result)


@app.command()
def chat(
    kb_dir: Optional[Path] = typer.Option(None, "--kb-dir", help="Knowledge-base directory"),
) -> None:
    """Start an interactive chat session."""
    try:
        engine = build_engine(_load_settings(kb_dir, None))
    except RagEngineError as e:
        handle_cli_error(e)
        raise typer.Exit(1) from e

    console.print(
        Panel.fit(
            f"[bold]kbrag[/] - {len(engine.index)} documents indexed\n"
            "[dim]Type 'quit' or 'exit' to leave[/]",
            border_style="blue",
        )
    )

    while True:
        question = Prompt.ask("[bold blue]You[/]")
        if question.strip().lower() in EXIT_COMMANDS:
            console.print("[dim]Goodbye![/]")
            break
        if not question.strip():
            continue
        try:
            result = engine.answer(question)
        except RagEngineError as e:
            handle_cli_error(e)
            continue
        _print_result(result)


@app.command()
def index(
    kb_dir: Optional[Path] = typer.Option(None, "--kb-dir", help="Knowledge-base directory"),
) -> None:
    """Load and embed the knowledge base, then list what was indexed."""
    try:
        settings = _load_settings(kb_dir, None)
        store = DocumentStore.from_directory(settings.kb_directory)
        if not len(store):
            console.print(f"[yellow]No documents found in {settings.kb_directory}[/]")
            return
        similarity_index = SimilarityIndex.build(store, build_embedder(settings))
    except RagEngineError as e:
        handle_cli_error(e)
        raise typer.Exit(1) from e

    table = Table(title=f"Indexed documents ({settings.kb_directory})")
    table.add_column("Id", style="cyan")
    table.add_column("Characters", justify="right")
    table.add_column("Preview")
    for document in similarity_index.documents:
        table.add_row(document.id, str(len(document.text)), preview(document.text, 30))
    console.print(table)
    console.print(f"[green]Embedding dimension: {similarity_index.dimension}[/]")


if __name__ == "__main__":
    app()
