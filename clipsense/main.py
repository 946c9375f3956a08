#!/usr/bin/env python3
"""clipsense CLI - classify text and run content-aware transformations.

Commands:
- detect: Show what the text was classified as and which actions apply
- apply: Run one action and print the transformed text
- detectors: List the detector registry in evaluation order
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import sys

from rich.console import Console
from rich.table import Table
import typer

from clipsense.core import CLIPSENSE_VERSION, find_project_root, load_config
from clipsense.detectors import DETECTORS, UnknownActionError, run_action
from clipsense.settings import get_suggestion_settings
from clipsense.suggestions import suggest

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="clipsense",
    help="Content-aware clipboard text classification and transforms.",
    add_completion=False,
    no_args_is_help=True,
)


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        err_console.print(f"[red]Cannot read {source}:[/red] {exc}")
        raise typer.Exit(1)


@app.command()
def detect(
    source: str = typer.Argument("-", help="File to classify, or '-' for stdin"),
    output_json: bool = typer.Option(False, "--json", help="JSON output"),
):
    """Classify text and list the actions offered for it."""
    text = _read_source(source)
    settings = get_suggestion_settings()
    result = suggest(text, settings)

    if output_json:
        if result is None:
            print(json.dumps(None))
            return
        payload = {
            "detector_id": result.detector_id,
            "toast_message": result.toast_message,
            "suggested_language": result.suggested_language,
            "actions": [{"id": a.id, "label": a.label} for a in result.actions],
        }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if result is None:
        if not settings.show_intelligent_suggestions:
            console.print("[yellow]Suggestions are disabled.[/yellow]")
        else:
            console.print("[dim]Nothing to classify (input too short).[/dim]")
        return

    console.print(f"[bold cyan]{result.toast_message}[/bold cyan]")
    console.print(f"[dim]Detector: {result.detector_id}[/dim]")
    if result.suggested_language:
        console.print(f"[dim]Language: {result.suggested_language}[/dim]")

    table = Table(title="Actions")
    table.add_column("Action", style="green")
    table.add_column("Label")
    for action in result.actions:
        table.add_row(action.id, action.label)
    console.print(table)


@app.command()
def apply(
    action_id: str = typer.Argument(..., help="Action id, e.g. format-json"),
    source: str = typer.Argument("-", help="File to transform, or '-' for stdin"),
):
    """Run one action on the text and print the result."""
    text = _read_source(source)
    try:
        outcome = run_action(text, action_id)
    except UnknownActionError as exc:
        err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)

    typer.echo(outcome.text)

    if outcome.validation_message:
        style = "green" if outcome.validation_type == "success" else "red"
        location = ""
        if outcome.error_line is not None:
            location = f" (line {outcome.error_line}, column {outcome.error_column})"
        err_console.print(f"[{style}]{outcome.validation_message}{location}[/{style}]")
    if outcome.validation_type == "error":
        raise typer.Exit(1)


@app.command()
def detectors():
    """List registered detectors in evaluation order."""
    table = Table(title="Detectors")
    table.add_column("Priority", style="cyan", width=8)
    table.add_column("Id", style="green")
    table.add_column("Toast")
    table.add_column("Actions", style="dim")
    for detector in DETECTORS:
        actions = ", ".join(a.id for a in detector.actions) or "(dynamic)"
        table.add_row(str(detector.priority), detector.id, detector.toast_message, actions)
    console.print(table)


# ============================================================================
# VERSION & CALLBACK
# ============================================================================
def version_callback(value: bool):
    if value:
        root = find_project_root()
        config = load_config(root)
        typer.echo(f"clipsense v{CLIPSENSE_VERSION}")
        typer.echo(f"Root: {root}")
        typer.echo(f"Config: {'Found' if config else 'Missing'}")
        raise typer.Exit()


@app.callback()
def common(
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="-v for INFO logs, -vv for DEBUG."
    ),
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    clipsense - classify clipboard text and transform it.

    Reads a file argument or stdin.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG if verbose > 1 else logging.INFO,
            format="%(levelname)s %(name)s: %(message)s",
        )


if __name__ == "__main__":
    app()
