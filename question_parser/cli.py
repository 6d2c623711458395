"""
CLI Interface
=============
Command-line interface for the question parser engine.

Usage:
    python -m question_parser parse <text_path> [--mode MODE] [options]
    python -m question_parser detect <text_path>
    python -m question_parser batch <directory> [options]
    python -m question_parser validate <json_path>
    python -m question_parser modes
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from . import __version__
from .engine import ParserConfig, ParserEngine
from .models import ParseMode

console = Console()

MODE_CHOICES = [mode.value for mode in ParseMode]


@click.group()
@click.version_option(version=__version__, prog_name="question-parser")
def cli():
    """Question Parser Engine — OCR worksheet question extractor."""
    pass


def _run(
    text_path: str,
    mode: str,
    output: str,
    log_level: str,
    log_file: str,
    no_save: bool,
    json_output: bool,
):
    if json_output:
        # Suppress console logging for JSON mode
        log_level = "ERROR"

    config = ParserConfig(
        mode=mode,
        output_dir=output,
        save_output=not no_save,
        log_level=log_level,
        log_file=log_file,
    )

    source = "stdin" if text_path == "-" else os.path.basename(text_path)

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Question Parser v{__version__}[/]\n"
                f"[dim]Parsing: {source} ({mode})[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        engine = ParserEngine(config)
        if text_path == "-":
            text = click.get_text_stream("stdin").read()
            result = engine.parse_text(text, source_name=source)
        else:
            result = engine.parse_file(text_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error:[/] {e}")
        if log_level == "DEBUG":
            console.print_exception()
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(
            result.model_dump(mode="json"),
            indent=2,
            ensure_ascii=False,
        ))
    else:
        _display_results(result)


@cli.command()
@click.argument("text_path", type=click.Path(exists=True, allow_dash=True))
@click.option(
    "--mode", "-m",
    default=ParseMode.AUTO_DETECT.value,
    type=click.Choice(MODE_CHOICES),
    help="Content type to extract",
)
@click.option(
    "--output", "-o",
    default="output",
    help="Output directory for parsed data",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--no-save",
    is_flag=True,
    default=False,
    help="Do not write the JSON result to the output directory",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def parse(
    text_path: str,
    mode: str,
    output: str,
    log_level: str,
    log_file: str,
    no_save: bool,
    json_output: bool,
):
    """Parse an OCR text file ('-' for stdin) into questions."""
    _run(text_path, mode, output, log_level, log_file, no_save, json_output)


@cli.command()
@click.argument("text_path", type=click.Path(exists=True, allow_dash=True))
@click.option("--output", "-o", default="output", help="Output directory")
@click.option("--no-save", is_flag=True, default=False, help="Skip JSON file")
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout",
)
def detect(text_path: str, output: str, no_save: bool, json_output: bool):
    """Auto-detect every content type present in an OCR text."""
    _run(
        text_path,
        ParseMode.AUTO_DETECT.value,
        output,
        "INFO",
        None,
        no_save,
        json_output,
    )


@cli.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--mode", "-m",
    default=ParseMode.AUTO_DETECT.value,
    type=click.Choice(MODE_CHOICES),
    help="Content type to extract",
)
@click.option("--output", "-o", default="output", help="Output directory")
@click.option("--log-level", default="WARNING", help="Logging level")
def batch(directory: str, mode: str, output: str, log_level: str):
    """Batch parse all .txt files in a directory."""

    text_files = sorted(Path(directory).glob("*.txt"))

    if not text_files:
        console.print(f"[yellow]No text files found in: {directory}[/]")
        return

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Batch Question Parser[/]\n"
            f"[dim]Found {len(text_files)} files in: {directory}[/]",
            border_style="cyan",
        )
    )
    console.print()

    results = []
    errors = []

    engine = ParserEngine(ParserConfig(
        mode=mode,
        output_dir=output,
        log_level=log_level,
    ))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(
            "Processing files...", total=len(text_files)
        )

        for text_file in text_files:
            progress.update(task, description=f"Parsing: {text_file.name}")

            try:
                results.append((text_file.name, engine.parse_file(str(text_file))))
            except (OSError, UnicodeDecodeError) as e:
                errors.append((text_file.name, str(e)))

            progress.advance(task)

    _display_batch_summary(results, errors)


@cli.command()
@click.argument("json_path", type=click.Path(exists=True))
def validate(json_path: str):
    """Display the validation block of a saved parse result JSON."""

    with open(json_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Validation Report[/]\n"
            f"[dim]File: {json_path}[/]",
            border_style="cyan",
        )
    )

    _display_validation_table(data.get("validation", {}))


@cli.command()
def modes():
    """List the available parse modes."""
    table = Table(title="Parse Modes", border_style="cyan")
    table.add_column("Mode", style="bold")
    table.add_column("Label")
    table.add_column("Description")

    for mode in ParseMode:
        table.add_row(mode.value, mode.label, mode.description)

    console.print(table)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Server host")
@click.option("--port", default=5000, type=int, help="Server port")
@click.option("--debug", is_flag=True, default=False, help="Debug mode")
def serve(host: str, port: int, debug: bool):
    """Start the HTTP microservice server."""
    from .server import run_server

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Question Parser Microservice[/]\n"
            f"[dim]Starting on {host}:{port}[/]",
            border_style="cyan",
        )
    )
    console.print()

    run_server(host=host, port=port, debug=debug)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _display_results(result):
    """Display parse results as rich tables."""
    console.print()

    detected = ", ".join(m.value for m in result.detected_types) or "(none)"
    console.print(f"[bold]Detected types:[/] {detected}")
    console.print()

    table = Table(title="Questions", border_style="cyan")
    table.add_column("ID", style="bold")
    table.add_column("Text")
    for question in result.questions:
        table.add_row(question.id, question.text)
    console.print(table)
    console.print()

    _display_validation_table(result.validation.model_dump())

    pv = result.parse_version
    console.print(
        f"[dim]Parser v{pv.parser_version} | "
        f"Mode: {pv.mode.value} | "
        f"Questions: {pv.question_count} | "
        f"Timestamp: {pv.parse_timestamp}[/]"
    )
    console.print()


def _display_validation_table(validation: dict):
    """Display validation report as a rich table."""
    table = Table(title="Validation Report", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    total = validation.get("total_questions", 0)
    rate = validation.get("valid_rate", 0)

    def status_icon(count, threshold=0):
        if count <= threshold:
            return "[green]✓[/]"
        return "[red]✗[/]"

    table.add_row(
        "Total Questions",
        str(total),
        "[green]✓[/]" if total > 0 else "[red]✗[/]",
    )
    table.add_row(
        "Unique Questions",
        str(validation.get("unique_questions", 0)),
        "",
    )
    table.add_row(
        "Valid Rate",
        f"{rate}%",
        "[green]✓[/]" if rate >= 90 else "[yellow]⚠[/]",
    )

    dupes = validation.get("duplicate_texts", [])
    table.add_row("Duplicate Texts", str(len(dupes)), status_icon(len(dupes)))

    short = validation.get("short_question_ids", [])
    table.add_row("Too Short", str(len(short)), status_icon(len(short)))

    console.print(table)
    console.print()

    breakdown = validation.get("prefix_breakdown", {})
    if breakdown:
        prefix_table = Table(title="Prefix Breakdown", border_style="yellow")
        prefix_table.add_column("Prefix", style="bold")
        prefix_table.add_column("Count", justify="right")

        for prefix, count in sorted(breakdown.items()):
            prefix_table.add_row(prefix, str(count))

        console.print(prefix_table)
        console.print()


def _display_batch_summary(results, errors):
    """Display batch processing summary."""
    console.print()

    table = Table(title="Batch Processing Summary", border_style="cyan")
    table.add_column("File", style="bold")
    table.add_column("Questions", justify="right")
    table.add_column("Detected Types")
    table.add_column("Valid Rate", justify="right")
    table.add_column("Status", justify="center")

    total_questions = 0

    for name, result in results:
        q_count = len(result.questions)
        total_questions += q_count
        rate = result.validation.valid_rate

        table.add_row(
            name,
            str(q_count),
            ", ".join(m.value for m in result.detected_types) or "-",
            f"{rate}%",
            "[green]✓[/]" if q_count else "[yellow]⚠[/]",
        )

    for name, error in errors:
        table.add_row(name, "-", "-", "-", "[red]✗ FAILED[/]")

    console.print(table)
    console.print()
    console.print(
        f"[bold]Total:[/] {total_questions} questions from "
        f"{len(results)} files, {len(errors)} failures"
    )
    console.print()


# ─── Entry point (for python -m question_parser.cli) ──────────────────────────


if __name__ == "__main__":
    cli()
