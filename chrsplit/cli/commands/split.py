"""``chrsplit -i INPUT`` — split a JSONL file by the value of one field.

Prints the effective configuration, runs the streaming router and shows a
per-category summary.  Exit codes: 0 on success, 1 on any split error,
130 when interrupted.
"""

from __future__ import annotations

import contextlib
import logging
import signal
import threading
from collections.abc import Iterator
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from chrsplit.config import SplitterSettings
from chrsplit.core.router import SplitCancelledError, SplitError, StreamingRouter
from chrsplit.models.config import SplitConfig
from chrsplit.models.stats import SplitStats

console = Console()

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def configure_logging(level: str) -> None:
    """Send log records through Rich on stderr."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@contextlib.contextmanager
def cancel_on_sigint(event: threading.Event) -> Iterator[None]:
    """Turn Ctrl+C into a cooperative cancel for the duration of the block.

    Only the main thread may install signal handlers; elsewhere the block
    runs without one and Ctrl+C keeps its default behavior.
    """
    try:
        previous = signal.signal(signal.SIGINT, lambda signum, frame: event.set())
    except ValueError:
        yield
        return
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _render_config(config: SplitConfig) -> None:
    console.print(
        Panel(
            "\n".join([
                f"[bold]Input file:[/bold]         {escape(str(config.input_path))}",
                f"[bold]Output prefix:[/bold]      {escape(config.prefix)}",
                f"[bold]Split field:[/bold]        {escape(config.field_path)}",
                f"[bold]Target categories:[/bold]  {escape(', '.join(config.categories))}",
            ]),
            title="[bold]Configuration[/bold]",
            border_style="cyan",
            padding=(1, 2),
        )
    )


def _render_summary(stats: SplitStats) -> None:
    table = Table(title="Records per output")
    table.add_column("Category", style="cyan")
    table.add_column("Records", justify="right", style="green")
    table.add_column("Output file")

    for category, count in stats.category_counts.items():
        style = "yellow" if category == stats.unknown_category and count else None
        table.add_row(
            escape(category),
            str(count),
            escape(str(stats.output_paths[category])),
            style=style,
        )

    console.print(table)
    console.print(
        f"\n{stats.lines_read} lines finished in {stats.elapsed_seconds:.2f} sec "
        f"({stats.lines_per_second:.2f} lines/sec)"
    )


def split_cmd(
    input_file: Path = typer.Option(
        ...,
        "--input",
        "-i",
        help="Input JSONL file path.",
    ),
    prefix: str = typer.Option(
        None,
        "--prefix",
        help="Output file prefix (default: output).",
    ),
    field_name: str = typer.Option(
        None,
        "--chr-field-name",
        "--field",
        help="Field (or dotted path) to split on (default: chr).",
    ),
    chr_names: str = typer.Option(
        "",
        "--chr-names",
        "-c",
        help="Comma-separated category names (default: chr1..chr22, chrX, chrY, chrM).",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: CHRSPLIT_LOG_LEVEL or INFO).",
    ),
) -> None:
    """Split a JSONL/NDJSON file by chromosome (or any other field).

    Writes one ``<prefix>_<category>.jsonl`` per category plus
    ``<prefix>_unknown.jsonl`` for records whose field is missing, not
    parsable, or not one of the categories.
    """
    settings = SplitterSettings()
    configure_logging(log_level or settings.log_level)

    if not input_file.exists():
        console.print(
            f"[bold red]Error:[/bold red] Input file does not exist: {escape(str(input_file))}"
        )
        raise typer.Exit(code=EXIT_FAILURE)

    try:
        config = settings.build_config(
            input_file,
            prefix=prefix,
            field_path=field_name,
            category_names=chr_names,
        )
    except ValidationError as exc:
        console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_FAILURE) from exc

    console.print()
    _render_config(config)
    console.print()

    cancel_event = threading.Event()
    router = StreamingRouter(config, cancel_event=cancel_event)
    try:
        with cancel_on_sigint(cancel_event):
            stats = router.process_file()
    except SplitCancelledError as exc:
        console.print(f"[bold yellow]Interrupted:[/bold yellow] {escape(str(exc))}")
        console.print("[dim]Outputs written so far were flushed and closed.[/dim]")
        raise typer.Exit(code=EXIT_INTERRUPTED) from exc
    except SplitError as exc:
        console.print(f"[bold red]Error processing file:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_FAILURE) from exc

    _render_summary(stats)
