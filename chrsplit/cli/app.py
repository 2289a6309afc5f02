"""Main Typer application — registers the split command.

Entry point: ``chrsplit`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from chrsplit.cli.commands.split import split_cmd

app = typer.Typer(
    name="chrsplit",
    help="A tool to split a JSONL/NDJSON file by chromosome.",
    rich_markup_mode="rich",
    add_completion=False,
)

# Single command: invoked directly as ``chrsplit -i input.jsonl``
app.command(
    name="split",
    help="Split a JSONL/NDJSON file into one file per category.",
    epilog=(
        "Examples:\n\n"
        "  chrsplit --input input.jsonl --prefix output\n\n"
        "  chrsplit -i data.jsonl --prefix result --chr-field-name chromosome\n\n"
        '  chrsplit -i data.jsonl -c "chr1,chr2,chrX" --prefix my_output'
    ),
)(split_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
