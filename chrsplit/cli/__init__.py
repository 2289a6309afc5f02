"""chrsplit CLI — Typer-based command-line interface.

Provides the ``chrsplit`` command, which splits one JSONL/NDJSON file into
``<prefix>_<category>.jsonl`` files by the value of a single field.

All output uses Rich for formatted terminal display.
"""
