"""Command implementations registered on the chrsplit Typer app."""
