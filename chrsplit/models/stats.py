"""Result model returned by a completed split run."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class SplitStats(BaseModel):
    """Counters for one finished run.

    ``lines_read`` counts every input line, blank ones included, so it lines
    up with the line numbers reported in errors.  ``records_written`` only
    counts non-blank lines, and always equals the sum of
    ``category_counts``.
    """

    model_config = ConfigDict(frozen=True)

    input_path: Path
    lines_read: int = 0
    records_written: int = 0
    blank_lines: int = 0
    category_counts: dict[str, int] = {}
    output_paths: dict[str, Path] = {}
    unknown_category: str = "unknown"
    elapsed_seconds: float = 0.0

    @property
    def lines_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.lines_read / self.elapsed_seconds

    @property
    def unknown_count(self) -> int:
        """Records that fell through to the sentinel output."""
        return self.category_counts.get(self.unknown_category, 0)
