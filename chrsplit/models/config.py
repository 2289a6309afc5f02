"""Run configuration models — one frozen config per split run."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_PREFIX = "output"
DEFAULT_FIELD_PATH = "chr"
UNKNOWN_CATEGORY = "unknown"
DEFAULT_BUFFER_SIZE = 64 * 1024  # 64KB per output stream
DEFAULT_MAX_LINE_BYTES = 10 * 1024 * 1024  # single records can be very large
DEFAULT_PROGRESS_INTERVAL = 500_000


def default_chromosomes() -> list[str]:
    """Return the default category list: chr1..chr22, chrX, chrY, chrM."""
    chroms = [f"chr{i}" for i in range(1, 23)]
    chroms.extend(["chrX", "chrY", "chrM"])
    return chroms


def parse_category_names(raw: str | None) -> list[str]:
    """Parse a comma-separated category string.

    Whitespace around each name is stripped and empty entries are dropped.
    An empty or missing string yields :func:`default_chromosomes`.

    Examples
    --------
    >>> parse_category_names("chr1, chr2,,chrX")
    ['chr1', 'chr2', 'chrX']
    """
    if not raw:
        return default_chromosomes()
    return [part.strip() for part in raw.split(",") if part.strip()]


def normalize_category_names(names: Iterable[str]) -> list[str]:
    """Strip each name, drop empties and keep only the first of any duplicate."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        name = name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


class SplitConfig(BaseModel):
    """Everything the streaming router needs for one run.

    Constants that would otherwise be module-level state (sentinel name,
    buffer size, maximum line size) are carried here so a run can be
    configured with small values in tests.
    """

    model_config = ConfigDict(frozen=True)

    input_path: Path | None = None
    prefix: str = DEFAULT_PREFIX
    field_path: str = DEFAULT_FIELD_PATH
    categories: list[str] = Field(default_factory=default_chromosomes)
    unknown_category: str = UNKNOWN_CATEGORY
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    max_line_bytes: int = Field(default=DEFAULT_MAX_LINE_BYTES, gt=0)
    progress_interval: int = Field(default=DEFAULT_PROGRESS_INTERVAL, ge=0)

    @field_validator("categories")
    @classmethod
    def _normalize_categories(cls, value: list[str]) -> list[str]:
        return normalize_category_names(value)

    @field_validator("field_path", "unknown_category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _sentinel_is_reserved(self) -> SplitConfig:
        if self.unknown_category in self.categories:
            raise ValueError(
                f"category {self.unknown_category!r} is reserved for unmatched records"
            )
        return self

    @property
    def all_categories(self) -> list[str]:
        """Declared categories followed by the sentinel."""
        return [*self.categories, self.unknown_category]

    def output_path(self, category: str) -> Path:
        """Return ``<prefix>_<category>.jsonl``."""
        return Path(f"{self.prefix}_{category}.jsonl")
