"""Environment-driven defaults for chrsplit runs.

Centralized settings using pydantic-settings. Reads from a .env file and
CHRSPLIT_* environment variables; the CLI uses them to fill in whatever
the command line leaves unset.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chrsplit.models.config import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_FIELD_PATH,
    DEFAULT_MAX_LINE_BYTES,
    DEFAULT_PREFIX,
    DEFAULT_PROGRESS_INTERVAL,
    UNKNOWN_CATEGORY,
    SplitConfig,
    parse_category_names,
)


class SplitterSettings(BaseSettings):
    """Tunables with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CHRSPLIT_LOG_LEVEL=DEBUG
        export CHRSPLIT_BUFFER_SIZE=1048576
        export CHRSPLIT_MAX_LINE_BYTES=67108864

    Or via .env file::

        CHRSPLIT_UNKNOWN_CATEGORY=unplaced
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CHRSPLIT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Run defaults
    default_prefix: str = DEFAULT_PREFIX
    default_field: str = DEFAULT_FIELD_PATH
    unknown_category: str = UNKNOWN_CATEGORY

    # I/O sizing
    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    max_line_bytes: int = Field(default=DEFAULT_MAX_LINE_BYTES, gt=0)

    # Progress logging, 0 disables
    progress_interval: int = Field(default=DEFAULT_PROGRESS_INTERVAL, ge=0)

    def build_config(
        self,
        input_path: Path | str | None,
        *,
        prefix: str | None = None,
        field_path: str | None = None,
        category_names: str | None = None,
    ) -> SplitConfig:
        """Combine command-line values with these settings into a SplitConfig."""
        return SplitConfig(
            input_path=input_path,
            prefix=prefix if prefix is not None else self.default_prefix,
            field_path=field_path if field_path is not None else self.default_field,
            categories=parse_category_names(category_names),
            unknown_category=self.unknown_category,
            buffer_size=self.buffer_size,
            max_line_bytes=self.max_line_bytes,
            progress_interval=self.progress_interval,
        )
