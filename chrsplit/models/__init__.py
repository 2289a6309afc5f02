"""Pydantic models for chrsplit — configuration, lifecycle phases, results."""

from chrsplit.models.config import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_FIELD_PATH,
    DEFAULT_MAX_LINE_BYTES,
    DEFAULT_PREFIX,
    DEFAULT_PROGRESS_INTERVAL,
    UNKNOWN_CATEGORY,
    SplitConfig,
    default_chromosomes,
    normalize_category_names,
    parse_category_names,
)
from chrsplit.models.phases import VALID_TRANSITIONS, RouterPhase
from chrsplit.models.stats import SplitStats

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_FIELD_PATH",
    "DEFAULT_MAX_LINE_BYTES",
    "DEFAULT_PREFIX",
    "DEFAULT_PROGRESS_INTERVAL",
    "UNKNOWN_CATEGORY",
    "RouterPhase",
    "SplitConfig",
    "SplitStats",
    "VALID_TRANSITIONS",
    "default_chromosomes",
    "normalize_category_names",
    "parse_category_names",
]
