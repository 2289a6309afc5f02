"""Shared test fixtures for chrsplit."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from chrsplit.core.router import StreamingRouter
from chrsplit.models.config import SplitConfig


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test inputs and outputs."""
    return tmp_path


@pytest.fixture
def write_input(tmp_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write raw lines to an input file.

    Lines are joined with ``\\n`` and a trailing newline is added unless
    ``trailing_newline=False``.  ``str`` lines are UTF-8 encoded.
    """

    def _factory(
        lines: list[str | bytes],
        name: str = "input.jsonl",
        trailing_newline: bool = True,
    ) -> Path:
        encoded = [ln.encode("utf-8") if isinstance(ln, str) else ln for ln in lines]
        data = b"\n".join(encoded)
        if trailing_newline and encoded:
            data += b"\n"
        path = tmp_dir / name
        path.write_bytes(data)
        return path

    return _factory


@pytest.fixture
def make_config(tmp_dir: Path) -> Callable[..., SplitConfig]:
    """Factory fixture: build a SplitConfig whose outputs land in tmp_dir."""

    def _factory(
        input_path: Path | None = None,
        categories: list[str] | None = None,
        **overrides: Any,
    ) -> SplitConfig:
        defaults: dict[str, Any] = {
            "input_path": input_path,
            "prefix": str(tmp_dir / "out"),
            "categories": categories if categories is not None else ["chr1", "chr2"],
            "progress_interval": 0,
        }
        defaults.update(overrides)
        return SplitConfig(**defaults)

    return _factory


@pytest.fixture
def make_router(make_config: Callable[..., SplitConfig]) -> Callable[..., StreamingRouter]:
    """Factory fixture: build a StreamingRouter over make_config()."""

    def _factory(*args: Any, cancel_event: Any = None, **kwargs: Any) -> StreamingRouter:
        return StreamingRouter(make_config(*args, **kwargs), cancel_event=cancel_event)

    return _factory


@pytest.fixture
def read_output(tmp_dir: Path) -> Callable[[str], bytes]:
    """Return the raw bytes of ``out_<category>.jsonl``."""

    def _read(category: str) -> bytes:
        return (tmp_dir / f"out_{category}.jsonl").read_bytes()

    return _read
