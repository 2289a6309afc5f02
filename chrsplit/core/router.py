"""StreamingRouter — single-pass JSONL splitter with one output per category.

Lifecycle is linear (CREATED -> INITIALIZED -> RUNNING -> CLOSED):

1. ``initialize`` eagerly creates every output, sentinel included.
2. ``process_file`` scans the input forward-only, one record at a time.
3. ``close_all`` flushes and releases every output on every exit path.

Every non-blank input line is written to exactly one output, followed by
exactly one newline, in input order.
"""

from __future__ import annotations

import contextlib
import io
import logging
import threading
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from chrsplit.core.extractor import extract_field
from chrsplit.models.config import SplitConfig, normalize_category_names
from chrsplit.models.phases import VALID_TRANSITIONS, WRITABLE_PHASES, RouterPhase
from chrsplit.models.stats import SplitStats

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class SplitError(RuntimeError):
    """Base class for every fatal error raised during a split run.

    ``path`` names the file involved and ``line_number`` the 1-based input
    line (blank lines included) when the failure happened mid-scan.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line_number: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.line_number = line_number


class InputNotFoundError(SplitError):
    """Raised when the input file is missing or cannot be opened."""


class InputReadError(SplitError):
    """Raised when reading the input fails part-way through the scan."""


class OutputCreationError(SplitError):
    """Raised when an output file cannot be created during initialize."""


class OversizedRecordError(SplitError):
    """Raised when a line exceeds ``max_line_bytes``."""


class RecordWriteError(SplitError):
    """Raised when writing or flushing an output fails."""


class SplitCancelledError(SplitError):
    """Raised when the cancel event is set between records."""


class InvalidPhaseError(SplitError):
    """Raised when an operation is not allowed in the current phase."""


class UnknownCategoryError(SplitError, KeyError):
    """Raised when writing to a category that has no output stream."""

    def __str__(self) -> str:
        return RuntimeError.__str__(self)


# ---------------------------------------------------------------------------
# Output stream
# ---------------------------------------------------------------------------


@dataclass
class OutputStream:
    """One category's destination: the file handle and its buffered writer.

    The writer owns the handle, so closing the writer releases both.
    """

    category: str
    path: Path
    handle: io.FileIO
    writer: io.BufferedWriter
    records: int = 0

    @classmethod
    def create(cls, category: str, path: Path, buffer_size: int) -> OutputStream:
        """Create (or truncate) *path* and wrap it in a buffered writer."""
        handle = io.FileIO(path, "w")
        try:
            writer = io.BufferedWriter(handle, buffer_size=buffer_size)
        except BaseException:
            handle.close()
            raise
        return cls(category=category, path=path, handle=handle, writer=writer)

    def write_record(self, record: bytes) -> None:
        self.writer.write(record)
        self.writer.write(b"\n")
        self.records += 1

    def flush(self) -> None:
        if not self.writer.closed:
            self.writer.flush()

    def close(self) -> None:
        """Flush and release.  The handle is closed even if the flush fails."""
        if not self.writer.closed:
            self.writer.close()

    @property
    def closed(self) -> bool:
        return self.writer.closed and self.handle.closed


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------


class StreamingRouter:
    """Routes each record of one JSONL file to its category's output.

    Parameters
    ----------
    config:
        Run configuration: prefix, field path, categories, sentinel name,
        buffer and line-size limits.
    cancel_event:
        Optional event checked between records.  When set, the run stops
        with :class:`SplitCancelledError` after outputs are flushed and
        closed.

    Usage
    -----
    >>> router = StreamingRouter(SplitConfig(input_path=Path("calls.jsonl")))
    >>> stats = router.process_file()
    >>> stats.category_counts["chr1"]
    """

    def __init__(
        self,
        config: SplitConfig,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self._config = config
        self._cancel_event = cancel_event
        self._phase = RouterPhase.CREATED
        self._category_set: frozenset[str] = frozenset(config.categories)
        self._streams: dict[str, OutputStream] = {}
        self._resources = contextlib.ExitStack()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def config(self) -> SplitConfig:
        return self._config

    @property
    def phase(self) -> RouterPhase:
        return self._phase

    @property
    def streams(self) -> dict[str, OutputStream]:
        """Return a copy of the category -> stream mapping."""
        return dict(self._streams)

    # ------------------------------------------------------------------
    # Phase management
    # ------------------------------------------------------------------

    def _transition(self, target: RouterPhase) -> None:
        if target not in VALID_TRANSITIONS[self._phase]:
            raise InvalidPhaseError(
                f"Cannot move router from {self._phase.value} to {target.value}"
            )
        logger.debug("Router phase %s -> %s", self._phase.value, target.value)
        self._phase = target

    # ------------------------------------------------------------------
    # Init
    # ------------------------------------------------------------------

    def initialize(self, categories: Iterable[str] | None = None) -> None:
        """Create one output per category plus the sentinel.

        *categories* defaults to the configured list.  If any output cannot
        be created, every output created so far is flushed and closed
        before :class:`OutputCreationError` is raised.
        """
        if self._phase is not RouterPhase.CREATED:
            raise InvalidPhaseError(
                f"initialize() called in phase {self._phase.value}"
            )

        if categories is not None:
            declared = normalize_category_names(categories)
            if self._config.unknown_category in declared:
                raise ValueError(
                    f"category {self._config.unknown_category!r} is reserved"
                )
            self._category_set = frozenset(declared)
        else:
            declared = list(self._config.categories)

        for category in [*declared, self._config.unknown_category]:
            path = self._config.output_path(category)
            try:
                stream = OutputStream.create(category, path, self._config.buffer_size)
            except OSError as exc:
                logger.error("Failed to create output file %s: %s", path, exc)
                self._close_after_failure()
                raise OutputCreationError(
                    f"failed to create output file {path}: {exc}", path=path
                ) from exc
            self._resources.callback(stream.close)
            self._streams[category] = stream
            logger.debug("Created output %s for category %s", path, category)

        self._transition(RouterPhase.INITIALIZED)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def route_key(self, key: str, found: bool) -> str:
        """Return the category a record with routing key *key* belongs to."""
        if found and key in self._category_set:
            return key
        return self._config.unknown_category

    def write(self, category: str, record: bytes) -> None:
        """Append *record* and one newline to *category*'s output."""
        if self._phase not in WRITABLE_PHASES:
            raise InvalidPhaseError(f"write() called in phase {self._phase.value}")
        try:
            stream = self._streams[category]
        except KeyError:
            raise UnknownCategoryError(
                f"no output stream for category {category!r}"
            ) from None
        try:
            stream.write_record(record)
        except OSError as exc:
            raise RecordWriteError(
                f"failed to write to output file {stream.path}: {exc}",
                path=stream.path,
            ) from exc

    def _iter_records(
        self, fh: io.BufferedReader, input_path: Path
    ) -> Iterator[tuple[int, bytes]]:
        """Yield ``(line_number, record)`` for every input line.

        Reads at most ``max_line_bytes`` plus the terminator per call so a
        runaway line is detected without buffering it whole.  A trailing
        ``\\r`` is dropped along with the ``\\n``.
        """
        limit = self._config.max_line_bytes
        line_number = 0
        while True:
            try:
                chunk = fh.readline(limit + 2)
            except OSError as exc:
                raise InputReadError(
                    f"error reading input file at line {line_number + 1}: {exc}",
                    path=input_path,
                    line_number=line_number + 1,
                ) from exc
            if not chunk:
                return
            line_number += 1
            record = chunk[:-1] if chunk.endswith(b"\n") else chunk
            if record.endswith(b"\r"):
                record = record[:-1]
            if len(record) > limit:
                raise OversizedRecordError(
                    f"line {line_number} exceeds the maximum record size "
                    f"of {limit} bytes",
                    path=input_path,
                    line_number=line_number,
                )
            yield line_number, record

    def process_file(self, input_path: Path | str | None = None) -> SplitStats:
        """Split *input_path* (default: the configured input) into outputs.

        Raises
        ------
        InputNotFoundError
            Input missing or unreadable; no outputs are created.
        OutputCreationError
            An output could not be created; nothing is read.
        OversizedRecordError, InputReadError, RecordWriteError, SplitCancelledError
            Fatal mid-run failures.  Outputs are flushed and closed first.
        """
        path = Path(input_path) if input_path is not None else self._config.input_path
        if path is None:
            raise InputNotFoundError("no input file configured")

        try:
            fh = open(path, "rb")
        except OSError as exc:
            raise InputNotFoundError(
                f"failed to open input file {path}: {exc}", path=path
            ) from exc

        with fh:
            logger.info(
                "Processing: %s -> %s_*.jsonl", path, self._config.prefix
            )
            self.initialize()
            try:
                stats = self._run(fh, path)
            except BaseException:
                self._close_after_failure()
                raise

        try:
            self.close_all()
        except OSError as exc:
            raise RecordWriteError(
                f"failed to close outputs: {exc}",
                path=path,
                line_number=stats.lines_read,
            ) from exc

        logger.info(
            "%d lines finished in %.2f sec (%.2f lines/sec)",
            stats.lines_read,
            stats.elapsed_seconds,
            stats.lines_per_second,
        )
        return stats

    def _run(self, fh: io.BufferedReader, input_path: Path) -> SplitStats:
        self._transition(RouterPhase.RUNNING)
        field_path = self._config.field_path
        interval = self._config.progress_interval
        started = time.perf_counter()
        line_number = 0
        blank_lines = 0
        records_written = 0

        for line_number, record in self._iter_records(fh, input_path):
            if self._cancel_event is not None and self._cancel_event.is_set():
                logger.warning("Split cancelled before line %d", line_number)
                raise SplitCancelledError(
                    f"split cancelled before line {line_number}",
                    path=input_path,
                    line_number=line_number,
                )

            if not record:
                blank_lines += 1
            else:
                key, found = extract_field(record, field_path)
                category = self.route_key(key, found)
                try:
                    self.write(category, record)
                except RecordWriteError as exc:
                    raise RecordWriteError(
                        f"{exc} at line {line_number}",
                        path=exc.path,
                        line_number=line_number,
                    ) from exc.__cause__
                records_written += 1

            if interval and line_number % interval == 0:
                elapsed = time.perf_counter() - started
                rate = line_number / elapsed if elapsed > 0 else 0.0
                logger.info("Processed %d lines (%.0f lines/sec)", line_number, rate)

        try:
            self.flush_all()
        except OSError as exc:
            raise RecordWriteError(
                f"failed to flush outputs after line {line_number}: {exc}",
                path=input_path,
                line_number=line_number,
            ) from exc

        return SplitStats(
            input_path=input_path,
            lines_read=line_number,
            records_written=records_written,
            blank_lines=blank_lines,
            category_counts={c: s.records for c, s in self._streams.items()},
            output_paths={c: s.path for c, s in self._streams.items()},
            unknown_category=self._config.unknown_category,
            elapsed_seconds=time.perf_counter() - started,
        )

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def flush_all(self) -> None:
        """Flush every open output without closing it."""
        for stream in self._streams.values():
            stream.flush()

    def close_all(self) -> None:
        """Flush and release every output.  Later calls are no-ops.

        Every stream is closed even when one of them fails; the failure is
        re-raised once all handles are released.
        """
        if self._phase is RouterPhase.CLOSED:
            return
        self._transition(RouterPhase.CLOSED)
        self._resources.close()
        logger.debug("Closed %d output streams", len(self._streams))

    def _close_after_failure(self) -> None:
        """Release outputs while another error is already propagating."""
        try:
            self.close_all()
        except OSError as exc:
            logger.error("Error while closing outputs after a failed run: %s", exc)

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> StreamingRouter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_all()
