"""Router lifecycle phases — strictly linear, never re-entered."""

from __future__ import annotations

from enum import Enum


class RouterPhase(str, Enum):
    """Lifecycle of a single StreamingRouter instance."""

    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    CLOSED = "closed"


# Every phase can fall through to CLOSED so cleanup is always reachable.
# CLOSED is terminal.
VALID_TRANSITIONS: dict[RouterPhase, set[RouterPhase]] = {
    RouterPhase.CREATED: {RouterPhase.INITIALIZED, RouterPhase.CLOSED},
    RouterPhase.INITIALIZED: {RouterPhase.RUNNING, RouterPhase.CLOSED},
    RouterPhase.RUNNING: {RouterPhase.CLOSED},
    RouterPhase.CLOSED: set(),
}

# Phases in which output streams are open and writable.
WRITABLE_PHASES: frozenset[RouterPhase] = frozenset(
    {RouterPhase.INITIALIZED, RouterPhase.RUNNING}
)
