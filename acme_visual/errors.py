"""Exception hierarchy for the visual test lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from acme_visual.models.results import SessionResult


class VisualTestError(Exception):
    """Base class for all lifecycle errors raised by this package."""


class SessionOpenError(VisualTestError):
    """The backend handshake failed; the session cannot take checkpoints."""

    def __init__(self, test_name: str, reason: str):
        super().__init__(f"Could not open visual session for '{test_name}': {reason}")
        self.test_name = test_name
        self.reason = reason


class SessionClosedError(VisualTestError):
    """An operation was attempted on a session that is already closed."""


class DuplicateCheckpointError(VisualTestError):
    """A checkpoint label was reused within one session."""

    def __init__(self, label: str, first_index: int):
        super().__init__(
            f"Checkpoint label '{label}' already used as checkpoint #{first_index}"
        )
        self.label = label
        self.first_index = first_index


class VisualMismatchError(VisualTestError):
    """A synchronous close found failed or unresolved checkpoints."""

    def __init__(self, result: SessionResult):
        bad = [c.label for c in result.checkpoints if c.status in ("failed", "unresolved")]
        detail = f" ({', '.join(bad)})" if bad else ""
        msg = f"Visual test '{result.test_name}' is {result.status}{detail}"
        if result.url:
            msg += f". See {result.url}"
        super().__init__(msg)
        self.result = result


class ResultsNotReadyError(VisualTestError):
    """Aggregated results were requested while sessions are still open."""
