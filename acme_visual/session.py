"""Per-test checkpoint session with guaranteed close."""

from __future__ import annotations

import logging
import time
from typing import Any, Literal, Optional

from acme_visual.errors import (
    DuplicateCheckpointError,
    SessionClosedError,
    SessionOpenError,
    VisualMismatchError,
    VisualTestError,
)
from acme_visual.eyes.client import VisualClient
from acme_visual.models.checkpoint import Checkpoint, CheckTarget, Target
from acme_visual.models.config import SuiteConfig, ViewportConfig
from acme_visual.models.results import SessionResult

logger = logging.getLogger(__name__)

CloseMode = Literal["async", "sync"]


class CheckpointSession:
    """Binds one browser page and the shared config to one backend session.

    Owned by exactly one test. Checkpoints are append-only and kept in call
    order; labels must be unique within the session. The session is closed
    exactly once, and leaving a ``with`` block always closes it.
    """

    def __init__(
        self,
        client: VisualClient,
        config: SuiteConfig,
        test_name: str,
        app_name: str | None = None,
        viewport: ViewportConfig | None = None,
        close_mode: CloseMode | None = None,
    ):
        self.client = client
        self.config = config
        self.test_name = test_name
        self.app_name = app_name or config.app_name
        # Always explicit so baselines never depend on the ambient window size
        self.viewport = viewport or config.viewport
        self.close_mode: CloseMode = close_mode or config.close_mode
        self.checkpoints: list[Checkpoint] = []
        self.result: Optional[SessionResult] = None
        self._labels: dict[str, int] = {}
        self._opened = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    @property
    def is_closed(self) -> bool:
        return self._closed

    def open(self, page: Any) -> "CheckpointSession":
        if self._opened:
            raise VisualTestError(f"Session '{self.test_name}' was already opened")
        logger.debug("Opening visual session '%s' (%s, %dx%d)", self.test_name,
                     self.app_name, self.viewport.width, self.viewport.height)
        try:
            self.client.open(page, self.app_name, self.test_name, self.viewport)
        except Exception as e:
            raise SessionOpenError(self.test_name, str(e) or type(e).__name__) from e
        self._opened = True
        logger.info("Opened visual session '%s'", self.test_name)
        return self

    def check(self, label: str, target: CheckTarget | None = None) -> Checkpoint:
        """Capture the page as it is now. Does not wait for the comparison."""
        if not self._opened:
            raise SessionClosedError(f"Session '{self.test_name}' is not open")
        if self._closed:
            raise SessionClosedError(
                f"Cannot add checkpoint '{label}': session '{self.test_name}' is closed"
            )
        if not label:
            raise ValueError("Checkpoint label must not be empty")
        if label in self._labels:
            raise DuplicateCheckpointError(label, self._labels[label])

        checkpoint = Checkpoint(
            index=len(self.checkpoints) + 1,
            label=label,
            target=target or Target.window(),
            captured_at=time.time(),
        )
        self.client.check(label, checkpoint.target)
        self.checkpoints.append(checkpoint)
        self._labels[label] = checkpoint.index
        logger.debug("Checkpoint #%d '%s' -> %s", checkpoint.index, label, checkpoint.target.describe())
        return checkpoint

    def close(self, mode: CloseMode | None = None) -> SessionResult:
        """Finalize the session.

        ``async`` returns at once and never fails on visual differences.
        ``sync`` waits for every comparison and raises VisualMismatchError
        when the session is failed or unresolved.
        """
        if not self._opened:
            raise SessionClosedError(f"Session '{self.test_name}' was never opened")
        if self._closed:
            raise SessionClosedError(f"Session '{self.test_name}' is already closed")
        mode = mode or self.close_mode
        if mode not in ("async", "sync"):
            raise ValueError(f"Unknown close mode: {mode}")

        # Marked closed before the call so a failing close is never retried
        self._closed = True
        result = self.client.close(wait=(mode == "sync"))
        self.result = result
        logger.info("Closed visual session '%s' (%s): %s", self.test_name, mode, result.status)

        if mode == "sync" and result.is_failing:
            raise VisualMismatchError(result)
        return result

    def abort(self) -> SessionResult | None:
        """Close without waiting; a no-op for a session that is already closed."""
        if not self.is_open:
            return self.result
        self._closed = True
        self.result = self.client.abort()
        logger.warning("Aborted visual session '%s'", self.test_name)
        return self.result

    def __enter__(self) -> "CheckpointSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if not self.is_open:
            return False
        if exc_type is None:
            self.close()
        else:
            # Submit partial checkpoints; the body's error stays the primary one
            logger.info("Test body of '%s' failed, closing session asynchronously", self.test_name)
            self.close("async")
        return False


def open_session(
    page: Any,
    config: SuiteConfig,
    client: VisualClient,
    test_name: str,
    app_name: str | None = None,
    viewport: ViewportConfig | None = None,
    close_mode: CloseMode | None = None,
) -> CheckpointSession:
    """Open a session for one test. Raises SessionOpenError if the handshake fails."""
    session = CheckpointSession(client, config, test_name, app_name=app_name,
                                viewport=viewport, close_mode=close_mode)
    return session.open(page)
