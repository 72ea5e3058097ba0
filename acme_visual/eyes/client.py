"""Boundary to the visual checkpoint backend.

The backend (capture, diffing, baselines, dashboard) is external. This
package only talks to it through these two interfaces; the production
implementation lives in ``acme_visual.eyes.applitools``.
"""

from __future__ import annotations

from typing import Any, Protocol

from acme_visual.models.checkpoint import CheckTarget
from acme_visual.models.config import SuiteConfig, ViewportConfig
from acme_visual.models.results import SessionResult


class VisualClient(Protocol):
    """One backend session bound to one browser page."""

    def open(self, page: Any, app_name: str, test_name: str, viewport: ViewportConfig) -> None:
        """Handshake with the backend. May block. Raises on failure."""
        ...

    def check(self, label: str, target: CheckTarget) -> None:
        """Capture now, compare later. Must not wait for the comparison."""
        ...

    def close(self, wait: bool) -> SessionResult:
        """Finalize the session.

        With ``wait`` the call blocks until every checkpoint is compared and
        returns the final result. Without it the call returns at once with a
        ``pending`` result.
        """
        ...

    def abort(self) -> SessionResult:
        ...


class VisualRunner(Protocol):
    """Owns every client of a run and the batch-level join."""

    def new_client(self, config: SuiteConfig) -> VisualClient:
        ...

    def get_all_results(self) -> list[SessionResult]:
        """Block until the backend has aggregated every session.

        Returns one SessionResult per backend session; the orchestrator adds
        the batch identity to build RunResults.
        """
        ...
