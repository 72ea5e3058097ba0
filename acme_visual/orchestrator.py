"""Run-level orchestrator: one session per test, one results join per run."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from acme_visual.errors import ResultsNotReadyError, SessionOpenError, VisualTestError
from acme_visual.eyes.client import VisualRunner
from acme_visual.models.config import SuiteConfig, ViewportConfig
from acme_visual.models.results import RunResults, SessionResult
from acme_visual.reporter.reporter import Reporter
from acme_visual.session import CheckpointSession, CloseMode, open_session

logger = logging.getLogger(__name__)


class VisualSuite:
    """Coordinates every visual session of one test run.

    Holds the shared SuiteConfig by reference, hands each test its own
    session, and refuses to aggregate results while any session is open.
    """

    def __init__(self, config: SuiteConfig, runner: VisualRunner):
        self.config = config
        self.runner = runner
        self.closed_sessions: list[SessionResult] = []
        # token -> test name, from before the handshake until close has been issued
        self._open: dict[object, str] = {}
        self._lock = threading.Lock()
        self._join_lock = threading.Lock()
        self._joining = False
        self._results: RunResults | None = None

    @property
    def open_sessions(self) -> int:
        with self._lock:
            return len(self._open)

    @contextmanager
    def session(
        self,
        page: Any,
        test_name: str,
        close_mode: CloseMode | None = None,
        app_name: str | None = None,
        viewport: ViewportConfig | None = None,
    ) -> Iterator[CheckpointSession]:
        """Open a session for one test and close it on every exit path."""
        token = object()
        with self._lock:
            if self._joining:
                raise VisualTestError("Results are being aggregated; no new sessions allowed")
            self._open[token] = test_name

        session = None
        try:
            client = self.runner.new_client(self.config)
            try:
                session = open_session(page, self.config, client, test_name, app_name=app_name,
                                       viewport=viewport, close_mode=close_mode)
            except SessionOpenError:
                logger.error("Setup failed for '%s'; no checkpoints will be taken", test_name)
                raise

            with session:
                yield session
        finally:
            # A still-open session here means close itself never ran
            if session is not None and session.is_open:
                session.abort()
            with self._lock:
                self._open.pop(token, None)
                if session is not None and session.result is not None:
                    self.closed_sessions.append(session.result)

    def get_all_results(self) -> RunResults:
        """Wait for the backend to aggregate every session of the run.

        Must follow every session's close. Under async close the returned
        results may still hold pending comparisons. Once a join has started
        no new session can open.
        """
        with self._join_lock:
            if self._results is not None:
                return self._results
            with self._lock:
                still_open = list(self._open.values())
                if still_open:
                    raise ResultsNotReadyError(
                        f"{len(still_open)} visual session(s) still open: {', '.join(still_open)}"
                    )
                self._joining = True

            logger.info("Collecting visual results for batch '%s'...", self.config.batch.name)
            start = time.time()
            try:
                session_results = self.runner.get_all_results()
            except Exception:
                with self._lock:
                    self._joining = False
                raise
            self._results = RunResults(
                batch_name=self.config.batch.name,
                batch_id=self.config.batch.batch_id,
                started_at=self.config.batch.started_at,
                completed_at=time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
                session_results=session_results,
            )
            logger.info("Collected %d visual results in %.1fs", self._results.total, time.time() - start)
            return self._results

    def report(self, results: RunResults | None = None) -> dict[str, str]:
        """Log and print the run summary; write a JSON report when configured."""
        results = results or self.get_all_results()
        output_dir = Path(self.config.report_output_dir) if self.config.report_output_dir else None
        return Reporter().generate_reports(results, output_dir=output_dir)
