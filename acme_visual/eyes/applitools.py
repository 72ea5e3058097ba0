"""Applitools Eyes for Playwright implementation of the visual client."""

from __future__ import annotations

import logging
from typing import Any

from applitools.playwright import (
    BatchInfo,
    BrowserType,
    ClassicRunner,
    Configuration,
    Eyes,
    MatchLevel as EyesMatchLevel,
    RectangleSize,
    RunnerOptions,
    Target as EyesTarget,
    VisualGridRunner,
)

from acme_visual.models.checkpoint import CheckTarget, MatchLevel
from acme_visual.models.config import SuiteConfig, ViewportConfig
from acme_visual.models.results import SessionResult

from .translate import session_result_from_backend

logger = logging.getLogger(__name__)

_MATCH_LEVELS = {
    MatchLevel.EXACT: EyesMatchLevel.EXACT,
    MatchLevel.STRICT: EyesMatchLevel.STRICT,
    MatchLevel.CONTENT: EyesMatchLevel.CONTENT,
    MatchLevel.LAYOUT: EyesMatchLevel.LAYOUT,
    MatchLevel.IGNORE_COLORS: EyesMatchLevel.IGNORE_COLORS,
}

_BROWSERS = {
    "chrome": BrowserType.CHROME,
    "firefox": BrowserType.FIREFOX,
    "safari": BrowserType.SAFARI,
    "edge": BrowserType.EDGE_CHROMIUM,
}


def build_eyes_configuration(config: SuiteConfig) -> Configuration:
    """Translate the suite settings into an Eyes ``Configuration``."""
    batch = BatchInfo(config.batch.name).with_batch_id(config.batch.batch_id)

    eyes_config = Configuration()
    eyes_config.set_batch(batch)
    eyes_config.set_app_name(config.app_name)
    eyes_config.set_match_level(_MATCH_LEVELS[config.match_level])

    api_key = config.resolved_api_key()
    if api_key:
        eyes_config.set_api_key(api_key)
    server_url = config.resolved_server_url()
    if server_url:
        eyes_config.set_server_url(server_url)

    if config.runner == "ultrafast":
        for b in config.grid_browsers:
            eyes_config.add_browser(b.width, b.height, _BROWSERS[b.browser])
    return eyes_config


def build_check_settings(target: CheckTarget):
    settings = EyesTarget.window() if target.is_window else EyesTarget.region(target.region)
    if target.full_page:
        settings = settings.fully()
    if target.match_level is not None:
        settings = settings.match_level(_MATCH_LEVELS[target.match_level])
    return settings


class EyesClient:
    """A single Eyes instance for one test."""

    def __init__(self, runner, eyes_config: Configuration):
        self.eyes = Eyes(runner)
        self.eyes.set_configuration(eyes_config)
        self.test_name = ""

    def open(self, page: Any, app_name: str, test_name: str, viewport: ViewportConfig) -> None:
        self.test_name = test_name
        self.eyes.open(page, app_name, test_name, RectangleSize(viewport.width, viewport.height))

    def check(self, label: str, target: CheckTarget) -> None:
        self.eyes.check(label, build_check_settings(target))

    def close(self, wait: bool) -> SessionResult:
        if not wait:
            self.eyes.close_async()
            return SessionResult(test_name=self.test_name, status="pending", close_mode="async")
        # Inspect the results ourselves rather than relying on backend exceptions
        results = self.eyes.close(False)
        return session_result_from_backend(results, self.test_name, "sync")

    def abort(self) -> SessionResult:
        self.eyes.abort_async()
        return SessionResult(test_name=self.test_name, status="aborted", close_mode="abort")


class EyesRunner:
    """Classic or Ultrafast Grid runner shared by all tests in a run."""

    def __init__(self, config: SuiteConfig):
        if config.runner == "ultrafast":
            self.runner = VisualGridRunner(RunnerOptions().test_concurrency(config.test_concurrency))
        else:
            self.runner = ClassicRunner()
        self.eyes_config = build_eyes_configuration(config)
        logger.debug("Created %s runner for batch '%s'", config.runner, config.batch.name)

    def new_client(self, config: SuiteConfig) -> EyesClient:
        return EyesClient(self.runner, self.eyes_config)

    def get_all_results(self) -> list[SessionResult]:
        summary = self.runner.get_all_test_results(False)
        session_results = []
        for container in summary.all_results:
            if container.test_results is None:
                error = str(container.exception) if container.exception else "no results"
                session_results.append(SessionResult(test_name="(aborted)", status="aborted", error=error))
                continue
            session_results.append(
                session_result_from_backend(container.test_results, container.test_results.name, "async")
            )
        return session_results
