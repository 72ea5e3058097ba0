"""pytest plugin wiring the visual suite into run and test lifecycle hooks.

Run level (session scope): one SuiteConfig, one runner, one VisualSuite;
its teardown collects and reports the aggregated results after every test
has closed its session. Test level: the ``eyes`` fixture opens a session on
the pytest-playwright ``page`` and closes it in teardown.
"""

from __future__ import annotations

import logging

import pytest

from acme_visual.models.config import SuiteConfig, build_configuration
from acme_visual.orchestrator import VisualSuite

logger = logging.getLogger(__name__)


def pytest_addoption(parser) -> None:
    group = parser.getgroup("acme-visual", "visual checkpoint testing")
    group.addoption("--visual-config", default=None,
                    help="Path to a suite config JSON file")
    group.addoption("--visual-close-mode", default=None, choices=("async", "sync"),
                    help="async: never fail on visual differences; sync: wait and fail")


def pytest_configure(config) -> None:
    config.addinivalue_line("markers", "e2e: live browser tests against the visual backend")


def suite_config_from_options(config_path: str | None, close_mode: str | None) -> SuiteConfig:
    """Build the run's SuiteConfig from command-line options."""
    overrides = {"close_mode": close_mode} if close_mode else {}
    if config_path:
        cfg = SuiteConfig.load(config_path)
        return cfg.model_copy(update=overrides) if overrides else cfg
    return build_configuration(**overrides)


@pytest.fixture(scope="session")
def visual_config(pytestconfig) -> SuiteConfig:
    cfg = suite_config_from_options(
        pytestconfig.getoption("visual_config"),
        pytestconfig.getoption("visual_close_mode"),
    )
    logger.info("Visual batch '%s' (%s close, %s runner)", cfg.batch.name, cfg.close_mode, cfg.runner)
    return cfg


@pytest.fixture(scope="session")
def visual_runner(visual_config):
    # The backend SDK is only needed once a test actually asks for it
    from acme_visual.eyes.applitools import EyesRunner

    return EyesRunner(visual_config)


@pytest.fixture(scope="session")
def visual_suite(visual_config, visual_runner):
    suite = VisualSuite(visual_config, visual_runner)
    yield suite
    suite.report(suite.get_all_results())


@pytest.fixture
def eyes(visual_suite, page, request):
    """An open checkpoint session for the current test."""
    with visual_suite.session(page, request.node.name) as session:
        yield session
