"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest

from acme_visual.models.checkpoint import CheckTarget
from acme_visual.models.config import SuiteConfig, ViewportConfig, build_configuration
from acme_visual.models.results import CheckpointResult, SessionResult
from acme_visual.orchestrator import VisualSuite

# Same name as the pytest11 entry point, so an installed copy is not registered twice
pytest_plugins = ["acme_visual.pytest_plugin", "pytester"]

# ============================================================================
# In-memory visual backend
# ============================================================================


class FakeBackend:
    """Records every call and decides checkpoint outcomes by label.

    ``outcomes`` maps a label to "failed" or "unresolved"; any other label
    matches its baseline.
    """

    def __init__(self):
        self.events: list[tuple] = []
        self.outcomes: dict[str, str] = {}
        self.fail_open = False
        self.fail_close = False


class FakeClient:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.test_name = ""
        self.app_name = ""
        self.viewport: ViewportConfig | None = None
        self.page = None
        self.checks: list[tuple[str, CheckTarget]] = []
        self.close_calls = 0
        self.closed_mode: str | None = None

    def open(self, page, app_name, test_name, viewport):
        self.backend.events.append(("open", test_name))
        if self.backend.fail_open:
            raise ConnectionError("handshake refused: invalid API key")
        self.page = page
        self.app_name = app_name
        self.test_name = test_name
        self.viewport = viewport

    def check(self, label, target):
        self.backend.events.append(("check", self.test_name, label))
        self.checks.append((label, target))

    def final_result(self, close_mode: str) -> SessionResult:
        checkpoints = [
            CheckpointResult(index=i, label=label, status=self.backend.outcomes.get(label, "passed"))
            for i, (label, _) in enumerate(self.checks, 1)
        ]
        statuses = {c.status for c in checkpoints}
        status = "failed" if "failed" in statuses else "unresolved" if "unresolved" in statuses else "passed"
        return SessionResult(test_name=self.test_name, app_name=self.app_name, status=status,
                             close_mode=close_mode, checkpoints=checkpoints)

    def close(self, wait):
        self.close_calls += 1
        mode = "sync" if wait else "async"
        self.closed_mode = mode
        self.backend.events.append(("close", self.test_name, mode))
        if self.backend.fail_close:
            raise ConnectionError("backend went away")
        if wait:
            return self.final_result("sync")
        return SessionResult(test_name=self.test_name, status="pending", close_mode="async")

    def abort(self):
        self.close_calls += 1
        self.closed_mode = "abort"
        self.backend.events.append(("abort", self.test_name))
        return SessionResult(test_name=self.test_name, status="aborted", close_mode="abort")


class FakeRunner:
    def __init__(self, backend: FakeBackend):
        self.backend = backend
        self.clients: list[FakeClient] = []
        self.configs_seen: list[SuiteConfig] = []

    def new_client(self, config):
        self.configs_seen.append(config)
        client = FakeClient(self.backend)
        self.clients.append(client)
        return client

    def get_all_results(self):
        self.backend.events.append(("get_all_results",))
        return [c.final_result(c.closed_mode or "async") for c in self.clients if c.closed_mode]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def fake_client(backend: FakeBackend) -> FakeClient:
    return FakeClient(backend)


@pytest.fixture
def fake_runner(backend: FakeBackend) -> FakeRunner:
    return FakeRunner(backend)


@pytest.fixture
def suite_config() -> SuiteConfig:
    """Create a test suite configuration."""
    return build_configuration("Unit test batch")


@pytest.fixture
def sync_config() -> SuiteConfig:
    return build_configuration("Unit test batch", close_mode="sync")


@pytest.fixture
def fake_page() -> MagicMock:
    """A stand-in browser page; only identity matters to the session layer."""
    return MagicMock(name="page")


@pytest.fixture
def suite(suite_config: SuiteConfig, fake_runner: FakeRunner) -> VisualSuite:
    return VisualSuite(suite_config, fake_runner)
