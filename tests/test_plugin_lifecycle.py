"""Run the plugin's fixtures inside a nested pytest session."""

import json

import pytest

CONFTEST = """
import json
from pathlib import Path

import pytest

from acme_visual.models.results import SessionResult

pytest_plugins = ["acme_visual.pytest_plugin"]

EVENTS = []


class RecordingClient:
    def __init__(self):
        self.test_name = ""
        self.labels = []

    def open(self, page, app_name, test_name, viewport):
        self.test_name = test_name
        EVENTS.append(["open", test_name])

    def check(self, label, target):
        self.labels.append(label)
        EVENTS.append(["check", label])

    def result(self, close_mode):
        status = "failed" if "Main page" in self.labels else "passed"
        return SessionResult(test_name=self.test_name, status=status, close_mode=close_mode)

    def close(self, wait):
        EVENTS.append(["close", self.test_name])
        if wait:
            return self.result("sync")
        return SessionResult(test_name=self.test_name, status="pending", close_mode="async")

    def abort(self):
        EVENTS.append(["abort", self.test_name])
        return SessionResult(test_name=self.test_name, status="aborted", close_mode="abort")


class RecordingRunner:
    def __init__(self):
        self.clients = []

    def new_client(self, config):
        client = RecordingClient()
        self.clients.append(client)
        return client

    def get_all_results(self):
        EVENTS.append(["get_all_results"])
        Path(__file__).with_name("events.json").write_text(json.dumps(EVENTS))
        return [c.result("async") for c in self.clients]


@pytest.fixture(scope="session")
def visual_runner(visual_config):
    return RecordingRunner()


@pytest.fixture
def page():
    return object()
"""

TESTS = """
SEEN = []


def test_login_page(eyes, visual_config):
    SEEN.append(visual_config)
    eyes.check("Login page")


def test_main_page(eyes, visual_config):
    assert SEEN[0] is visual_config
    assert eyes.config is visual_config
    eyes.check("Main page")
"""


@pytest.fixture
def visual_project(pytester):
    pytester.makeconftest(CONFTEST)
    pytester.makepyfile(test_bank=TESTS)
    return pytester


def _events(pytester):
    return json.loads((pytester.path / "events.json").read_text())


class TestPluginLifecycle:

    def test_async_run_passes_despite_mismatch(self, visual_project):
        result = visual_project.runpytest()
        result.assert_outcomes(passed=2)

        events = _events(visual_project)
        assert events[:3] == [["open", "test_login_page"], ["check", "Login page"], ["close", "test_login_page"]]
        assert events[3:6] == [["open", "test_main_page"], ["check", "Main page"], ["close", "test_main_page"]]
        assert events[-1] == ["get_all_results"]

    def test_sync_mismatch_is_a_teardown_error(self, visual_project):
        result = visual_project.runpytest("--visual-close-mode", "sync")
        result.assert_outcomes(passed=2, errors=1)
        result.stdout.fnmatch_lines(["*ERROR at teardown of test_main_page*"])

        events = _events(visual_project)
        assert events.count(["get_all_results"]) == 1
        assert events[-1] == ["get_all_results"]
