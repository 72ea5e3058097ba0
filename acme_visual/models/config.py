"""Configuration models for the visual suite."""

from __future__ import annotations

import json
import os
import time
import uuid
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from acme_visual.models.checkpoint import MatchLevel

DEFAULT_BATCH_NAME = "Example: Playwright Python with the Classic Runner"
DEFAULT_SITE_URL = "https://demo.applitools.com"


def _resolve_env(v):
    if isinstance(v, str) and v.startswith("env:"):
        env_var = v[4:]
        resolved = os.environ.get(env_var)
        if resolved is None:
            raise ValueError(f"Environment variable '{env_var}' not set")
        return resolved
    return v


class ViewportConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    width: int = 1024
    height: int = 768
    name: str = "desktop"

    @field_validator("width", "height")
    @classmethod
    def positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("viewport dimensions must be positive")
        return v


class BatchInfoConfig(BaseModel):
    """Identity of one batch of checkpoint results on the dashboard."""

    model_config = ConfigDict(frozen=True)

    name: str
    batch_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    started_at: str = Field(default_factory=lambda: time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()))


class LoginConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_SITE_URL
    username: str = "andy"
    password: str = "i<3pandas"
    username_selector: str = "id=username"
    password_selector: str = "id=password"
    submit_selector: str = "id=log-in"

    @field_validator("password", mode="before")
    @classmethod
    def resolve_env_password(cls, v: str) -> str:
        return _resolve_env(v)


class GridBrowser(BaseModel):
    model_config = ConfigDict(frozen=True)

    browser: Literal["chrome", "firefox", "safari", "edge"] = "chrome"
    width: int = 1024
    height: int = 768


class SuiteConfig(BaseModel):
    """Process-wide settings shared by every test in a run.

    Frozen: test instances only ever hold a reference to the one object
    built at run start.
    """

    model_config = ConfigDict(frozen=True)

    app_name: str = "ACME Bank"
    batch: BatchInfoConfig = Field(default_factory=lambda: BatchInfoConfig(name=DEFAULT_BATCH_NAME))

    # Comparison
    match_level: MatchLevel = MatchLevel.STRICT
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)

    # Lifecycle
    close_mode: Literal["async", "sync"] = "async"

    # Runner selection
    runner: Literal["classic", "ultrafast"] = "classic"
    grid_browsers: tuple[GridBrowser, ...] = (GridBrowser(),)
    test_concurrency: int = 5

    # Backend
    api_key: str = ""  # empty: read APPLITOOLS_API_KEY at session open
    server_url: Optional[str] = None

    # Site under test
    login: LoginConfig = Field(default_factory=LoginConfig)

    # Reporting
    report_output_dir: Optional[str] = None

    @field_validator("api_key", mode="before")
    @classmethod
    def resolve_env_api_key(cls, v: str) -> str:
        return _resolve_env(v)

    @field_validator("test_concurrency")
    @classmethod
    def positive_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("test_concurrency must be at least 1")
        return v

    def resolved_api_key(self) -> str:
        return self.api_key or os.environ.get("APPLITOOLS_API_KEY", "")

    def resolved_server_url(self) -> Optional[str]:
        return self.server_url or os.environ.get("APPLITOOLS_SERVER_URL") or None

    @classmethod
    def load(cls, path: str | Path) -> "SuiteConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file. The batch identity is not persisted."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(mode="json")
        data["batch"] = {"name": self.batch.name}
        with open(path, "w") as f:
            json.dump(data, f, indent=2)


def build_configuration(batch_name: str = DEFAULT_BATCH_NAME, **overrides) -> SuiteConfig:
    """Build the run's single SuiteConfig. Pure: no backend call is made.

    Call once before any test runs and pass the result to every test.
    """
    batch = BatchInfoConfig(name=batch_name)
    return SuiteConfig(batch=batch, **overrides)
