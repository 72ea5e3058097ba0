"""Checkpoint target descriptors and records."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MatchLevel(str, Enum):
    EXACT = "exact"
    STRICT = "strict"
    CONTENT = "content"
    LAYOUT = "layout"
    IGNORE_COLORS = "ignore_colors"


class CheckTarget(BaseModel):
    """What to capture and how strictly to compare it.

    Built fluently, each call returning a new descriptor::

        Target.window().fully().layout()
    """

    model_config = ConfigDict(frozen=True)

    region: str = "window"  # "window" or a selector
    full_page: bool = False
    match_level: Optional[MatchLevel] = None  # None: use the suite default

    @property
    def is_window(self) -> bool:
        return self.region == "window"

    def fully(self, enabled: bool = True) -> "CheckTarget":
        return self.model_copy(update={"full_page": enabled})

    def with_match_level(self, level: MatchLevel | str) -> "CheckTarget":
        return self.model_copy(update={"match_level": MatchLevel(level)})

    def exact(self) -> "CheckTarget":
        return self.with_match_level(MatchLevel.EXACT)

    def strict(self) -> "CheckTarget":
        return self.with_match_level(MatchLevel.STRICT)

    def content(self) -> "CheckTarget":
        return self.with_match_level(MatchLevel.CONTENT)

    def layout(self) -> "CheckTarget":
        return self.with_match_level(MatchLevel.LAYOUT)

    def ignore_colors(self) -> "CheckTarget":
        return self.with_match_level(MatchLevel.IGNORE_COLORS)

    def describe(self) -> str:
        parts = ["window" if self.is_window else f"region({self.region})"]
        if self.full_page:
            parts.append("fully")
        if self.match_level:
            parts.append(self.match_level.value)
        return ".".join(parts)


class Target:
    """Entry points for building a CheckTarget."""

    @staticmethod
    def window() -> CheckTarget:
        return CheckTarget()

    @staticmethod
    def region(selector: str) -> CheckTarget:
        if not selector or selector == "window":
            raise ValueError("region() needs a selector; use window() for the viewport")
        return CheckTarget(region=selector)


class Checkpoint(BaseModel):
    """One capture request, in call order within its session."""

    model_config = ConfigDict(frozen=True)

    index: int
    label: str
    target: CheckTarget = Field(default_factory=CheckTarget)
    captured_at: float = 0.0
