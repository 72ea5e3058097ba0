"""Result data structures returned by the visual backend."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

CheckpointStatus = Literal["passed", "failed", "unresolved", "pending"]
SessionStatus = Literal["passed", "failed", "unresolved", "pending", "aborted"]


class CheckpointResult(BaseModel):
    index: int
    label: str
    status: CheckpointStatus = "pending"


class SessionResult(BaseModel):
    """Outcome of one closed session (one test case)."""
    test_name: str
    app_name: str = ""
    status: SessionStatus = "pending"
    close_mode: Literal["async", "sync", "abort"] = "async"
    is_new: bool = False
    url: Optional[str] = None  # dashboard link
    checkpoints: list[CheckpointResult] = Field(default_factory=list)
    matches: int = 0
    mismatches: int = 0
    missing: int = 0
    error: Optional[str] = None

    @property
    def is_passed(self) -> bool:
        return self.status == "passed"

    @property
    def is_failing(self) -> bool:
        return self.status in ("failed", "unresolved")


class RunResults(BaseModel):
    batch_name: str
    batch_id: str = ""
    started_at: str = ""
    completed_at: str = ""
    session_results: list[SessionResult] = Field(default_factory=list)

    def _count(self, status: str) -> int:
        return sum(1 for r in self.session_results if r.status == status)

    @property
    def total(self) -> int:
        return len(self.session_results)

    @property
    def passed(self) -> int:
        return self._count("passed")

    @property
    def failed(self) -> int:
        return self._count("failed")

    @property
    def unresolved(self) -> int:
        return self._count("unresolved")

    @property
    def pending(self) -> int:
        return self._count("pending")

    @property
    def aborted(self) -> int:
        return self._count("aborted")

    def summary_text(self) -> str:
        parts = [
            f"Batch '{self.batch_name}': {self.total} visual tests.",
            f"Results: {self.passed} passed, {self.failed} failed, "
            f"{self.unresolved} unresolved, {self.pending} pending, {self.aborted} aborted.",
        ]
        failing = [r for r in self.session_results if r.is_failing]
        if failing:
            parts.append(f"Needs review: {', '.join(r.test_name for r in failing[:5])}")
        return " ".join(parts)
