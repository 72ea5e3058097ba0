"""Translation of backend result objects into SessionResult.

Kept free of client-library imports so the mapping can be tested without
the backend SDK installed.
"""

from __future__ import annotations

import logging
from typing import Any

from acme_visual.models.results import CheckpointResult, SessionResult

logger = logging.getLogger(__name__)

_KNOWN_STATUSES = ("passed", "failed", "unresolved")


def _status_name(status: Any) -> str:
    value = getattr(status, "value", status)
    return str(value or "").lower()


def _checkpoint_status(step: Any) -> str:
    if getattr(step, "is_different", False):
        return "failed"
    if not getattr(step, "has_baseline_image", True):
        return "unresolved"
    return "passed"


def session_result_from_backend(results: Any, test_name: str, close_mode: str) -> SessionResult:
    """Map a backend ``TestResults`` object onto a SessionResult.

    A new test (no baseline yet) is reported as unresolved regardless of the
    backend's own status, so that a synchronous close treats it as a failure.
    """
    if results is None:
        return SessionResult(test_name=test_name, status="pending", close_mode=close_mode)

    is_new = bool(getattr(results, "is_new", False))
    status = _status_name(getattr(results, "status", None))
    if status not in _KNOWN_STATUSES:
        logger.debug("Unknown backend status %r for %s, treating as pending", status, test_name)
        status = "pending"
    if is_new:
        status = "unresolved"

    steps = getattr(results, "steps_info", None) or []
    checkpoints = [
        CheckpointResult(index=i, label=getattr(step, "name", "") or f"#{i}",
                         status=_checkpoint_status(step))
        for i, step in enumerate(steps, 1)
    ]

    return SessionResult(
        test_name=getattr(results, "name", None) or test_name,
        app_name=getattr(results, "app_name", None) or "",
        status=status,
        close_mode=close_mode,
        is_new=is_new,
        url=getattr(results, "url", None),
        checkpoints=checkpoints,
        matches=getattr(results, "matches", 0) or 0,
        mismatches=getattr(results, "mismatches", 0) or 0,
        missing=getattr(results, "missing", 0) or 0,
    )
