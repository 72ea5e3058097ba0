"""JSON report output."""

from __future__ import annotations

import json
from pathlib import Path

from acme_visual.models.results import RunResults


def generate_json_report(results: RunResults, output_path: Path) -> None:
    """Write a machine-readable JSON report."""
    report = results.model_dump()
    report["totals"] = {
        "total": results.total,
        "passed": results.passed,
        "failed": results.failed,
        "unresolved": results.unresolved,
        "pending": results.pending,
        "aborted": results.aborted,
    }

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
