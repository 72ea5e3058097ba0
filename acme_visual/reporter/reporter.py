"""Report generation for aggregated visual results."""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console

from acme_visual.models.results import RunResults

from .console import print_results
from .json_report import generate_json_report

logger = logging.getLogger(__name__)


class Reporter:
    """Prints the run summary and writes report files.

    Reporting never fails the run; failing a test on visual differences is
    the job of a synchronous session close.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def generate_reports(self, results: RunResults, output_dir: Path | None = None) -> dict[str, str]:
        """Print the summary, and write a JSON report if ``output_dir`` is given.

        Returns format -> file path for every file written.
        """
        logger.info("Visual test results: %s", results.summary_text())
        print_results(results, self.console)

        generated = {}
        if output_dir is not None:
            output_dir.mkdir(parents=True, exist_ok=True)
            path = output_dir / f"visual_results_{results.batch_id or 'batch'}.json"
            generate_json_report(results, path)
            generated["json"] = str(path)
            logger.info("JSON report: %s", path)
        return generated
