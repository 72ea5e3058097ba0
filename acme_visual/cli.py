"""CLI entry point for the visual suite."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import pytest
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from acme_visual.models.config import SuiteConfig, build_configuration

console = Console()

DEFAULT_CONFIG = "visual-config.json"


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression tests for the ACME bank demo site"""
    setup_logging(verbose)


@cli.command()
@click.option("--batch", "-b", default=None, help="Batch name shown on the dashboard")
@click.option("--runner", type=click.Choice(["classic", "ultrafast"]), default="classic")
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def init(batch: str | None, runner: str, config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = build_configuration(batch, runner=runner) if batch else build_configuration(runner=runner)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nSet your API key and run:")
    console.print("  [blue]export APPLITOOLS_API_KEY=...[/blue]")
    console.print("  [blue]acme-visual run[/blue]")


@cli.command()
@click.option("--config", "-c", default=DEFAULT_CONFIG, help="Config file path")
def show(config: str) -> None:
    """Show the effective configuration."""
    try:
        cfg = SuiteConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'acme-visual init' to create a default config.")
        sys.exit(1)

    table = Table(title="Visual Suite Configuration")
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    table.add_row("App", cfg.app_name)
    table.add_row("Batch", cfg.batch.name)
    table.add_row("Viewport", f"{cfg.viewport.width}x{cfg.viewport.height}")
    table.add_row("Match level", cfg.match_level.value)
    table.add_row("Close mode", cfg.close_mode)
    table.add_row("Runner", cfg.runner)
    if cfg.runner == "ultrafast":
        browsers = ", ".join(f"{b.browser} {b.width}x{b.height}" for b in cfg.grid_browsers)
        table.add_row("Grid browsers", browsers)
    table.add_row("Site", cfg.login.url)
    table.add_row("API key", "[green]set[/green]" if cfg.resolved_api_key() else "[red]missing[/red]")
    console.print(table)


@cli.command(context_settings={"ignore_unknown_options": True})
@click.option("--config", "-c", default=None, help="Config file path")
@click.option("--sync", "sync_close", is_flag=True, help="Wait for comparisons and fail on differences")
@click.option("--tests", "-t", default="tests/e2e", help="Test path to run")
@click.argument("pytest_args", nargs=-1, type=click.UNPROCESSED)
def run(config: str | None, sync_close: bool, tests: str, pytest_args: tuple[str, ...]) -> None:
    """Run the visual suite with pytest."""
    args = [tests, "-m", "e2e"]
    if config:
        if not Path(config).exists():
            console.print(f"[red]Config file not found: {config}[/red]")
            sys.exit(1)
        args += ["--visual-config", config]
    if sync_close:
        args += ["--visual-close-mode", "sync"]
    args += list(pytest_args)

    logging.getLogger(__name__).debug("pytest %s", " ".join(args))
    sys.exit(pytest.main(args))


if __name__ == "__main__":
    cli()
