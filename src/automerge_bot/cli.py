"""
automerge-bot CLI - Main entry point

Usage:
    automerge-bot run            - Poll configured repositories forever
    automerge-bot run --once     - Run a single cycle (for external schedulers)
    automerge-bot serve          - Poll in the background behind a status API
"""

from __future__ import annotations

import asyncio
import dataclasses

import click

from automerge_bot import __version__
from automerge_bot.config import AutomergeConfig, ConfigError, load_config
from automerge_bot.logging import setup_logging
from automerge_bot.scheduler import build_scheduler


def _load(config_path: str | None, interval: float | None) -> AutomergeConfig:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if interval is not None:
        config = dataclasses.replace(config, interval=interval)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="automerge-bot")
@click.option(
    "--log-level",
    default=None,
    help="DEBUG, INFO, WARNING or ERROR (default: AUTOMERGE_LOG_LEVEL or INFO)",
)
@click.option("--log-file/--no-log-file", default=True, help="Also write the rotating log file")
def cli(log_level: str | None, log_file: bool) -> None:
    """Merge pull requests labeled for automerge once their checks pass."""
    setup_logging(level=log_level, file=log_file)


@cli.command()
@click.option("--once", is_flag=True, help="Run a single cycle and exit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML file listing repositories (default: AUTOMERGE_CONFIG or config.yml)",
)
@click.option("--interval", type=click.FloatRange(min=1), default=None, help="Seconds between cycles")
def run(once: bool, config_path: str | None, interval: float | None) -> None:
    """Poll the configured repositories."""
    config = _load(config_path, interval)
    scheduler = build_scheduler(config)
    try:
        if once:
            results = asyncio.run(scheduler.run_once())
            for result in results:
                pull = f"#{result.pull_number}" if result.pull_number is not None else "-"
                click.echo(f"{result.repo}\t{pull}\t{result.action.value}")
        else:
            asyncio.run(scheduler.run_forever())
    except KeyboardInterrupt:
        click.echo("Interrupted, stopping")
    finally:
        scheduler.close()


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML file listing repositories (default: AUTOMERGE_CONFIG or config.yml)",
)
def serve(host: str, port: int, config_path: str | None) -> None:
    """Poll in the background and expose the status API."""
    import uvicorn

    from automerge_bot.api import create_app

    config = _load(config_path, None)
    app = create_app(build_scheduler(config))
    uvicorn.run(app, host=host, port=port, log_config=None)


def main() -> None:
    """Console script entry point."""
    cli()
