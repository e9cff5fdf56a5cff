"""Build AutomergeConfig from environment variables and the repo list file."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from automerge_bot.config.exceptions import ConfigError
from automerge_bot.config.models import (
    DEFAULT_INTERVAL,
    DEFAULT_LABEL,
    DEFAULT_PRIORITY_LABEL,
    AutomergeConfig,
    MergeType,
)

logger = logging.getLogger("automerge_bot.config")

DEFAULT_CONFIG_PATH = "config.yml"

_TRUTHY = {"1", "true", "yes", "on"}


def _read_repo_file(path: Path) -> list[str]:
    """Read the `repos:` list from a YAML file."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    repos = data.get("repos") or []
    if not isinstance(repos, list) or not all(isinstance(r, str) for r in repos):
        raise ConfigError(f"'repos' in {path} must be a list of URLs")
    return repos


def _parse_interval(raw: str) -> float:
    try:
        interval = float(raw)
    except ValueError:
        raise ConfigError(f"AUTOMERGE_INTERVAL must be a number, got '{raw}'") from None
    if interval <= 0:
        raise ConfigError("AUTOMERGE_INTERVAL must be positive")
    return interval


def load_config(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> AutomergeConfig:
    """Load configuration from the environment and the repo list file.

    Environment variables:
        GITHUB_USER_TOKEN: bearer credential (required)
        AUTOMERGE_LABEL: automerge label name (default "Automerge")
        PRIORITY_LABEL: priority label name (default "Priority Automerge")
        MERGE_TYPE: merge, squash or rebase (default squash)
        OPTIONAL_STATUSES: ignore non-required checks when true
        AUTOMERGE_INTERVAL: seconds between cycles (default 60)
        AUTOMERGE_CONFIG: path of the YAML repo list (default config.yml)
        AUTOMERGE_REPOS: comma-separated repo URLs, replaces the file's list

    Args:
        config_path: YAML file path; takes precedence over AUTOMERGE_CONFIG.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        The loaded configuration.

    Raises:
        ConfigError: If the credential or repositories are missing, or a value is invalid.
    """
    env = os.environ if environ is None else environ

    token = env.get("GITHUB_USER_TOKEN", "").strip()
    if not token:
        raise ConfigError("Missing GITHUB_USER_TOKEN env variable")

    merge_type = MergeType.parse(env.get("MERGE_TYPE", MergeType.SQUASH.value))

    interval = DEFAULT_INTERVAL
    if env.get("AUTOMERGE_INTERVAL"):
        interval = _parse_interval(env["AUTOMERGE_INTERVAL"])

    env_repos = env.get("AUTOMERGE_REPOS", "")
    if env_repos.strip():
        repos = [r.strip() for r in env_repos.split(",") if r.strip()]
    else:
        path = Path(config_path or env.get("AUTOMERGE_CONFIG") or DEFAULT_CONFIG_PATH)
        repos = _read_repo_file(path)
        logger.info("Loaded %d repositories from %s", len(repos), path)

    if not repos:
        raise ConfigError("No repositories configured")

    return AutomergeConfig(
        token=token,
        repos=tuple(r.rstrip("/") for r in repos),
        label=env.get("AUTOMERGE_LABEL") or DEFAULT_LABEL,
        priority_label=env.get("PRIORITY_LABEL") or DEFAULT_PRIORITY_LABEL,
        merge_type=merge_type,
        optional_statuses=env.get("OPTIONAL_STATUSES", "").strip().lower() in _TRUTHY,
        interval=interval,
    )
