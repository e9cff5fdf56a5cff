"""Config - Startup configuration shared by every repository worker."""

from automerge_bot.config.exceptions import ConfigError
from automerge_bot.config.loader import load_config
from automerge_bot.config.models import (
    ACCEPT_HEADER,
    DEFAULT_INTERVAL,
    DEFAULT_LABEL,
    DEFAULT_PRIORITY_LABEL,
    AutomergeConfig,
    MergeType,
)

__all__ = [
    "ACCEPT_HEADER",
    "DEFAULT_INTERVAL",
    "DEFAULT_LABEL",
    "DEFAULT_PRIORITY_LABEL",
    "AutomergeConfig",
    "ConfigError",
    "MergeType",
    "load_config",
]
