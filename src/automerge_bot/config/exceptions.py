"""Custom exceptions for configuration loading."""


class ConfigError(Exception):
    """Configuration is missing or invalid; the bot cannot start."""
