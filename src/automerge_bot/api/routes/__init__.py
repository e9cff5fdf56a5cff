"""API route modules."""

from automerge_bot.api.routes import health, repos, sync

__all__ = ["health", "repos", "sync"]
