"""Scheduler - Runs every repository's cycle concurrently on an interval."""

from automerge_bot.scheduler.scheduler import Scheduler, build_scheduler

__all__ = [
    "Scheduler",
    "build_scheduler",
]
