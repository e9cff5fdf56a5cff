"""Scheduler - Launches one task per repository each polling interval."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from automerge_bot.automerger import Automerger, CycleResult
from automerge_bot.config import DEFAULT_INTERVAL, AutomergeConfig

logger = logging.getLogger("automerge_bot.scheduler")


class Scheduler:
    """Runs the automergers of all configured repositories.

    Each interval, every repository gets its own worker thread; the cycle
    completes when all of them have finished. API calls within one
    repository stay sequential. Repositories share no mutable state, so a
    slow repository only delays its own next cycle.
    """

    def __init__(self, automergers: Sequence[Automerger], interval: float = DEFAULT_INTERVAL) -> None:
        """Initialize the Scheduler.

        Args:
            automergers: One Automerger per repository.
            interval: Seconds to wait between cycles.
        """
        self.automergers = list(automergers)
        self.interval = interval
        self.last_results: dict[str, CycleResult] = {}
        self.last_run_at: datetime | None = None
        self._lock = asyncio.Lock()

    @property
    def repos(self) -> list[str]:
        """Configured repositories in configuration order."""
        return [automerger.repo for automerger in self.automergers]

    async def run_once(self) -> list[CycleResult]:
        """Run one cycle for every repository and wait for all of them.

        Returns:
            One result per repository, in configuration order.
        """
        async with self._lock:
            logger.info("Starting cycle for %d repositories", len(self.automergers))
            results = await asyncio.gather(
                *(asyncio.to_thread(automerger.run_cycle) for automerger in self.automergers)
            )
            for result in results:
                self.last_results[result.repo] = result
            self.last_run_at = datetime.now(timezone.utc)
            logger.info(
                "Cycle complete: %s",
                ", ".join(f"{r.repo}={r.action.value}" for r in results) or "no repositories",
            )
            return list(results)

    async def run_forever(self, stop_event: asyncio.Event | None = None) -> None:
        """Run cycles until the stop event is set.

        Args:
            stop_event: Event ending the loop; runs indefinitely when omitted.
        """
        stop_event = stop_event or asyncio.Event()
        logger.info("Polling every %.0f seconds", self.interval)
        while not stop_event.is_set():
            await self.run_once()
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
        logger.info("Polling stopped")

    def close(self) -> None:
        """Release every repository's HTTP client."""
        for automerger in self.automergers:
            automerger.close()


def build_scheduler(config: AutomergeConfig) -> Scheduler:
    """Create a Scheduler with one Automerger per configured repository."""
    return Scheduler(
        [Automerger(config, repo) for repo in config.repos],
        interval=config.interval,
    )
