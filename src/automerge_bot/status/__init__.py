"""Status - Evaluates required and optional checks of a pull request."""

from automerge_bot.status.evaluator import reduce_states, required_check_states
from automerge_bot.status.service import StatusService

__all__ = [
    "StatusService",
    "reduce_states",
    "required_check_states",
]
