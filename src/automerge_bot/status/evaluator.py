"""Reduction of check-run and status results into a single verdict."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from automerge_bot.github.models import CheckRunSummary, CheckState, StatusSummary


def reduce_states(states: Iterable[CheckState]) -> CheckState:
    """Reduce many states to one.

    Any failure wins; otherwise everything must have succeeded (an empty
    collection counts as success); anything else is still pending.
    """
    states = list(states)
    if CheckState.FAILURE in states:
        return CheckState.FAILURE
    if all(state == CheckState.SUCCESS for state in states):
        return CheckState.SUCCESS
    return CheckState.PENDING


def required_check_states(
    required: Iterable[str],
    check_runs: CheckRunSummary,
    statuses: StatusSummary,
) -> dict[str, CheckState]:
    """Map each required context name to its current state.

    A check-run with the name is consulted first, then a commit status with
    that context. Names reported by neither are PENDING.
    """
    runs: Mapping[str, CheckState] = check_runs.states()
    items: Mapping[str, CheckState] = statuses.states()
    result = {}
    for name in required:
        if name in runs:
            result[name] = runs[name]
        elif name in items:
            result[name] = items[name]
        else:
            result[name] = CheckState.PENDING
    return result
