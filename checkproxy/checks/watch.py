# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Polling loop for PR checks.

The loop is a small state machine:

    FETCHING -> EVALUATING -> WAITING -> FETCHING ...
                           -> DONE

The first cycle always runs, so a single pass is just FETCHING, EVALUATING,
DONE. With watching enabled the loop stops once nothing is pending, or early
when fail-fast is set and a failure is visible. WAITING blocks the process for
the configured interval.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from checkproxy.classes import CheckCounts, Outcome, UnifiedCheck
from checkproxy.constants import DEFAULT_WATCH_INTERVAL_SECONDS
from checkproxy.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Returns the unified checks and counts for one full cycle, or raises
CycleFetcher = Callable[[], Tuple[List[UnifiedCheck], CheckCounts]]


class WatchState(Enum):
    FETCHING = "fetching"
    EVALUATING = "evaluating"
    WAITING = "waiting"
    DONE = "done"


@dataclass
class WatchResult:
    """Output of the last completed cycle"""

    checks: List[UnifiedCheck] = field(default_factory=list)
    counts: CheckCounts = field(default_factory=CheckCounts)
    cycles: int = 0
    outcome: Outcome = Outcome.ALL_PASSED


def validate_watch_options(watch: bool, fail_fast: bool, interval: float) -> None:
    """Reject option combinations before any network activity.

    Raises:
        ConfigurationError: fail-fast without watch, or a non-positive interval.
    """
    if fail_fast and not watch:
        raise ConfigurationError('--fail-fast requires --watch')
    if watch and interval <= 0:
        raise ConfigurationError(f'interval must be positive (got {interval})')


def decide_outcome(counts: CheckCounts) -> Outcome:
    """Failures dominate pending, pending dominates success."""
    if counts.failed > 0:
        return Outcome.FAILED
    if counts.pending > 0:
        return Outcome.PENDING
    return Outcome.ALL_PASSED


class ChecksWatcher:
    """Run fetch cycles until the checks converge or fail-fast triggers.

    Args:
        fetch_cycle: callable producing (checks, counts) for one full cycle.
        watch: keep polling while checks are pending.
        fail_fast: stop polling once any check has failed; requires ``watch``.
        interval: seconds to wait between cycles.
        sleep: blocking sleep, injectable for tests.
        on_cycle: called with each cycle's result that leads to another wait.
    """

    def __init__(
        self,
        fetch_cycle: CycleFetcher,
        watch: bool = False,
        fail_fast: bool = False,
        interval: float = DEFAULT_WATCH_INTERVAL_SECONDS,
        sleep: Optional[Callable[[float], None]] = None,
        on_cycle: Optional[Callable[[WatchResult], None]] = None,
    ):
        validate_watch_options(watch, fail_fast, interval)

        self.fetch_cycle = fetch_cycle
        self.watch = watch
        self.fail_fast = fail_fast
        self.interval = interval
        self.sleep = sleep or time.sleep
        self.on_cycle = on_cycle
        self.state = WatchState.FETCHING

    def _evaluate(self, counts: CheckCounts) -> WatchState:
        if not self.watch:
            return WatchState.DONE
        if counts.pending == 0:
            return WatchState.DONE
        if self.fail_fast and counts.failed > 0:
            logger.info(f'Stopping early: {counts.failed} failed with {counts.pending} still pending')
            return WatchState.DONE
        return WatchState.WAITING

    def run(self) -> WatchResult:
        """Drive the state machine to DONE and return the final cycle's result.

        Errors from ``fetch_cycle`` propagate; the previous result is never
        partially updated.
        """
        result = WatchResult()
        self.state = WatchState.FETCHING

        while self.state is not WatchState.DONE:
            if self.state is WatchState.FETCHING:
                checks, counts = self.fetch_cycle()
                result = WatchResult(
                    checks=checks,
                    counts=counts,
                    cycles=result.cycles + 1,
                    outcome=decide_outcome(counts),
                )
                logger.debug(f'Cycle {result.cycles}: {counts.as_dict()}')
                self.state = WatchState.EVALUATING

            elif self.state is WatchState.EVALUATING:
                self.state = self._evaluate(result.counts)

            elif self.state is WatchState.WAITING:
                if self.on_cycle is not None:
                    self.on_cycle(result)
                self.sleep(self.interval)
                self.state = WatchState.FETCHING

        return result
