# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
PR check resolution, aggregation and polling.

    resolve_pull_request    selector -> PullRequestRef
    aggregate_checks        raw signals -> unified checks + counts
    ChecksWatcher           fetch/evaluate/wait loop
    decide_outcome          counts -> Outcome
"""

from .aggregate import aggregate_checks, sort_checks
from .selector import resolve_pull_request
from .watch import ChecksWatcher, WatchResult, WatchState, decide_outcome, validate_watch_options

__all__ = [
    'aggregate_checks',
    'sort_checks',
    'resolve_pull_request',
    'ChecksWatcher',
    'WatchResult',
    'WatchState',
    'decide_outcome',
    'validate_watch_options',
]
