# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Fold check runs and commit statuses into one deduplicated list of UnifiedCheck.

Check runs are keyed by name and the most recently started run wins. Commit
statuses are keyed by context and the first one in upstream order wins; the
combined status endpoint already reports the latest state per context.
"""

from typing import Dict, Iterable, List, Tuple

from checkproxy.classes import EARLIEST, Bucket, CheckCounts, CheckRun, CommitStatus, UnifiedCheck

# Check run conclusion (or status, while not completed) -> bucket
CHECK_RUN_BUCKETS: Dict[str, Bucket] = {
    'success': Bucket.PASS,
    'skipped': Bucket.SKIPPING,
    'neutral': Bucket.SKIPPING,
    'failure': Bucket.FAIL,
    'error': Bucket.FAIL,
    'timed_out': Bucket.FAIL,
    'action_required': Bucket.FAIL,
    'cancelled': Bucket.CANCEL,
}

# Commit status state -> bucket
COMMIT_STATUS_BUCKETS: Dict[str, Bucket] = {
    'success': Bucket.PASS,
    'failure': Bucket.FAIL,
    'error': Bucket.FAIL,
}

# Display order: failures, then pending, then everything else
BUCKET_SORT_RANK: Dict[Bucket, int] = {
    Bucket.FAIL: 0,
    Bucket.PENDING: 1,
}
DEFAULT_SORT_RANK = 2


def check_run_state(run: CheckRun) -> str:
    """Conclusion once completed, lifecycle status before that."""
    if run.status.lower() == 'completed':
        return run.conclusion
    return run.status


def bucket_for_check_run(run: CheckRun) -> Bucket:
    # Unknown and in-flight states (queued, in_progress, waiting, ...) count as pending
    return CHECK_RUN_BUCKETS.get(check_run_state(run).lower(), Bucket.PENDING)


def bucket_for_commit_status(status: CommitStatus) -> Bucket:
    return COMMIT_STATUS_BUCKETS.get(status.state.lower(), Bucket.PENDING)


def check_from_run(run: CheckRun) -> UnifiedCheck:
    return UnifiedCheck(
        name=run.name,
        state=check_run_state(run).upper(),
        bucket=bucket_for_check_run(run),
        started_at=run.started_at,
        completed_at=run.completed_at,
        description=run.title,
        link=run.html_url,
    )


def check_from_status(status: CommitStatus) -> UnifiedCheck:
    return UnifiedCheck(
        name=status.context,
        state=status.state.upper(),
        bucket=bucket_for_commit_status(status),
        started_at=status.created_at,
        completed_at=status.updated_at,
        description=status.description,
        link=status.target_url,
    )


def latest_check_runs(runs: Iterable[CheckRun]) -> List[CheckRun]:
    """Keep the most recently started run per name.

    Runs are ordered by start time, newest first, before the first occurrence
    of each name is kept. Runs that never started order last; equal start
    times keep upstream order.
    """
    ordered = sorted(runs, key=lambda run: run.started_at or EARLIEST, reverse=True)
    seen = set()
    latest = []
    for run in ordered:
        if run.name in seen:
            continue
        seen.add(run.name)
        latest.append(run)
    return latest


def unique_statuses(statuses: Iterable[CommitStatus]) -> List[CommitStatus]:
    """Keep the first status per context, in upstream order."""
    seen = set()
    unique = []
    for status in statuses:
        if status.context in seen:
            continue
        seen.add(status.context)
        unique.append(status)
    return unique


def aggregate_checks(
    runs: Iterable[CheckRun],
    statuses: Iterable[CommitStatus],
) -> Tuple[List[UnifiedCheck], CheckCounts]:
    """Build the unified check list and its per-bucket counts from scratch.

    Check runs come first, followed by commit statuses. Every produced check
    increments exactly one bucket, so ``counts.total == len(checks)``.
    """
    checks: List[UnifiedCheck] = []
    counts = CheckCounts()

    for run in latest_check_runs(runs):
        check = check_from_run(run)
        counts.increment(check.bucket)
        checks.append(check)

    for status in unique_statuses(statuses):
        check = check_from_status(status)
        counts.increment(check.bucket)
        checks.append(check)

    return checks, counts


def check_sort_key(check: UnifiedCheck) -> Tuple[int, str, str]:
    return BUCKET_SORT_RANK.get(check.bucket, DEFAULT_SORT_RANK), check.name, check.link


def sort_checks(checks: Iterable[UnifiedCheck]) -> List[UnifiedCheck]:
    """Failures first, then pending, then the rest; ties by name, then link."""
    return sorted(checks, key=check_sort_key)
