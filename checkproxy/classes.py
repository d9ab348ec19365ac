import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from checkproxy.constants import EXIT_ALL_PASSED, EXIT_FAILED, EXIT_PENDING

# Ordering key for signals that never started
EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_github_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a GitHub ISO-8601 timestamp, returning None for null or garbage."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_elapsed(started_at: Optional[datetime], completed_at: Optional[datetime]) -> str:
    """Format elapsed time Go-style (45s, 1m30s, 1h0m5s); empty when unknown or non-positive."""
    if started_at is None or completed_at is None:
        return ""
    elapsed = (completed_at - started_at).total_seconds()
    if elapsed <= 0:
        return ""
    # Halves round away from zero
    seconds = math.floor(elapsed + 0.5)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    return f"{secs}s"


class Bucket(Enum):
    """Canonical outcome category shared by check runs and commit statuses"""

    PASS = "pass"
    FAIL = "fail"
    PENDING = "pending"
    SKIPPING = "skipping"
    CANCEL = "cancel"


class Outcome(Enum):
    """Final result of a checks run"""

    ALL_PASSED = "all_passed"
    FAILED = "failed"
    PENDING = "pending"

    @property
    def exit_code(self) -> int:
        return {
            Outcome.ALL_PASSED: EXIT_ALL_PASSED,
            Outcome.FAILED: EXIT_FAILED,
            Outcome.PENDING: EXIT_PENDING,
        }[self]


@dataclass(frozen=True)
class PullRequestRef:
    """The pull request whose head commit is being checked"""

    number: int
    head_sha: str
    head_ref: str

    @classmethod
    def from_github_response(cls, pr_data: Dict[str, Any]) -> 'PullRequestRef':
        """Create PullRequestRef from a GitHub pulls API object"""
        head = pr_data.get("head") or {}
        return cls(
            number=int(pr_data["number"]),
            head_sha=head.get("sha") or "",
            head_ref=head.get("ref") or "",
        )


@dataclass
class CheckRun:
    """One entry from the check-runs API"""

    name: str
    status: str
    conclusion: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    html_url: str = ""
    title: str = ""

    @classmethod
    def from_github_response(cls, run: Dict[str, Any]) -> 'CheckRun':
        """Create CheckRun from GitHub API response"""
        output = run.get("output") or {}
        return cls(
            name=run.get("name") or "",
            status=run.get("status") or "",
            conclusion=run.get("conclusion") or "",
            started_at=parse_github_timestamp(run.get("started_at")),
            completed_at=parse_github_timestamp(run.get("completed_at")),
            html_url=run.get("html_url") or "",
            title=output.get("title") or "",
        )


@dataclass
class CommitStatus:
    """One entry from the combined commit status API"""

    context: str
    state: str
    description: str = ""
    target_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_github_response(cls, status: Dict[str, Any]) -> 'CommitStatus':
        """Create CommitStatus from GitHub API response"""
        return cls(
            context=status.get("context") or "",
            state=status.get("state") or "",
            description=status.get("description") or "",
            target_url=status.get("target_url") or "",
            created_at=parse_github_timestamp(status.get("created_at")),
            updated_at=parse_github_timestamp(status.get("updated_at")),
        )


@dataclass(frozen=True)
class UnifiedCheck:
    """A check run or commit status folded into the shared bucket model"""

    name: str
    state: str
    bucket: Bucket
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    description: str = ""
    link: str = ""

    @property
    def elapsed(self) -> str:
        return format_elapsed(self.started_at, self.completed_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "state": self.state,
            "bucket": self.bucket.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "elapsed": self.elapsed,
            "description": self.description,
            "link": self.link,
        }


@dataclass
class CheckCounts:
    """Per-bucket tally for one fetch cycle"""

    passed: int = 0
    failed: int = 0
    pending: int = 0
    skipping: int = 0
    cancelled: int = 0

    def increment(self, bucket: Bucket) -> None:
        if bucket is Bucket.PASS:
            self.passed += 1
        elif bucket is Bucket.FAIL:
            self.failed += 1
        elif bucket is Bucket.PENDING:
            self.pending += 1
        elif bucket is Bucket.SKIPPING:
            self.skipping += 1
        elif bucket is Bucket.CANCEL:
            self.cancelled += 1

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.pending + self.skipping + self.cancelled

    def as_dict(self) -> Dict[str, int]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "pending": self.pending,
            "skipping": self.skipping,
            "cancelled": self.cancelled,
        }
