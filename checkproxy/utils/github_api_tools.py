# Entrius 2025
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from checkproxy.classes import CheckRun, CommitStatus, PullRequestRef
from checkproxy.constants import (
    BASE_GITHUB_API_URL,
    BRANCH_LOOKUP_PER_PAGE,
    CHECK_RUNS_PER_PAGE,
    GITHUB_ACCEPT,
    GITHUB_API_VERSION,
    HTTP_TIMEOUT_SECONDS,
    RATE_LIMIT_MIN_REMAINING,
    USER_AGENT,
)
from checkproxy.errors import PullRequestNotFound, TransportError

logger = logging.getLogger(__name__)


@dataclass
class RateLimitInfo:
    """Represents GitHub API rate limit information extracted from response headers."""

    limit: int  # Maximum requests allowed per hour
    remaining: int  # Requests remaining in current window
    reset_timestamp: int  # Unix timestamp when the rate limit resets

    @property
    def seconds_until_reset(self) -> int:
        """Calculate seconds until rate limit resets."""
        current_time = int(time.time())
        return max(0, self.reset_timestamp - current_time)


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    """
    Parse GitHub API rate limit information from response headers.

    The proxy forwards the upstream X-RateLimit-* headers unchanged.

    Args:
        response: The HTTP response from GitHub API or the proxy

    Returns:
        RateLimitInfo object if headers are present, None otherwise
    """
    headers = response.headers

    try:
        limit = int(headers.get('X-RateLimit-Limit', 0))
        remaining = int(headers.get('X-RateLimit-Remaining', 0))
        reset_timestamp = int(headers.get('X-RateLimit-Reset', 0))

        if limit == 0 and reset_timestamp == 0:
            return None

        return RateLimitInfo(limit=limit, remaining=remaining, reset_timestamp=reset_timestamp)
    except (ValueError, TypeError) as e:
        logger.debug(f"Could not parse rate limit headers: {e}")
        return None


def check_preemptive_rate_limit(response: requests.Response) -> None:
    """
    Log a warning when the rate limit is close to exhausted.

    Args:
        response: The HTTP response from GitHub API or the proxy
    """
    rate_limit_info = parse_rate_limit_headers(response)

    if rate_limit_info:
        if rate_limit_info.remaining <= RATE_LIMIT_MIN_REMAINING:
            logger.warning(
                f"Approaching GitHub API rate limit: {rate_limit_info.remaining} requests remaining, "
                f"resets in {rate_limit_info.seconds_until_reset}s"
            )
        elif rate_limit_info.remaining <= rate_limit_info.limit * 0.1:
            logger.info(f"GitHub API rate limit status: {rate_limit_info.remaining}/{rate_limit_info.limit} remaining")


def make_headers(token: str) -> Dict[str, str]:
    """Build standard GitHub HTTP headers for a bearer token.

    Args:
        token (str): Github token
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    return {
        "Authorization": f"Bearer {token}",
        "Accept": GITHUB_ACCEPT,
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": USER_AGENT,
    }


def _get(url: str, token: str, timeout: float, params: Optional[Dict[str, Any]] = None) -> requests.Response:
    try:
        return requests.get(url, headers=make_headers(token), params=params, timeout=timeout)
    except requests.Timeout as e:
        raise TransportError(f"request to {url} timed out after {timeout}s") from e
    except requests.RequestException as e:
        raise TransportError(f"request to {url} failed: {e}") from e


def _decode(response: requests.Response, url: str) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise TransportError(f"could not decode response from {url}: {e}") from e


def _to_pull_request(pr_data: Any, url: str) -> PullRequestRef:
    try:
        return PullRequestRef.from_github_response(pr_data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TransportError(f"malformed pull request object from {url}: {e!r}") from e


def _list_field(data: Any, key: str, url: str) -> List[Any]:
    """Return ``data[key]`` as a list; a missing or null key is an empty list."""
    if not isinstance(data, dict):
        raise TransportError(f"unexpected response shape from {url}: expected an object")
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise TransportError(f"unexpected response shape from {url}: '{key}' is not a list")
    return items


def _to_check_runs(items: List[Any], url: str) -> List[CheckRun]:
    try:
        return [CheckRun.from_github_response(run) for run in items]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TransportError(f"malformed check run object from {url}: {e!r}") from e


def _to_commit_statuses(items: List[Any], url: str) -> List[CommitStatus]:
    try:
        return [CommitStatus.from_github_response(status) for status in items]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TransportError(f"malformed commit status object from {url}: {e!r}") from e


def get_json(
    url: str,
    token: str,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> Tuple[Any, requests.Response]:
    """Issue one GET and return the decoded body with the raw response.

    Raises:
        TransportError: on timeouts, connection errors, non-200 status or undecodable JSON.
    """
    response = _get(url, token, timeout, params)
    if response.status_code != 200:
        raise TransportError(f"GitHub API returned {response.status_code} for {url}")
    check_preemptive_rate_limit(response)
    return _decode(response, url), response


def fetch_pull_request(
    owner: str,
    repo: str,
    number: int,
    token: str,
    api_url: str = BASE_GITHUB_API_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> PullRequestRef:
    '''
    Fetch a single pull request by number.

    Args:
        owner (str): Repository owner
        repo (str): Repository name
        number (int): PR number
        token (str): Github token
    Returns:
        PullRequestRef: head commit and branch of the PR
    Raises:
        PullRequestNotFound: when GitHub reports 404 for the PR
    '''
    url = f"{api_url}/repos/{owner}/{repo}/pulls/{number}"
    response = _get(url, token, timeout)
    if response.status_code == 404:
        raise PullRequestNotFound(
            f"pull request #{number} not found in {owner}/{repo} (verify the PR number and that the "
            "token has Metadata: read access to the repository)"
        )
    if response.status_code != 200:
        raise TransportError(f"GitHub API returned {response.status_code} for {url}")
    check_preemptive_rate_limit(response)
    return _to_pull_request(_decode(response, url), url)


def find_open_pull_requests(
    owner: str,
    repo: str,
    branch: str,
    token: str,
    api_url: str = BASE_GITHUB_API_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> List[PullRequestRef]:
    """List open pull requests whose head is owner:branch, in GitHub's order."""
    url = f"{api_url}/repos/{owner}/{repo}/pulls"
    # requests URL-encodes owner and branch in the head filter
    params = {"head": f"{owner}:{branch}", "state": "open", "per_page": BRANCH_LOOKUP_PER_PAGE}
    data, _ = get_json(url, token, params=params, timeout=timeout)
    if not isinstance(data, list):
        raise TransportError(f"unexpected response shape from {url}: expected a list")
    return [_to_pull_request(pr, url) for pr in data]


def fetch_check_runs(
    proxy_url: str, owner: str, repo: str, sha: str, token: str, timeout: float = HTTP_TIMEOUT_SECONDS
) -> List[CheckRun]:
    """Fetch every check run for a commit, following Link rel="next" until absent.

    Any failing or malformed page fails the whole fetch; no partial list is returned.
    """
    next_url: Optional[str] = f"{proxy_url}/repos/{owner}/{repo}/commits/{sha}/check-runs"
    params: Optional[Dict[str, Any]] = {"per_page": CHECK_RUNS_PER_PAGE}
    runs: List[CheckRun] = []
    page = 0

    while next_url:
        page += 1
        data, response = get_json(next_url, token, params=params, timeout=timeout)
        page_runs = _to_check_runs(_list_field(data, "check_runs", next_url), next_url)
        runs.extend(page_runs)
        logger.debug(f"check-runs page {page}: {len(page_runs)} runs")

        # The next link already carries the query string
        next_url = response.links.get("next", {}).get("url")
        params = None

    return runs


def fetch_combined_status(
    proxy_url: str, owner: str, repo: str, sha: str, token: str, timeout: float = HTTP_TIMEOUT_SECONDS
) -> List[CommitStatus]:
    """Fetch the combined status for a commit; one request, no pagination."""
    url = f"{proxy_url}/repos/{owner}/{repo}/commits/{sha}/status"
    data, _ = get_json(url, token, timeout=timeout)
    return _to_commit_statuses(_list_field(data, "statuses", url), url)


def fetch_commit_signals(
    proxy_url: str, owner: str, repo: str, sha: str, token: str, timeout: float = HTTP_TIMEOUT_SECONDS
) -> Tuple[List[CheckRun], List[CommitStatus]]:
    """Fetch both signal sources for a commit.

    Raises:
        TransportError: naming which of the two calls failed.
    """
    try:
        runs = fetch_check_runs(proxy_url, owner, repo, sha, token, timeout=timeout)
    except TransportError as e:
        raise TransportError(f"fetching check runs: {e}") from e

    try:
        statuses = fetch_combined_status(proxy_url, owner, repo, sha, token, timeout=timeout)
    except TransportError as e:
        raise TransportError(f"fetching commit status: {e}") from e

    logger.debug(f"Fetched {len(runs)} check runs and {len(statuses)} statuses for {sha[:8]}")
    return runs, statuses
