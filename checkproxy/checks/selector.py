# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Resolve a user supplied PR selector to a pull request.

Accepted selectors:
    (empty)                                  current local branch
    42, #42                                  PR number
    https://github.com/o/r/pull/42/files     PR URL
    feature/login                            branch name
"""

import logging
import re
from typing import Callable, Optional

from checkproxy.classes import PullRequestRef
from checkproxy.constants import BASE_GITHUB_API_URL, HTTP_TIMEOUT_SECONDS
from checkproxy.errors import MalformedSelector, NoBranchDetected, NoOpenPullRequest
from checkproxy.utils.git_tools import get_current_branch
from checkproxy.utils.github_api_tools import fetch_pull_request, find_open_pull_requests

logger = logging.getLogger(__name__)

PR_NUMBER_PATTERN = re.compile(r'^#?(\d+)$')
PR_URL_PATTERN = re.compile(r'/pull/(\d+)')
URL_PREFIX_PATTERN = re.compile(r'^https?://', re.IGNORECASE)


def parse_pr_number(selector: str) -> Optional[int]:
    """Return the PR number named by a numeric or URL selector, else None.

    Raises:
        MalformedSelector: for an http(s) URL that does not contain /pull/<number>.
    """
    match = PR_NUMBER_PATTERN.match(selector)
    if match:
        return int(match.group(1))

    if URL_PREFIX_PATTERN.match(selector):
        match = PR_URL_PATTERN.search(selector)
        if not match:
            raise MalformedSelector(f"'{selector}' is not a pull request URL (expected .../pull/<number>)")
        return int(match.group(1))

    return None


def resolve_pull_request(
    selector: str,
    owner: str,
    repo: str,
    token: str,
    api_url: str = BASE_GITHUB_API_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
    branch_detector: Callable[[], Optional[str]] = get_current_branch,
) -> PullRequestRef:
    """Resolve a selector to exactly one pull request in owner/repo.

    Raises:
        NoBranchDetected: empty selector and the current branch is unknown.
        PullRequestNotFound: the numbered PR does not exist or is not visible.
        NoOpenPullRequest: the branch has no open PR.
        MalformedSelector: the selector cannot name a PR or a branch.
        TransportError: GitHub could not be queried.
    """
    selector = (selector or '').strip()

    if not selector:
        branch = branch_detector()
        if not branch:
            raise NoBranchDetected('no PR selector provided and could not detect the current branch')
        logger.debug(f"No selector given, using current branch '{branch}'")
        return find_pull_request_by_branch(owner, repo, branch, token, api_url=api_url, timeout=timeout)

    number = parse_pr_number(selector)
    if number is not None:
        logger.debug(f"Resolving PR #{number} in {owner}/{repo}")
        return fetch_pull_request(owner, repo, number, token, api_url=api_url, timeout=timeout)

    if any(ch.isspace() for ch in selector):
        raise MalformedSelector(f"'{selector}' is not a PR number, PR URL or branch name")

    return find_pull_request_by_branch(owner, repo, selector, token, api_url=api_url, timeout=timeout)


def find_pull_request_by_branch(
    owner: str,
    repo: str,
    branch: str,
    token: str,
    api_url: str = BASE_GITHUB_API_URL,
    timeout: float = HTTP_TIMEOUT_SECONDS,
) -> PullRequestRef:
    """Return the first open PR whose head is owner:branch, in GitHub's order."""
    prs = find_open_pull_requests(owner, repo, branch, token, api_url=api_url, timeout=timeout)
    if not prs:
        raise NoOpenPullRequest(f"no open pull request found for branch '{branch}' in {owner}/{repo}")
    if len(prs) > 1:
        logger.debug(f"{len(prs)} open PRs for branch '{branch}', using #{prs[0].number}")
    return prs[0]
