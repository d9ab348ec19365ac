# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Exceptions raised by the check resolution and polling code.

The CLI is the only layer that turns these into messages and exit codes.
"""


class CheckProxyError(Exception):
    """Base exception for gh-checkproxy errors."""

    pass


class ConfigurationError(CheckProxyError):
    """Raised for invalid options or settings, before any network call."""

    pass


class ResolutionError(CheckProxyError):
    """Raised when a selector cannot be turned into a pull request."""

    pass


class NoBranchDetected(ResolutionError):
    """Raised when no selector is given and the local branch is unknown."""

    pass


class PullRequestNotFound(ResolutionError):
    """Raised when a direct PR number lookup returns 404."""

    pass


class NoOpenPullRequest(ResolutionError):
    """Raised when a branch has no open pull request."""

    pass


class MalformedSelector(ResolutionError):
    """Raised for selectors that are neither a number, a PR URL nor a branch name."""

    pass


class TransportError(CheckProxyError):
    """Raised for non-success responses, undecodable bodies and timeouts."""

    pass
