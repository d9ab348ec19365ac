# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Pull request commands.

Commands:
    gh-checkproxy pr checks [<number>|<url>|<branch>]
"""

import json
import logging
from functools import partial
from typing import List, Optional, Tuple

import click

from checkproxy.checks import (
    ChecksWatcher,
    WatchResult,
    aggregate_checks,
    resolve_pull_request,
    sort_checks,
    validate_watch_options,
)
from checkproxy.classes import CheckCounts, PullRequestRef, UnifiedCheck
from checkproxy.constants import DEFAULT_WATCH_INTERVAL_SECONDS, EXIT_FAILED, HTTP_TIMEOUT_SECONDS
from checkproxy.errors import CheckProxyError
from checkproxy.utils.github_api_tools import fetch_commit_signals

from .config_commands import load_config
from .helpers import DURATION, ClientSettings, console, print_error, resolve_settings
from .tables import print_plain, print_report

logger = logging.getLogger(__name__)


@click.group(name='pr')
def pr():
    """Pull request commands.

    \b
    Commands:
        checks    Show CI status for a pull request
    """
    pass


def build_payload(pr_ref: PullRequestRef, result: WatchResult) -> dict:
    """Stable JSON document for --json output."""
    return {
        'pull_request': {
            'number': pr_ref.number,
            'head_sha': pr_ref.head_sha,
            'head_ref': pr_ref.head_ref,
        },
        'outcome': result.outcome.value,
        'exit_code': result.outcome.exit_code,
        'counts': result.counts.as_dict(),
        'checks': [check.to_dict() for check in sort_checks(result.checks)],
    }


def render(result: WatchResult) -> None:
    if console.is_terminal:
        print_report(console, result.checks, result.counts)
    else:
        print_plain(result.checks)


@pr.command('checks')
@click.argument('selector', required=False, default='')
@click.option('--repo', default=None, help='Repository in owner/repo format (auto-detected from git remote)')
@click.option('--proxy-url', default=None, help='Proxy server base URL (or $GH_CHECKPROXY_URL)')
@click.option('--token', default=None, help='Fine-grained GitHub token (or $GH_TOKEN / $GITHUB_TOKEN)')
@click.option('--watch', is_flag=True, help='Watch checks until they finish')
@click.option('--fail-fast', is_flag=True, help='Exit on first failure in watch mode (requires --watch)')
@click.option('--interval', type=DURATION, default=None, help='Refresh interval in watch mode [default: 10s]')
@click.option(
    '--timeout',
    type=DURATION,
    default=HTTP_TIMEOUT_SECONDS,
    show_default=True,
    help='Timeout for each HTTP request',
)
@click.option('--json', 'as_json', is_flag=True, help='Output results as JSON')
@click.pass_context
def pr_checks(
    ctx,
    selector: str,
    repo: Optional[str],
    proxy_url: Optional[str],
    token: Optional[str],
    watch: bool,
    fail_fast: bool,
    interval: Optional[float],
    timeout: float,
    as_json: bool,
):
    """Show CI status for a pull request.

    Combines check runs and commit statuses for the PR head commit. SELECTOR
    is a PR number (42 or #42), a PR URL, or a branch name; the current
    branch is used when omitted.

    \b
    Exit codes:
        0   All checks passed
        1   Some checks failed (or an error occurred)
        8   Checks still pending

    \b
    Examples:
        gh-checkproxy pr checks
        gh-checkproxy pr checks 42 --repo octo/hello
        gh-checkproxy pr checks feature/login --watch --fail-fast --interval 30s
    """
    try:
        validate_watch_options(watch, fail_fast, DEFAULT_WATCH_INTERVAL_SECONDS if interval is None else interval)
        settings = resolve_settings(repo, proxy_url, token, interval, load_config(strict=True))
        # Interval may come from the config file
        validate_watch_options(watch, fail_fast, settings.interval)

        pr_ref = resolve_pull_request(selector, settings.owner, settings.repo, settings.token, timeout=timeout)
        logger.info(
            f'Checking PR #{pr_ref.number} ({pr_ref.head_ref} @ {pr_ref.head_sha[:8]}) in {settings.full_name}'
        )

        watcher = ChecksWatcher(
            fetch_cycle=partial(fetch_cycle, settings, pr_ref.head_sha, timeout),
            watch=watch,
            fail_fast=fail_fast,
            interval=settings.interval,
            on_cycle=None if as_json else partial(redraw, interval=settings.interval),
        )
        result = watcher.run()
    except CheckProxyError as e:
        print_error(str(e))
        ctx.exit(EXIT_FAILED)

    if as_json:
        click.echo(json.dumps(build_payload(pr_ref, result), indent=2))
    else:
        if watch and console.is_terminal:
            console.clear()
        render(result)

    ctx.exit(result.outcome.exit_code)


def fetch_cycle(settings: ClientSettings, sha: str, timeout: float) -> Tuple[List[UnifiedCheck], CheckCounts]:
    """One full fetch and aggregate pass for the PR head commit."""
    runs, statuses = fetch_commit_signals(
        settings.proxy_url,
        settings.owner,
        settings.repo,
        sha,
        settings.token,
        timeout=timeout,
    )
    return aggregate_checks(runs, statuses)


def redraw(result: WatchResult, interval: float) -> None:
    """Show an intermediate cycle while watching; terminals only."""
    if not console.is_terminal:
        return
    console.clear()
    console.print(f'Refreshing checks status every {interval:g}s. Press Ctrl+C to quit.\n')
    render(result)
