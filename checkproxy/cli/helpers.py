# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Shared helper functions for CLI commands
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape

from checkproxy.constants import DEFAULT_WATCH_INTERVAL_SECONDS, PROXY_URL_ENV_VAR, TOKEN_ENV_VARS
from checkproxy.errors import ConfigurationError
from checkproxy.utils.git_tools import detect_repo
from checkproxy.utils.utils import first_non_empty, parse_duration, parse_repo_name

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print a standardized error message to stderr."""
    err_console.print(f'[red]error:[/red] {escape(message)}')


class DurationParamType(click.ParamType):
    """Click parameter accepting '10s', '1m30s', '500ms' or bare seconds."""

    name = 'duration'

    def convert(self, value, param, ctx):
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            try:
                seconds = parse_duration(value)
            except ValueError:
                self.fail(f'{value!r} is not a valid duration (examples: 10s, 1m30s, 500ms)', param, ctx)
        if seconds <= 0:
            self.fail(f'duration must be positive (got {value!r})', param, ctx)
        return seconds


DURATION = DurationParamType()


@dataclass(frozen=True)
class ClientSettings:
    """Effective settings for one `pr checks` invocation"""

    owner: str
    repo: str
    token: str
    proxy_url: str
    interval: float

    @property
    def full_name(self) -> str:
        return f'{self.owner}/{self.repo}'


def resolve_settings(
    repo: Optional[str],
    proxy_url: Optional[str],
    token: Optional[str],
    interval: Optional[float],
    config: Dict[str, Any],
) -> ClientSettings:
    """Resolve settings with precedence flag > environment > config file > git remote.

    Raises:
        ConfigurationError: on a missing token, proxy URL or repository, or a
            malformed repository or interval.
    """
    resolved_token = first_non_empty(
        token,
        *(os.environ.get(name, '').strip() for name in TOKEN_ENV_VARS),
    )
    if not resolved_token:
        raise ConfigurationError(f'no token: set {" or ".join(TOKEN_ENV_VARS)}, or use --token')

    resolved_proxy = first_non_empty(
        proxy_url,
        os.environ.get(PROXY_URL_ENV_VAR, '').strip(),
        str(config.get('proxy_url') or ''),
    )
    if not resolved_proxy:
        raise ConfigurationError(f'no proxy URL: set {PROXY_URL_ENV_VAR} or use --proxy-url')

    repo_name = first_non_empty(repo, str(config.get('repo') or '')) or detect_repo()
    if not repo_name:
        raise ConfigurationError('could not detect repository: use --repo owner/repo')
    owner, name = parse_repo_name(repo_name)

    if interval is None:
        configured = config.get('interval')
        if configured:
            try:
                interval = parse_duration(str(configured))
            except ValueError as e:
                raise ConfigurationError(f'invalid interval in config: {e}') from e
        else:
            interval = DEFAULT_WATCH_INTERVAL_SECONDS

    return ClientSettings(
        owner=owner,
        repo=name,
        token=resolved_token,
        proxy_url=resolved_proxy.rstrip('/'),
        interval=interval,
    )
