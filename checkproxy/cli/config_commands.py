# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
CLI commands for managing gh-checkproxy client configuration.

Users can configure:
- Proxy URL (where check-runs and statuses are fetched from)
- Default repository (owner/repo)
- Watch interval

Tokens are never written to the config file; they come from --token,
$GH_TOKEN or $GITHUB_TOKEN.
"""

import json
import os
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape

from checkproxy.constants import CHECKPROXY_DIR, CONFIG_FILE, CONFIG_KEYS, PROXY_URL_ENV_VAR, TOKEN_ENV_VARS
from checkproxy.errors import ConfigurationError
from checkproxy.utils.utils import mask_token, parse_duration, parse_repo_name

from .tables import build_table

console = Console()


def load_config(strict: bool = False) -> Dict[str, Any]:
    """Load client configuration from file.

    Args:
        strict: raise ConfigurationError on unreadable or invalid JSON instead of
            returning an empty config.
    """
    if not CONFIG_FILE.exists():
        return {}
    try:
        with open(CONFIG_FILE, 'r') as f:
            config = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        if strict:
            raise ConfigurationError(f'invalid config at {CONFIG_FILE}: {e}') from e
        return {}
    if not isinstance(config, dict):
        if strict:
            raise ConfigurationError(f'invalid config at {CONFIG_FILE}: expected a JSON object')
        return {}
    return config


def save_config(config: Dict[str, Any]) -> bool:
    """Save configuration to file, readable by the owner only."""
    CHECKPROXY_DIR.mkdir(parents=True, exist_ok=True, mode=0o700)
    try:
        fd = os.open(CONFIG_FILE, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, 'w') as f:
            json.dump(config, f, indent=2)
        return True
    except IOError as e:
        console.print(f'[red]Failed to save config: {escape(str(e))}[/red]')
        return False


def token_source() -> Optional[str]:
    """Name of the environment variable providing the token, if any."""
    for name in TOKEN_ENV_VARS:
        if os.environ.get(name, '').strip():
            return name
    return None


@click.group(name='config', invoke_without_command=True)
@click.pass_context
def config(ctx):
    """Manage client configuration.

    Show the current configuration (default) or set values.

    \b
    Examples:
        gh-checkproxy config
        gh-checkproxy config set --proxy-url https://checks.example.com
        gh-checkproxy config set --repo octo/hello --interval 30s
    """
    if ctx.invoked_subcommand is None:
        show_config()


def show_config():
    """Display current configuration."""
    try:
        config_data = load_config(strict=True)
    except ConfigurationError as e:
        console.print(f'[yellow]Warning: {escape(str(e))}[/yellow]')
        return

    if not config_data:
        console.print('\n[yellow]No configuration set.[/yellow]')
        console.print('[dim]Use "gh-checkproxy config set --proxy-url <url>" to set values.[/dim]')
        console.print(f'\n[dim]Available keys: {", ".join(CONFIG_KEYS)}[/dim]')
        return

    console.print('\n[bold cyan]gh-checkproxy Configuration[/bold cyan]\n')

    table = build_table(show_header=True)
    table.add_column('Setting', style='cyan')
    table.add_column('Value', style='green')

    for key, value in sorted(config_data.items()):
        table.add_row(key, escape(str(value)))

    console.print(table)
    console.print(f'\n[dim]Config file: {CONFIG_FILE}[/dim]')


@config.command('set')
@click.option('--proxy-url', help='Proxy server base URL')
@click.option('--repo', help='Default repository (owner/repo)')
@click.option('--interval', help='Default watch interval (e.g. 10s, 1m)')
def config_set(proxy_url: Optional[str], repo: Optional[str], interval: Optional[str]):
    """Set one or more config values.

    \b
    Examples:
        gh-checkproxy config set --proxy-url https://checks.example.com
        gh-checkproxy config set --repo octo/hello --interval 30s
    """
    if repo is not None:
        try:
            parse_repo_name(repo)
        except ConfigurationError as e:
            raise click.BadParameter(str(e), param_hint='--repo')
    if interval is not None:
        try:
            seconds = parse_duration(interval)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint='--interval')
        if seconds <= 0:
            raise click.BadParameter(f'interval must be positive (got {interval})', param_hint='--interval')

    updates = {'proxy_url': proxy_url.rstrip('/') if proxy_url else proxy_url, 'repo': repo, 'interval': interval}
    updates = {key: value for key, value in updates.items() if value is not None}
    if not updates:
        console.print('[yellow]No values given. Use --proxy-url, --repo or --interval.[/yellow]')
        return

    config_data = load_config()
    config_data.update(updates)
    if save_config(config_data):
        for key, value in updates.items():
            console.print(f'[green]Set {key}:[/green] {escape(value)}')


@click.command(name='status')
def status():
    """Show effective settings and where the token comes from."""
    config_data = load_config()

    console.print(f'Config: {CONFIG_FILE}\n')

    source = token_source()
    if source:
        token = os.environ[source].strip()
        console.print(f'  Token:      (from {source}) {escape(mask_token(token))}')
    else:
        console.print('  Token:      [yellow]not set[/yellow] (set GH_TOKEN or GITHUB_TOKEN)')

    env_proxy = os.environ.get(PROXY_URL_ENV_VAR, '').strip()
    if env_proxy:
        console.print(f'  Proxy URL:  (from {PROXY_URL_ENV_VAR}) {escape(env_proxy)}')
    elif config_data.get('proxy_url'):
        console.print(f'  Proxy URL:  {escape(str(config_data["proxy_url"]))}')
    else:
        console.print('  Proxy URL:  [yellow]not set[/yellow]')

    console.print(f'  Repository: {escape(str(config_data.get("repo") or "(auto-detect from git remote)"))}')
    console.print(f'  Interval:   {escape(str(config_data.get("interval") or "10s"))}')
