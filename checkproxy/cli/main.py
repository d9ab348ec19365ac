# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
gh-checkproxy CLI - Main entry point

Usage:
    gh-checkproxy pr checks [SELECTOR]   - Show CI status for a pull request
    gh-checkproxy config                 - Show/set client configuration (alias: cfg)
    gh-checkproxy status                 - Show effective settings
"""

from typing import Optional

import click

from checkproxy import __version__
from checkproxy.utils.logging import setup_logging

from .config_commands import config, status
from .pr_commands import pr


class AliasGroup(click.Group):
    """Click Group that supports command aliases without duplicate help entries."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._aliases = {}  # alias -> canonical name

    def add_alias(self, name, alias):
        """Register an alias for an existing command."""
        self._aliases[alias] = name

    def get_command(self, ctx, cmd_name):
        canonical = self._aliases.get(cmd_name, cmd_name)
        return super().get_command(ctx, canonical)

    def format_commands(self, ctx, formatter):
        """Write the help text, appending aliases to command descriptions."""
        alias_map = {}
        for alias, canonical in self._aliases.items():
            alias_map.setdefault(canonical, []).append(alias)

        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.commands.get(subcommand)
            if cmd is None or cmd.hidden:
                continue
            help_text = cmd.get_short_help_str(limit=150)
            aliases = alias_map.get(subcommand)
            if aliases:
                subcommand = f'{subcommand}, {", ".join(sorted(aliases))}'
            commands.append((subcommand, help_text))

        if commands:
            with formatter.section('Commands'):
                formatter.write_dl(commands)


@click.group(cls=AliasGroup)
@click.version_option(version=__version__, prog_name='gh-checkproxy')
@click.option('--verbose', '-v', is_flag=True, help='Show debug logging on stderr')
@click.option('--log-file', type=click.Path(dir_okay=False), default=None, help='Also write logs to this file')
def cli(verbose: bool, log_file: Optional[str]):
    """gh-checkproxy - CI status for pull requests through a checks proxy"""
    setup_logging(verbose=verbose, log_file=log_file)


cli.add_command(pr)
cli.add_command(config)
cli.add_alias('config', 'cfg')
cli.add_command(status)


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
