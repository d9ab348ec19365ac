# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Reusable Rich table presets and check report rendering."""

from dataclasses import dataclass
from typing import Dict, List, Tuple

import click
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from checkproxy.classes import Bucket, CheckCounts, UnifiedCheck
from checkproxy.checks.aggregate import sort_checks


@dataclass(frozen=True)
class TableTheme:
    box_style: box.Box
    header_style: str
    border_style: str
    show_lines: bool
    pad_edge: bool


TABLE_THEMES = {
    # Minimal separators with a heavier header rule
    'minimal': TableTheme(
        box_style=box.MINIMAL_HEAVY_HEAD,
        header_style='bold white',
        border_style='grey50',
        show_lines=False,
        pad_edge=False,
    ),
}

DEFAULT_TABLE_THEME = 'minimal'

# Bucket -> (mark, color) for terminal output
BUCKET_MARKS: Dict[Bucket, Tuple[str, str]] = {
    Bucket.FAIL: ('X', 'red'),
    Bucket.PENDING: ('*', 'yellow'),
    Bucket.SKIPPING: ('-', 'grey50'),
    Bucket.CANCEL: ('-', 'grey50'),
    Bucket.PASS: ('✓', 'green'),
}


def build_table(theme: str = DEFAULT_TABLE_THEME, **kwargs) -> Table:
    """Create a Rich table using a named visual theme."""
    preset = TABLE_THEMES.get(theme, TABLE_THEMES[DEFAULT_TABLE_THEME])
    params = {
        'box': preset.box_style,
        'header_style': preset.header_style,
        'border_style': preset.border_style,
        'show_lines': preset.show_lines,
        'pad_edge': preset.pad_edge,
    }
    params.update(kwargs)
    return Table(**params)


def summary_headline(counts: CheckCounts) -> Tuple[str, str]:
    """Return (headline, color) for a set of counts."""
    if counts.failed > 0:
        return 'Some checks were not successful', 'red'
    if counts.pending > 0:
        return 'Some checks are still pending', 'yellow'
    if counts.cancelled > 0:
        return 'Some checks were cancelled', 'grey50'
    return 'All checks were successful', 'green'


def summary_tallies(counts: CheckCounts) -> str:
    return (
        f'{counts.cancelled} cancelled, {counts.failed} failing, {counts.passed} successful, '
        f'{counts.skipping} skipped, and {counts.pending} pending checks'
    )


def build_checks_table(checks: List[UnifiedCheck]) -> Table:
    """Build a Rich table of checks in display order."""
    table = build_table(show_header=True)
    table.add_column('', no_wrap=True)
    table.add_column('NAME', style='bold')
    table.add_column('DESCRIPTION', style='dim', max_width=50)
    table.add_column('ELAPSED', justify='right')
    table.add_column('URL', style='blue', overflow='fold')

    for check in sort_checks(checks):
        mark, color = BUCKET_MARKS.get(check.bucket, BUCKET_MARKS[Bucket.PENDING])
        table.add_row(
            f'[{color}]{mark}[/{color}]',
            escape(check.name),
            escape(check.description),
            check.elapsed,
            escape(check.link),
        )

    return table


def print_report(console: Console, checks: List[UnifiedCheck], counts: CheckCounts) -> None:
    """Print the headline, tallies and table for a terminal."""
    if counts.total > 0:
        headline, color = summary_headline(counts)
        console.print(f'[bold {color}]{headline}[/bold {color}]')
        console.print(summary_tallies(counts))
        console.print()
    console.print(build_checks_table(checks))


def plain_rows(checks: List[UnifiedCheck]) -> List[List[str]]:
    """Rows for non-terminal output: NAME, STATUS, ELAPSED, URL, DESCRIPTION.

    Cancelled checks are reported as fail and an unknown elapsed time as 0.
    """
    rows = []
    for check in sort_checks(checks):
        status = Bucket.FAIL.value if check.bucket is Bucket.CANCEL else check.bucket.value
        rows.append([check.name, status, check.elapsed or '0', check.link, check.description])
    return rows


def print_plain(checks: List[UnifiedCheck]) -> None:
    """Print tab separated rows suitable for scripting."""
    click.echo('\t'.join(['NAME', 'STATUS', 'ELAPSED', 'URL', 'DESCRIPTION']))
    for row in plain_rows(checks):
        click.echo('\t'.join(row))
