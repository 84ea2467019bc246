from __future__ import annotations

from typing import List

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ipstats.model import Report

console = Console()


def format_entries(report: Report, template: str) -> List[str]:
    return [template.format_map(e.format_vars()) for e in report.entries]


def render_text(report: Report, template: str) -> None:
    for line in format_entries(report, template):
        typer.echo(line)


def render_table(report: Report) -> None:
    s = report.summary
    t = Table(title="Address occurrences (ascending)")
    t.add_column("Count", justify="right")
    t.add_column("Address", overflow="fold")
    if s.resolved:
        t.add_column("Hostname", overflow="fold")
    for e in report.entries:
        row = [str(e.count), e.address]
        if s.resolved:
            row.append(e.hostname or "-")
        t.add_row(*(Text(c) for c in row))
    console.print(t)
    console.print(
        f"[green]{s.lines_matched}[/green] of {s.lines_read} line(s) matched, "
        f"{s.distinct_addresses} distinct, {s.entries_reported} shown"
    )
