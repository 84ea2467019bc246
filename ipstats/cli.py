from __future__ import annotations

import logging
from importlib import metadata
from pathlib import Path
from typing import List, Optional

import typer

from ipstats.config import AppConfig, load_config, with_overrides
from ipstats.errors import ConfigurationError, InputError
from ipstats.logging_setup import setup_logging
from ipstats.model import Report
from ipstats.pipeline import run_pipeline
from ipstats.reporters.console import format_entries, render_table, render_text
from ipstats.reporters.csv_report import write_report_csv
from ipstats.reporters.json_report import write_report_json
from ipstats.sources import iter_lines

app = typer.Typer(add_completion=False)

log = logging.getLogger(__name__)


def version_callback(value: bool):
    if value:
        try:
            v = metadata.version("ipstats")
        except metadata.PackageNotFoundError:
            v = "0.1.0-dev"
        typer.echo(f"ipstats version: {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
):
    """
    Count IP addresses found in logs and command output.
    """
    pass


def _effective_config(
    config: Optional[str],
    *,
    key: Optional[int],
    numeric: bool,
    threshold: Optional[int],
    max_results: Optional[int],
    pattern: Optional[str],
    fixed_ips: bool,
    pedantic: bool,
    fmt: Optional[str],
    output_format: Optional[str],
    output: Optional[Path],
    timeout: Optional[float],
    workers: Optional[int],
) -> AppConfig:
    cfg = load_config(config)
    return with_overrides(
        cfg,
        {
            "selector_index": key,
            "resolve_hostnames": False if numeric else None,
            "min_threshold": threshold,
            "max_results": max_results,
            "pattern": pattern,
            "fixed_ips": True if fixed_ips else None,
            "pedantic": True if pedantic else None,
            "resolver": {"timeout": timeout, "workers": workers},
            "output": {
                "kind": output_format,
                "format": fmt,
                "path": str(output) if output is not None else None,
            },
        },
    )


def _emit(report: Report, cfg: AppConfig) -> None:
    kind = cfg.output.kind
    path = Path(cfg.output.path).expanduser() if cfg.output.path else None

    if kind == "table":
        render_table(report)
    elif kind == "json":
        write_report_json(report, path)
    elif kind == "csv":
        write_report_csv(report, path)
    elif path is not None:
        lines = format_entries(report, cfg.entry_format())
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    else:
        render_text(report, cfg.entry_format())

    if path is not None:
        log.info("wrote %d entries to %s", len(report.entries), path)


@app.command()
def count(
    files: Optional[List[str]] = typer.Argument(
        None, help="Files to scan for addresses ('-' for stdin). Reads stdin when omitted."
    ),
    config: Optional[str] = typer.Option(None, "--config", help="Path to YAML config."),
    max_results: Optional[int] = typer.Option(
        None, "--max-results", "-m", help="Show only the N most frequent addresses."
    ),
    numeric: bool = typer.Option(False, "--numeric", "-n", help="Do not look up hostnames."),
    key: Optional[int] = typer.Option(
        None, "--key", "-k", help="If a line holds several addresses, count the Nth one (starts at 1)."
    ),
    threshold: Optional[int] = typer.Option(
        None, "--threshold", "-t", help="Only show addresses seen at least this many times."
    ),
    pedantic: bool = typer.Option(False, "--pedantic", help="Fail on the first line without an address."),
    pattern: Optional[str] = typer.Option(
        None, "--pattern", "-p", help="Custom regular expression used to find addresses."
    ),
    fixed_ips: bool = typer.Option(
        False, "--fixed-ips", help="Each line is a single address with nothing else in it."
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", "-f", help="Per-entry output format; may use {cnt}, {ip} and {host}."
    ),
    output_format: Optional[str] = typer.Option(
        None, "--output-format", help="Output kind: text | table | json | csv."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write results to this file instead of stdout."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds allowed for each reverse lookup."
    ),
    workers: Optional[int] = typer.Option(None, "--workers", help="Parallel reverse lookups."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log progress (-vv for debug)."),
):
    """
    Tally the addresses in FILES (or stdin) and print them, least frequent first.

    Example:

        ipstats count /var/log/nginx/access.log -n -m 10
        journalctl -u sshd | ipstats count -k 2 -t 5
    """
    setup_logging(verbose)

    try:
        cfg = _effective_config(
            config,
            key=key,
            numeric=numeric,
            threshold=threshold,
            max_results=max_results,
            pattern=pattern,
            fixed_ips=fixed_ips,
            pedantic=pedantic,
            fmt=fmt,
            output_format=output_format,
            output=output,
            timeout=timeout,
            workers=workers,
        )
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    try:
        report = run_pipeline(iter_lines(files), cfg)
    except InputError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        _emit(report, cfg)
    except OSError as e:
        typer.secho(f"Error: could not write output: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
