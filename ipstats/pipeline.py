from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from ipstats.aggregate import AggregationTable, SourcedLine, tally_lines
from ipstats.config import AppConfig, config_to_snapshot
from ipstats.extract_addresses import AddressExtractor
from ipstats.model import RankedEntry, Report, RunSummary
from ipstats.rank import rank
from ipstats.resolver import resolve_all

log = logging.getLogger(__name__)


def build_extractor(cfg: AppConfig) -> AddressExtractor:
    return AddressExtractor(cfg.pattern, fixed=cfg.fixed_ips)


def report_from_table(table: AggregationTable, cfg: AppConfig) -> Report:
    """Rank a finished table and, if enabled, resolve the surviving entries."""
    ranked = rank(table, cfg.min_threshold, cfg.max_results)

    if cfg.resolve_hostnames and ranked:
        resolutions = resolve_all(
            (address for address, _ in ranked),
            timeout=cfg.resolver.timeout,
            workers=cfg.resolver.workers,
        )
        entries = [
            RankedEntry(address=address, count=count, hostname=resolutions[address].hostname)
            for address, count in ranked
        ]
    else:
        entries = [RankedEntry(address=address, count=count) for address, count in ranked]

    summary = RunSummary(
        lines_read=table.lines_read,
        lines_matched=table.lines_matched,
        distinct_addresses=len(table),
        entries_reported=len(entries),
        resolved=cfg.resolve_hostnames,
    )
    log.info(
        "%d line(s) read, %d matched, %d distinct, %d reported",
        summary.lines_read,
        summary.lines_matched,
        summary.distinct_addresses,
        summary.entries_reported,
    )
    return Report(
        schema_version=cfg.schema_version,
        summary=summary,
        entries=entries,
        config_snapshot=config_to_snapshot(cfg),
    )


def run_pipeline(
    lines: Iterable[Union[str, SourcedLine]],
    cfg: Optional[AppConfig] = None,
) -> Report:
    """
    Extract, select and count addresses from ``lines``, then rank and
    optionally resolve them. Each call builds its own table.
    """
    if cfg is None:
        cfg = AppConfig()
    extractor = build_extractor(cfg)
    table = tally_lines(
        lines,
        extractor,
        index=cfg.selector_index,
        pedantic=cfg.pedantic,
    )
    return report_from_table(table, cfg)
