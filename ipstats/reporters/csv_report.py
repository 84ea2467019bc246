from __future__ import annotations

import csv
import sys
from pathlib import Path
from typing import Optional, TextIO

from ipstats.model import Report

FIELDNAMES = ["count", "address", "hostname"]


def _write_rows(f: TextIO, report: Report) -> None:
    writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
    writer.writeheader()
    for e in report.entries:
        writer.writerow(
            {
                "count": e.count,
                "address": e.address,
                "hostname": e.hostname or "",
            }
        )


def write_report_csv(report: Report, path: Optional[Path] = None) -> None:
    if path is None:
        _write_rows(sys.stdout, report)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        _write_rows(f, report)
