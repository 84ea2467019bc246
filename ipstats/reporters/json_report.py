from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from ipstats.model import Report


def dumps(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def write_json(path: Path, obj: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(obj) + "\n", encoding="utf-8")


def write_report_json(report: Report, path: Optional[Path] = None) -> None:
    data = report.model_dump()
    if path is None:
        sys.stdout.write(dumps(data) + "\n")
        return
    write_json(path, data)
