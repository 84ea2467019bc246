from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    """
    UTC timestamp in ISO-8601 with 'Z' suffix, seconds precision.
    Example: 2026-01-08T17:12:34Z
    """
    return (
        datetime.now(timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )


class RankedEntry(BaseModel):
    address: str
    count: int
    hostname: Optional[str] = None

    @property
    def host(self) -> str:
        return self.hostname if self.hostname is not None else self.address

    def format_vars(self) -> Dict[str, Any]:
        return {"cnt": self.count, "ip": self.address, "host": self.host}


class RunSummary(BaseModel):
    lines_read: int = 0
    lines_matched: int = 0
    distinct_addresses: int = 0
    entries_reported: int = 0
    resolved: bool = False


class Report(BaseModel):
    schema_version: str = "1.0"
    generated_utc: str = Field(default_factory=utc_now_iso)

    summary: RunSummary = Field(default_factory=RunSummary)
    entries: List[RankedEntry] = Field(default_factory=list)
    config_snapshot: Dict[str, Any] = Field(default_factory=dict)
