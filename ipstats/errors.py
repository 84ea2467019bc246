from __future__ import annotations

from typing import Optional


class IpstatsError(Exception):
    """Base class for errors surfaced to the caller."""


class ConfigurationError(IpstatsError):
    """Invalid or contradictory settings; raised before any input is read."""


class InputError(IpstatsError):
    def __init__(self, message: str, *, source: Optional[str] = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        msg = super().__str__()
        if self.source:
            return f"{self.source}: {msg}"
        return msg


class UnmatchedLineError(InputError):
    """Pedantic mode found a line without a selectable address."""

    def __init__(self, line: str, *, source: Optional[str] = None, line_no: int = 0):
        super().__init__(f"could not extract address from line {line_no}: {line!r}", source=source)
        self.line = line
        self.line_no = line_no
