from __future__ import annotations

from typing import Optional, Sequence

from ipstats.errors import ConfigurationError


def select_address(matches: Sequence[str], index: int = 1) -> Optional[str]:
    """Pick the ``index``-th (1-based) match of a line, or None when the line has fewer."""
    if index < 1:
        raise ConfigurationError(f"selector index must be >= 1, got {index}")
    if index > len(matches):
        return None
    return matches[index - 1]
