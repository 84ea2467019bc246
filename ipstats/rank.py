from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple

Item = Tuple[str, int]


def apply_threshold(items: Iterable[Item], min_threshold: Optional[int]) -> List[Item]:
    """Drop entries whose count is strictly below ``min_threshold``."""
    if min_threshold is None:
        return list(items)
    return [(address, count) for address, count in items if count >= min_threshold]


def sort_ascending(items: Iterable[Item]) -> List[Item]:
    # Heaviest last; equal counts ordered by address text.
    return sorted(items, key=lambda kv: (kv[1], kv[0]))


def take_top(items: List[Item], max_results: Optional[int]) -> List[Item]:
    """Keep the last ``max_results`` entries of an ascending list."""
    if max_results is None:
        return list(items)
    if max_results <= 0:
        return []
    return items[-max_results:]


def rank(
    table: Mapping[str, int],
    min_threshold: Optional[int] = None,
    max_results: Optional[int] = None,
) -> List[Item]:
    kept = apply_threshold(table.items(), min_threshold)
    return take_top(sort_ascending(kept), max_results)
