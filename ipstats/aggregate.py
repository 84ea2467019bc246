from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple, Union

from ipstats.errors import ConfigurationError, UnmatchedLineError
from ipstats.extract_addresses import AddressExtractor
from ipstats.selector import select_address

log = logging.getLogger(__name__)

# A line source may yield bare lines or (source name, line number, line).
SourcedLine = Tuple[str, int, str]


class AggregationTable(dict):
    """
    Address -> occurrence count for one run. Iteration order is discovery
    order. ``lines_read`` / ``lines_matched`` track what went in.
    """

    def __init__(self) -> None:
        super().__init__()
        self.lines_read = 0
        self.lines_matched = 0

    def accumulate(self, address: str) -> None:
        self[address] = self.get(address, 0) + 1


def tally_lines(
    lines: Iterable[Union[str, SourcedLine]],
    extractor: Optional[AddressExtractor] = None,
    *,
    index: int = 1,
    pedantic: bool = False,
    table: Optional[AggregationTable] = None,
) -> AggregationTable:
    if index < 1:
        raise ConfigurationError(f"selector index must be >= 1, got {index}")
    if extractor is None:
        extractor = AddressExtractor()
    if table is None:
        table = AggregationTable()

    for item in lines:
        if isinstance(item, tuple):
            source, line_no, line = item
        else:
            source, line_no, line = None, table.lines_read + 1, item

        table.lines_read += 1
        address = select_address(extractor.extract(line), index)
        if address is None:
            if pedantic:
                raise UnmatchedLineError(line.rstrip("\r\n"), source=source, line_no=line_no)
            continue

        table.lines_matched += 1
        table.accumulate(address)

    log.debug(
        "tallied %d line(s), %d matched, %d distinct address(es)",
        table.lines_read,
        table.lines_matched,
        len(table),
    )
    return table
