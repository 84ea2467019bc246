from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator, Optional, Sequence, TextIO, Tuple

from ipstats.errors import InputError

log = logging.getLogger(__name__)

STDIN_NAME = "-"


def _read_stream(stream: TextIO, name: str) -> Iterator[Tuple[str, int, str]]:
    line_no = 0
    try:
        for line in stream:
            line_no += 1
            yield name, line_no, line
    except (OSError, UnicodeError) as e:
        raise InputError(f"read failed after line {line_no}: {e}", source=name) from e


def _stdin() -> TextIO:
    # Decoded like files: UTF-8, undecodable bytes replaced.
    stream = sys.stdin
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        try:
            reconfigure(encoding="utf-8", errors="replace")
        except (OSError, ValueError) as e:
            log.debug("stdin decoding left unchanged: %s", e)
    return stream


def iter_lines(
    paths: Optional[Sequence[str]] = None,
    *,
    stdin: Optional[TextIO] = None,
) -> Iterator[Tuple[str, int, str]]:
    """
    Yield ``(source, line_no, line)`` for every line of every input, in order.

    With no paths, or a path of ``-``, lines come from stdin. Files are
    opened lazily one after another, so an unreadable second file fails
    only after the first has been consumed.
    """
    if not paths:
        paths = [STDIN_NAME]

    for raw in paths:
        if raw == STDIN_NAME:
            log.info("reading from stdin")
            yield from _read_stream(stdin if stdin is not None else _stdin(), "<stdin>")
            continue

        p = Path(raw).expanduser()
        try:
            f = p.open("r", encoding="utf-8", errors="replace")
        except OSError as e:
            raise InputError(f"could not open file: {e.strerror or e}", source=str(p)) from e

        log.info("reading %s", p)
        with f:
            yield from _read_stream(f, str(p))
