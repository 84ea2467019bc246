from __future__ import annotations

import re
from typing import List, Optional, Pattern

from ipstats.errors import ConfigurationError

# Shape only: 999.999.999.999 is a match, ranges are not checked.
_OCTET = r"[0-9]{1,3}"
_IPV4 = rf"(?:{_OCTET}\.){{3}}{_OCTET}"

_H16 = r"[0-9A-Fa-f]{1,4}"

# Longest forms first. Inside each form the embedded-IPv4 tail is tried
# before the pure hex tail so "::ffff:10.0.0.1" is not cut at "::ffff:10".
_IPV6_FORMS = (
    rf"(?:{_H16}:){{7}}(?:{_H16}|:)",
    rf"(?:{_H16}:){{6}}(?:{_IPV4}|:{_H16}|:)",
    rf"(?:{_H16}:){{5}}(?::{_IPV4}|(?::{_H16}){{1,2}}|:)",
    rf"(?:{_H16}:){{4}}(?:(?::{_H16})?:{_IPV4}|(?::{_H16}){{1,3}}|:)",
    rf"(?:{_H16}:){{3}}(?:(?::{_H16}){{0,2}}:{_IPV4}|(?::{_H16}){{1,4}}|:)",
    rf"(?:{_H16}:){{2}}(?:(?::{_H16}){{0,3}}:{_IPV4}|(?::{_H16}){{1,5}}|:)",
    rf"(?:{_H16}:)(?:(?::{_H16}){{0,4}}:{_IPV4}|(?::{_H16}){{1,6}}|:)",
    rf":(?:(?::{_H16}){{0,5}}:{_IPV4}|(?::{_H16}){{1,7}}|:)",
)

_ZONE = r"(?:%[0-9A-Za-z._~-]+)?"

_IPV6 = r"(?<![0-9A-Za-z_])(?:" + "|".join(_IPV6_FORMS) + r")" + _ZONE + r"(?![0-9A-Za-z_])"

DEFAULT_PATTERN = rf"{_IPV6}|\b{_IPV4}\b"

_DEFAULT_RE = re.compile(DEFAULT_PATTERN)

_MAPPED_PREFIX = "::ffff:"
_IPV4_RE = re.compile(_IPV4)


def normalize_address(token: str) -> str:
    """
    Strip the IPv4-mapped prefix so ``::ffff:1.2.3.4`` counts as ``1.2.3.4``.
    Nothing else is rewritten; ``01.2.3.4`` and ``1.2.3.4`` stay distinct.
    """
    head, rest = token[: len(_MAPPED_PREFIX)], token[len(_MAPPED_PREFIX):]
    if head.lower() == _MAPPED_PREFIX and _IPV4_RE.fullmatch(rest):
        return rest
    return token


def compile_pattern(pattern: Optional[str]) -> Pattern[str]:
    if pattern is None:
        return _DEFAULT_RE
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"Could not compile pattern {pattern!r}: {e}") from e


class AddressExtractor:
    """
    Finds address-shaped substrings in a line.

    The whole match of each hit is taken, capture groups in a custom
    pattern are ignored. With ``fixed=True`` the stripped line itself is
    the address and no pattern is applied.
    """

    def __init__(self, pattern: Optional[str] = None, *, fixed: bool = False):
        if fixed and pattern is not None:
            raise ConfigurationError("A custom pattern cannot be combined with fixed addresses")
        self.fixed = fixed
        self.regex = compile_pattern(pattern)

    def extract(self, line: str) -> List[str]:
        if self.fixed:
            s = line.strip()
            return [normalize_address(s)] if s else []
        return [normalize_address(m.group(0)) for m in self.regex.finditer(line) if m.group(0)]


def extract(line: str) -> List[str]:
    return [normalize_address(m.group(0)) for m in _DEFAULT_RE.finditer(line)]
