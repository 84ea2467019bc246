from __future__ import annotations

import ipaddress
import logging
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of one reverse lookup. Either ``hostname`` is set, or ``error``
    says why the literal address is used instead.
    """

    address: str
    hostname: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.hostname is not None

    @classmethod
    def fallback(cls, address: str, reason: str) -> "Resolution":
        return cls(address=address, hostname=None, error=reason)


def reverse_lookup(address: str) -> Resolution:
    """
    PTR lookup via ``socket.gethostbyaddr``. Never raises: malformed
    addresses, missing records and resolver errors all come back as a
    fallback Resolution.
    """
    try:
        ipaddress.ip_address(address)
    except ValueError:
        return Resolution.fallback(address, "not a valid IP address")

    try:
        primary, _aliases, _ = socket.gethostbyaddr(address)
    except (socket.herror, socket.gaierror) as e:
        return Resolution.fallback(address, f"no PTR record ({e})")
    except socket.timeout:
        return Resolution.fallback(address, "timeout")
    except (OSError, UnicodeError) as e:
        return Resolution.fallback(address, f"lookup failed ({e})")

    primary = (primary or "").rstrip(".")
    if not primary:
        return Resolution.fallback(address, "empty PTR record")
    return Resolution(address=address, hostname=primary)


def bounded_lookup(address: str, timeout: float) -> Resolution:
    """
    ``reverse_lookup`` limited to ``timeout`` seconds from its own start.
    A lookup still running after that is left on a daemon thread and
    reported as a timeout fallback.
    """
    result: Dict[str, Resolution] = {}

    def run() -> None:
        result["r"] = reverse_lookup(address)

    t = threading.Thread(target=run, name=f"ipstats-ptr-{address}", daemon=True)
    t.start()
    t.join(timeout)
    if t.is_alive():
        return Resolution.fallback(address, "timeout")
    return result["r"]


def resolve_all(
    addresses: Iterable[str],
    *,
    timeout: float = 2.0,
    workers: int = 8,
) -> Dict[str, Resolution]:
    """
    Resolve each unique address once, ``workers`` lookups at a time.

    Every lookup gets ``timeout`` seconds of its own, so a hung lookup
    only costs its own entry and never the ones queued behind it.
    """
    unique = list(dict.fromkeys(addresses))
    if not unique:
        return {}

    workers = max(1, min(workers, len(unique)))
    log.info("resolving %d address(es) with %d worker(s)", len(unique), workers)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ipstats-resolve") as ex:
        results = list(ex.map(lambda a: bounded_lookup(a, timeout), unique))

    out = dict(zip(unique, results))
    timed_out = sum(1 for r in results if r.error == "timeout")
    if timed_out:
        log.warning("%d reverse lookup(s) did not finish within %.1fs", timed_out, timeout)
    log.debug("resolved %d/%d address(es)", sum(1 for r in results if r.ok), len(out))
    return out
