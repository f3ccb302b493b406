"""Per-domain record cache with scheduled staleness."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pulseboard.ingest import DOMAINS, Domain, refresh_intervals


class Source(str, Enum):
    REMOTE = "remote"
    FALLBACK = "fallback"
    OPTIMISTIC = "optimistic"


@dataclass(slots=True)
class CacheEntry:
    data: Any
    source: Source
    fetched_at: float


@dataclass(slots=True)
class _Slot:
    entry: CacheEntry | None = None
    generation: int = 0
    fallback: bool = False


class DomainCache:
    """Holds the last resolved data for each domain.

    A domain's generation increases whenever its entry is invalidated or
    optimistically merged; a fetch started under an older generation must not
    overwrite the entry.
    """

    def __init__(
        self,
        intervals: dict[Domain, float] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.intervals = intervals or refresh_intervals()
        self._clock = clock or time.monotonic
        self._slots: dict[Domain, _Slot] = {domain: _Slot() for domain in Domain}

    def get(self, domain: Domain) -> CacheEntry | None:
        return self._slots[domain].entry

    def generation(self, domain: Domain) -> int:
        return self._slots[domain].generation

    def fallback_active(self, domain: Domain) -> bool:
        return self._slots[domain].fallback

    def is_stale(self, domain: Domain) -> bool:
        entry = self._slots[domain].entry
        if entry is None:
            return True
        return self._clock() - entry.fetched_at >= self.intervals[domain]

    def store(self, domain: Domain, data: Any, source: Source) -> CacheEntry:
        slot = self._slots[domain]
        slot.entry = CacheEntry(data=data, source=source, fetched_at=self._clock())
        slot.fallback = source is Source.FALLBACK
        return slot.entry

    def merge(self, domain: Domain, record: Any) -> CacheEntry:
        """Apply a freshly created record ahead of the next scheduled refresh."""
        slot = self._slots[domain]
        if DOMAINS[domain].many:
            existing = list(slot.entry.data) if slot.entry else []
            data: Any = [*existing, record]
        else:
            data = record
        fallback = slot.fallback
        entry = self.store(domain, data, Source.OPTIMISTIC)
        # Merging into synthetic data does not make the domain live again.
        slot.fallback = fallback
        slot.generation += 1
        return entry

    def invalidate(self, domain: Domain) -> None:
        slot = self._slots[domain]
        slot.generation += 1
        if slot.entry is not None:
            slot.entry.fetched_at = float("-inf")

    def invalidate_all(self) -> None:
        for domain in Domain:
            self.invalidate(domain)
