"""
Per-cache counters (hits, misses, coalesced waits, failures, expirations).
Why: quick visibility into how much work the cache is saving.
"""

from typing import Dict


def _ratio(part: int, whole: int) -> float:
    if not whole:
        return 0.0
    return round(part / whole, 4)


class CacheStats:
    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.coalesced = 0
        self.failures = 0
        self.expirations = 0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_coalesced(self) -> None:
        self.coalesced += 1

    def record_failure(self) -> None:
        self.failures += 1

    def record_expiration(self) -> None:
        self.expirations += 1

    @property
    def requests(self) -> int:
        return self.hits + self.misses + self.coalesced

    def snapshot(self) -> Dict[str, float]:
        return {
            "requests": self.requests,
            "hits": self.hits,
            "misses": self.misses,
            "coalesced": self.coalesced,
            "failures": self.failures,
            "expirations": self.expirations,
            "hit_ratio": _ratio(self.hits + self.coalesced, self.requests),
        }
