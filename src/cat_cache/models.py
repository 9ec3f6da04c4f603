from dataclasses import dataclass

from cat_cache.entities import FetchOutcome


@dataclass
class OutcomeMetrics:
    """Track outcome counts for cache operations."""

    hits_local: int = 0
    hits_upstream: int = 0
    misses: int = 0
    failures: int = 0
    persist_failures: int = 0
    stores: int = 0
    removes: int = 0

    @property
    def total_fetches(self) -> int:
        """Number of fetches recorded, whatever their outcome."""
        return self.hits_local + self.hits_upstream + self.misses + self.failures

    @property
    def hit_rate(self) -> float:
        """Share of fetches answered from local storage."""
        if self.total_fetches == 0:
            return 0.0
        return self.hits_local / self.total_fetches

    def record_fetch(self, outcome: FetchOutcome) -> None:
        """Record the outcome of one fetch."""
        if outcome is FetchOutcome.HIT_LOCAL:
            self.hits_local += 1
        elif outcome is FetchOutcome.HIT_UPSTREAM:
            self.hits_upstream += 1
        elif outcome is FetchOutcome.MISS:
            self.misses += 1
        else:
            self.failures += 1

    def record_persist_failure(self) -> None:
        self.persist_failures += 1

    def record_store(self) -> None:
        self.stores += 1

    def record_remove(self) -> None:
        self.removes += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        return {
            "total_fetches": self.total_fetches,
            "hits_local": self.hits_local,
            "hits_upstream": self.hits_upstream,
            "misses": self.misses,
            "failures": self.failures,
            "persist_failures": self.persist_failures,
            "stores": self.stores,
            "removes": self.removes,
            "hit_rate": self.hit_rate,
        }
