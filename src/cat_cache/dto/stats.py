"""Statistics DTOs."""

from pydantic import BaseModel, Field


class StoreStats(BaseModel):
    """Statistics reported by a storage backend."""

    backend: str = Field(..., description="Storage backend name (file, redis)")
    total_entries: int = Field(..., description="Number of cached entries (-1 if unknown)")

    model_config = {"extra": "allow"}


class ServiceStats(BaseModel):
    """Outcome counters of the cache service plus its store statistics."""

    total_fetches: int = 0
    hits_local: int = 0
    hits_upstream: int = 0
    misses: int = 0
    failures: int = 0
    persist_failures: int = 0
    stores: int = 0
    removes: int = 0
    hit_rate: float = Field(0.0, ge=0.0, le=1.0, description="Local hits / all fetches")
    store: StoreStats | None = None
