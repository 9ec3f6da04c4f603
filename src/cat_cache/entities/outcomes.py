"""Outcomes of the resolver operations (fetch, store, remove)."""

from dataclasses import dataclass
from enum import Enum


class FetchOutcome(str, Enum):
    """How a fetch was satisfied, independent of the HTTP status code."""

    HIT_LOCAL = "hit_local"
    HIT_UPSTREAM = "hit_upstream"
    MISS = "miss"
    FAILURE = "failure"


class MutationOutcome(str, Enum):
    """Result of a store or remove."""

    CREATED = "created"
    REMOVED = "removed"
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    FAILURE = "failure"


@dataclass(frozen=True)
class FetchResult:
    """Result of ``CacheService.fetch``.

    Attributes:
        outcome: Local hit, upstream hit, miss or failure
        data: The entry bytes for either kind of hit
        error: The underlying exception for failures
    """

    outcome: FetchOutcome
    data: bytes | None = None
    error: BaseException | None = None

    @property
    def is_hit(self) -> bool:
        return self.outcome in (FetchOutcome.HIT_LOCAL, FetchOutcome.HIT_UPSTREAM)


@dataclass(frozen=True)
class MutationResult:
    """Result of ``CacheService.store`` or ``CacheService.remove``.

    Attributes:
        outcome: What happened to the entry
        reason: Short client-facing message for rejections
        error: The underlying exception for failures
    """

    outcome: MutationOutcome
    reason: str | None = None
    error: BaseException | None = None
