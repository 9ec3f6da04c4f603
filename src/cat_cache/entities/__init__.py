"""Domain entities for internal representation.

These are pure dataclasses (frozen) and enums used internally by the
router, services and repositories. They carry no HTTP or serialization
logic; handlers translate them into responses.
"""

from .outcomes import FetchOutcome, FetchResult, MutationOutcome, MutationResult
from .results import BlobResult, ResultStatus
from .route import Operation, Rejection, Route

__all__ = [
    "BlobResult",
    "ResultStatus",
    "FetchOutcome",
    "FetchResult",
    "MutationOutcome",
    "MutationResult",
    "Operation",
    "Rejection",
    "Route",
]
