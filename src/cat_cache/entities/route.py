"""Request classification produced by the router."""

from dataclasses import dataclass
from enum import Enum


class Operation(str, Enum):
    """Resolver operation selected for a request."""

    FETCH = "fetch"
    STORE = "store"
    REMOVE = "remove"


class Rejection(str, Enum):
    """Why the router refused a request."""

    BAD_REQUEST = "bad_request"
    METHOD_NOT_ALLOWED = "method_not_allowed"


@dataclass(frozen=True)
class Route:
    """Either an (operation, key) pair or a rejection with a reason."""

    operation: Operation | None = None
    key: str | None = None
    rejection: Rejection | None = None
    reason: str | None = None

    @classmethod
    def accept(cls, operation: Operation, key: str) -> "Route":
        return cls(operation=operation, key=key)

    @classmethod
    def reject(cls, rejection: Rejection, reason: str) -> "Route":
        return cls(rejection=rejection, reason=reason)

    @property
    def is_rejected(self) -> bool:
        return self.rejection is not None
