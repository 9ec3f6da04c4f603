"""Tagged result returned by storage and upstream collaborators."""

from dataclasses import dataclass
from enum import Enum


class ResultStatus(str, Enum):
    """Outcome of a single collaborator call."""

    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class BlobResult:
    """Result of a storage or upstream call.

    Exactly one of three variants:
    - OK: the call succeeded; ``data`` holds the bytes for reads
    - NOT_FOUND: the key is definitively absent
    - ERROR: anything else; ``error`` holds the underlying exception

    Attributes:
        status: Which variant this is
        data: Payload for successful reads, None otherwise
        error: The exception behind an ERROR result
    """

    status: ResultStatus
    data: bytes | None = None
    error: BaseException | None = None

    @classmethod
    def ok(cls, data: bytes | None = None) -> "BlobResult":
        return cls(status=ResultStatus.OK, data=data)

    @classmethod
    def not_found(cls) -> "BlobResult":
        return cls(status=ResultStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: BaseException) -> "BlobResult":
        return cls(status=ResultStatus.ERROR, error=error)

    @property
    def is_ok(self) -> bool:
        return self.status is ResultStatus.OK

    @property
    def is_not_found(self) -> bool:
        return self.status is ResultStatus.NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.status is ResultStatus.ERROR
