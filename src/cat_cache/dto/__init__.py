"""Data Transfer Objects for external contracts.

These Pydantic models define what leaves the process (CLI output, logs).
Internal domain logic should use entities from the entities package.
"""

from .stats import ServiceStats, StoreStats

__all__ = [
    "ServiceStats",
    "StoreStats",
]
