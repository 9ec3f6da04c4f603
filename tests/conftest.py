"""Shared fixtures and in-memory fakes of the collaborator protocols."""

import pytest

from cat_cache.config import Settings
from cat_cache.entities import BlobResult


class InMemoryBlobStore:
    """Dict-backed BlobStore with switchable failures."""

    def __init__(self, entries: dict[str, bytes] | None = None) -> None:
        self.entries: dict[str, bytes] = dict(entries or {})
        self.fail_reads = False
        self.fail_writes = False
        self.fail_deletes = False
        self.raise_on_put = False
        self.puts: list[str] = []
        self.closed = False

    async def get(self, key: str) -> BlobResult:
        if self.fail_reads:
            return BlobResult.failed(OSError("disk read error"))
        if key not in self.entries:
            return BlobResult.not_found()
        return BlobResult.ok(self.entries[key])

    async def put(self, key: str, data: bytes) -> BlobResult:
        self.puts.append(key)
        if self.raise_on_put:
            raise RuntimeError("store exploded")
        if self.fail_writes:
            return BlobResult.failed(OSError("disk full"))
        self.entries[key] = bytes(data)
        return BlobResult.ok()

    async def delete(self, key: str) -> BlobResult:
        if self.fail_deletes:
            return BlobResult.failed(PermissionError("read-only"))
        if self.entries.pop(key, None) is None:
            return BlobResult.not_found()
        return BlobResult.ok()

    async def health_check(self) -> bool:
        return not self.fail_reads

    async def get_stats(self) -> dict:
        return {"backend": "memory", "total_entries": len(self.entries)}

    async def close(self) -> None:
        self.closed = True


class FakeUpstream:
    """UpstreamFetcher serving a fixed dict of entries.

    ``mode`` is "ok" (serve entries, not-found otherwise) or "error"
    (every call fails as if the network were down).
    """

    def __init__(self, entries: dict[str, bytes] | None = None) -> None:
        self.entries: dict[str, bytes] = dict(entries or {})
        self.mode = "ok"
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, key: str) -> BlobResult:
        self.calls.append(key)
        if self.mode == "error":
            return BlobResult.failed(ConnectionError("upstream unreachable"))
        if key not in self.entries:
            return BlobResult.not_found()
        return BlobResult.ok(self.entries[key])

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def memory_store():
    """Empty in-memory store."""
    return InMemoryBlobStore()


@pytest.fixture
def upstream():
    """Upstream that knows key "200"."""
    return FakeUpstream({"200": b"IMG200"})


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a temporary cache directory."""
    return Settings(cache_dir=tmp_path / "cache", upstream_base_url="https://upstream.test")
