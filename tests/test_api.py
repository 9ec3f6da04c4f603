"""
Tests for the proxy HTTP API.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from cat_cache.api.app import create_app
from cat_cache.repositories import HttpUpstreamFetcher
from conftest import FakeUpstream, InMemoryBlobStore


@pytest.fixture
def client(settings, upstream):
    """Test client backed by a real file cache and a fake upstream."""
    app = create_app(settings, upstream=upstream)
    with TestClient(app) as client:
        yield client


def test_get_fetches_from_upstream_and_caches(client, settings, upstream):
    """GET on an empty cache fetches upstream and writes the cache file."""
    response = client.get("/200")
    assert response.status_code == 200
    assert response.content == b"IMG200"
    assert response.headers["content-type"] == "image/jpeg"
    assert response.headers["x-cache"] == "MISS"
    assert (settings.cache_dir / "200.jpg").read_bytes() == b"IMG200"

    again = client.get("/200")
    assert again.content == b"IMG200"
    assert again.headers["x-cache"] == "HIT"
    assert upstream.calls == ["200"]


def test_delete_then_get_classifies_upstream_errors(client, settings, upstream):
    """After DELETE, upstream errors map to 500 and not-found to 404."""
    client.get("/200")

    deleted = client.delete("/200")
    assert deleted.status_code == 200
    assert deleted.text == "Deleted\n"
    assert not (settings.cache_dir / "200.jpg").exists()

    upstream.mode = "error"
    unreachable = client.get("/200")
    assert unreachable.status_code == 500
    assert unreachable.text == "Internal Server Error\n"

    upstream.mode = "ok"
    upstream.entries.clear()
    missing = client.get("/200")
    assert missing.status_code == 404
    assert missing.text == "Not Found\n"


def test_put_then_get_never_calls_upstream(client, settings, upstream):
    """PUT then GET serves the stored body without upstream."""
    created = client.put("/418", content=b"CUSTOM")
    assert created.status_code == 201
    assert created.text == "Created\n"
    assert created.headers["content-type"].startswith("text/plain")

    response = client.get("/418")
    assert response.status_code == 200
    assert response.content == b"CUSTOM"
    assert upstream.calls == []


def test_put_empty_body(client, settings):
    """PUT with an empty body is a 400."""
    response = client.put("/418", content=b"")
    assert response.status_code == 400
    assert response.text == "Request body is empty\n"
    assert not (settings.cache_dir / "418.jpg").exists()


def test_delete_missing(client):
    """DELETE of an absent key is a 404."""
    response = client.delete("/404")
    assert response.status_code == 404
    assert response.text == "Not Found\n"


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_empty_key(client, method):
    """An empty key is a 400 for every method."""
    response = client.request(method, "/")
    assert response.status_code == 400
    assert response.text == "HTTP code is required in path, e.g. /200\n"


@pytest.mark.parametrize("method", ["PATCH", "POST", "OPTIONS"])
def test_method_not_allowed(client, method):
    """Unsupported methods get 405."""
    response = client.request(method, "/200")
    assert response.status_code == 405
    assert response.text == "Method not allowed\n"


def test_query_string_is_not_part_of_key(client, upstream):
    """The query string is dropped from the key."""
    response = client.get("/200?size=large")
    assert response.status_code == 200
    assert upstream.calls == ["200"]


def test_docs_paths_are_keys(client, upstream):
    """Framework doc paths are treated as ordinary keys."""
    response = client.get("/docs")
    assert response.status_code == 404
    assert upstream.calls == ["docs"]


def test_storage_read_failure_is_500_without_detail(settings, upstream):
    """Storage read errors give a generic 500."""
    store = InMemoryBlobStore()
    store.fail_reads = True
    with TestClient(create_app(settings, store=store, upstream=upstream)) as client:
        response = client.get("/200")
    assert response.status_code == 500
    assert response.text == "Internal Server Error\n"
    assert upstream.calls == []


def test_persist_failure_still_serves_image(settings, upstream):
    """A failed cache write still serves the image."""
    store = InMemoryBlobStore()
    store.fail_writes = True
    with TestClient(create_app(settings, store=store, upstream=upstream)) as client:
        response = client.get("/200")
    assert response.status_code == 200
    assert response.content == b"IMG200"


def test_unexpected_exception_is_plain_500(settings):
    """Unhandled exceptions give a plain 500 without detail."""
    class BrokenStore(InMemoryBlobStore):
        async def get(self, key):
            raise RuntimeError("secret internal path /var/cache")

    app = create_app(settings, store=BrokenStore(), upstream=FakeUpstream())
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/200")
    assert response.status_code == 500
    assert "secret" not in response.text


def test_lifespan_closes_collaborators(settings):
    """Shutdown closes the store and upstream."""
    store = InMemoryBlobStore()
    fake_upstream = FakeUpstream()
    app = create_app(settings, store=store, upstream=fake_upstream)
    with TestClient(app):
        assert app.state.cache_service.store_backend is store
    assert store.closed
    assert fake_upstream.closed


def test_real_fetcher_unreachable_upstream(settings):
    """An unreachable upstream gives 500."""
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = HttpUpstreamFetcher(
        base_url=settings.upstream_base_url, transport=httpx.MockTransport(handler)
    )
    with TestClient(create_app(settings, upstream=fetcher)) as client:
        assert client.get("/200").status_code == 500


def test_real_fetcher_upstream_404(settings):
    """An upstream 404 gives 404 and caches nothing."""
    fetcher = HttpUpstreamFetcher(
        base_url=settings.upstream_base_url,
        transport=httpx.MockTransport(lambda request: httpx.Response(404)),
    )
    with TestClient(create_app(settings, upstream=fetcher)) as client:
        assert client.get("/999").status_code == 404
    assert not (settings.cache_dir / "999.jpg").exists()


@pytest.fixture
def memory_client(settings, memory_store, upstream):
    """Test client backed by in-memory storage, to inspect the keys written."""
    app = create_app(settings, store=memory_store, upstream=upstream)
    with TestClient(app) as client:
        yield client


def test_encoded_question_mark_stays_in_key(memory_client, memory_store, upstream):
    """An escaped '?' is part of the key, not a query separator."""
    response = memory_client.put("/a%3Fb", content=b"CUSTOM")
    assert response.status_code == 201
    assert list(memory_store.entries) == ["a%3Fb"]

    other = memory_client.get("/a")
    assert other.status_code == 404
    assert upstream.calls == ["a"]
    assert memory_store.entries == {"a%3Fb": b"CUSTOM"}

    same = memory_client.get("/a%3Fb?size=large")
    assert same.content == b"CUSTOM"


def test_encoded_hash_is_a_key(memory_client, memory_store):
    """An escaped '#' alone is a non-empty key."""
    response = memory_client.put("/%23", content=b"HASH")
    assert response.status_code == 201
    assert memory_store.entries == {"%23": b"HASH"}

    assert memory_client.delete("/%23").status_code == 200
    assert memory_store.entries == {}


@pytest.mark.parametrize("path, key", [("/%2F200", "%2F200"), ("/%20x", "%20x")])
def test_encoded_keys_reach_upstream_and_store_undecoded(memory_client, memory_store, upstream, path, key):
    """Escapes survive all the way to the upstream call and the cache write."""
    upstream.entries[key] = b"IMG"
    response = memory_client.get(path)
    assert response.status_code == 200
    assert upstream.calls == [key]
    assert memory_store.entries == {key: b"IMG"}


def test_encoded_key_file_on_disk(client, settings):
    """The file store names the file after the undecoded key."""
    assert client.put("/a%3Fb", content=b"CUSTOM").status_code == 201
    assert (settings.cache_dir / "a%3Fb.jpg").read_bytes() == b"CUSTOM"
    assert not (settings.cache_dir / "a.jpg").exists()


def test_real_fetcher_gets_encoded_path(settings):
    """The upstream request carries the key's escapes unchanged."""
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path)
        return httpx.Response(200, content=b"IMG")

    fetcher = HttpUpstreamFetcher(
        base_url=settings.upstream_base_url, transport=httpx.MockTransport(handler)
    )
    with TestClient(create_app(settings, upstream=fetcher)) as client:
        assert client.get("/a%3Fb").status_code == 200
    assert seen == [b"/a%3Fb"]


def test_shutdown_closes_collaborators_when_stats_fail(settings):
    """Collaborators are closed even if final stats cannot be collected."""

    class StatsFailingStore(InMemoryBlobStore):
        async def get_stats(self):
            raise FileNotFoundError("entry vanished during scan")

    store = StatsFailingStore()
    fake_upstream = FakeUpstream()
    app = create_app(settings, store=store, upstream=fake_upstream)
    with TestClient(app) as client:
        client.put("/418", content=b"CUSTOM")
    assert store.closed
    assert fake_upstream.closed
