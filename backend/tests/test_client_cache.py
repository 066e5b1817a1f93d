import json

import httpx
import pytest

from client import WatchlistCache, WatchlistClient
from core.errors import ErrorCode, http_status_for
from core.store import WatchlistStore
from core.types import WatchlistDocument

USER_ID = "7f1c6f5e-2a53-4c55-9d7c-6a2b8b1f0c11"


class FakeServer:
    """Minimal stand-in for the HTTP API backed by a real WatchlistStore."""

    def __init__(self):
        self.store = WatchlistStore(WatchlistDocument(user_id=USER_ID))
        self.calls: list[tuple[str, str]] = []
        self.down = False

    def __call__(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        body = json.loads(request.content) if request.content else {}
        if method == "GET" and path == "/api/watchlist":
            return httpx.Response(200, json={"success": True, "watchlist": self.store.document.dump()})
        if method == "POST" and path == "/api/watchlist/items":
            result = self.store.add_item(body.pop("title"), body.pop("type"), body)
        elif method == "POST" and path == "/api/watchlist/folders":
            result = self.store.create_folder(body["name"])
        elif method == "DELETE" and path.startswith("/api/watchlist/folders/"):
            result = self.store.delete_folder(path.rsplit("/", 1)[1])
        elif method == "PUT" and path.endswith("/folder"):
            result = self.store.assign_item_to_folder(path.split("/")[-2], body["folder"])
        else:
            return httpx.Response(404, json={"detail": "Not Found"})

        if "error" in result:
            return httpx.Response(
                http_status_for(result),
                json={"success": False, "error": result["error"], "code": result["code"].value},
            )
        return httpx.Response(
            200, json={k: v.dump() if hasattr(v, "dump") else v for k, v in result.items()}
        )

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
async def api(server):
    client = WatchlistClient(
        USER_ID,
        "test-secret",
        base_url="http://testserver/api",
        transport=httpx.MockTransport(server),
    )
    yield client
    await client.aclose()


@pytest.fixture
def cache(api):
    return WatchlistCache(api)


async def test_refresh_loads_snapshot(server, cache):
    server.store.add_item("Dune", "Movies")
    assert await cache.refresh() is True
    assert cache.loaded
    assert [i.title for i in cache.items] == ["Dune"]
    assert cache.active_tab == "Movies"


async def test_every_mutation_refetches(server, cache):
    await cache.add_item("Dune", "Movies")
    await cache.create_folder("Epics")
    assert server.count("GET", "/api/watchlist") == 2


async def test_failed_mutation_still_refetches(server, cache):
    await cache.add_item("Dune", "Movies")
    result = await cache.add_item("Dune", "Movies")
    assert result["code"] == ErrorCode.DUPLICATE_ITEM
    assert cache.last_error == result
    assert server.count("GET", "/api/watchlist") == 2
    assert len(cache.items) == 1


async def test_failed_refresh_keeps_last_snapshot(server, cache):
    await cache.add_item("Dune", "Movies")
    server.down = True
    assert await cache.refresh() is False
    assert [i.title for i in cache.items] == ["Dune"]
    assert cache.last_error["code"] == ErrorCode.SERVICE_UNAVAILABLE


async def test_transport_error_is_service_unavailable(server, api):
    server.down = True
    result = await api.create_folder("Epics")
    assert result["code"] == ErrorCode.SERVICE_UNAVAILABLE


async def test_unknown_route_is_rejected(api):
    result = await api.rename_folder("abc", "New")
    assert result["code"] == ErrorCode.VALIDATION_FAILED


async def test_dune_epics_scenario(cache):
    added = await cache.add_item("Dune", "Movies")
    dune_id = added["item"]["id"]
    assert added["item"]["status"] == "Plan to Watch"

    created = await cache.create_folder("Epics")
    folder_id = created["folder"]["id"]
    assert cache.active_tab == "Epics"
    assert cache.tab_items() == []

    await cache.move_item(dune_id, "Epics")
    assert [i.title for i in cache.grouped["Epics"]] == ["Dune"]
    assert [i.title for i in cache.grouped["Movies"]] == ["Dune"]

    await cache.delete_folder(folder_id)
    assert "Epics" not in cache.grouped
    assert cache.active_tab == "Movies"
    dune = cache.items[0]
    assert dune.title == "Dune"
    assert dune.folders == []
    assert cache.tab_items() == [dune]


async def test_status_filter(cache):
    await cache.add_item("Dune", "Movies", status="Completed")
    await cache.add_item("Arrival", "Movies")
    cache.set_status_filter("Completed")
    assert [i.title for i in cache.grouped["Movies"]] == ["Dune"]
    cache.set_status_filter("All")
    assert len(cache.grouped["Movies"]) == 2
