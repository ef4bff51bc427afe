"""Integration tests for the Realtime Database REST client"""

import httpx
import pytest

from factories import STORE_BASE_URL
from perpus_portal.domain.exceptions import TransportError
from perpus_portal.infrastructure.clients.store import RealtimeStoreClient


async def test_get_missing_path_returns_none(store_client: RealtimeStoreClient):
    assert await store_client.get("Members") is None


async def test_push_then_get(store_client: RealtimeStoreClient, store_tree):
    key = await store_client.push("Members", {"email": "a@example.com"})

    assert key.startswith("-")
    assert store_tree["Members"][key] == {"email": "a@example.com"}
    assert await store_client.get(f"Members/{key}") == {"email": "a@example.com"}


async def test_update_merges_fields(store_client: RealtimeStoreClient, store_tree):
    store_tree["Members"] = {"m1": {"email": "a@example.com", "phone": "1"}}

    await store_client.update("Members/m1", {"phone": "2"})

    assert store_tree["Members"]["m1"] == {"email": "a@example.com", "phone": "2"}


async def test_missing_auth_token_is_a_transport_error(store_app):
    client = RealtimeStoreClient(
        base_url=STORE_BASE_URL,
        auth_token="",
        transport=httpx.ASGITransport(app=store_app),
    )

    with pytest.raises(TransportError, match="Store error: 401"):
        await client.get("Members")


async def test_network_failure_is_a_transport_error():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = RealtimeStoreClient(base_url=STORE_BASE_URL, transport=httpx.MockTransport(refuse))

    with pytest.raises(TransportError, match="Store unreachable") as excinfo:
        await client.get("Transactions")
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


async def test_timeout_is_a_transport_error():
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = RealtimeStoreClient(base_url=STORE_BASE_URL, timeout=0.5, transport=httpx.MockTransport(slow))

    with pytest.raises(TransportError, match="timeout after 0.5s"):
        await client.get("Members")


async def test_invalid_json_is_a_transport_error():
    client = RealtimeStoreClient(
        base_url=STORE_BASE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")),
    )

    with pytest.raises(TransportError, match="Invalid JSON"):
        await client.get("Members")


async def test_push_without_key_is_a_transport_error():
    client = RealtimeStoreClient(
        base_url=STORE_BASE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"unexpected": True})),
    )

    with pytest.raises(TransportError, match="Invalid push response"):
        await client.push("Members", {"email": "a@example.com"})


async def test_requests_target_json_paths_with_auth():
    seen = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=None)

    client = RealtimeStoreClient(base_url="https://demo-default-rtdb.firebaseio.com/", auth_token="tok", transport=httpx.MockTransport(record))
    await client.get("/Members/-Nabc/")

    assert seen[0].url.path == "/Members/-Nabc.json"
    assert seen[0].url.params["auth"] == "tok"
