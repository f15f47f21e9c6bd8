"""HTTP API: command and query endpoints."""

from exceptions import StoreUnavailableError


URL = "https://example.com"


async def test_root_is_ok(api_client):
    resp = await api_client.get("/")

    assert resp.status == 200
    assert await resp.text() == "OK"


async def test_health(api_client):
    resp = await api_client.get("/health")
    body = await resp.json()

    assert resp.status == 200
    assert body["status"] == "healthy"
    assert body["database"]["status"] == "connected"
    assert "scheduler" in body


async def test_default_action_adds_and_starts(api_client):
    resp = await api_client.post("/api/urls", json={"url": URL})
    body = await resp.json()

    assert resp.status == 200
    assert body["action"] == "ensure_started"
    assert body["target"]["active"] is True
    assert body["data"]["urls"] == [URL]
    assert body["data"]["active"][URL] is True


async def test_add_then_query(api_client):
    resp = await api_client.post("/api/urls", json={"url": URL, "action": "add"})
    assert resp.status == 200

    resp = await api_client.get("/api/urls")
    body = await resp.json()

    assert body == {
        "urls": [URL],
        "active": {URL: False},
        "counters": {URL: 0},
        "totalRequests": {URL: 0},
        "startTimes": {URL: None},
    }


async def test_start_stop_cycle(api_client):
    await api_client.post("/api/urls", json={"url": URL, "action": "start"})
    resp = await api_client.post("/api/urls", json={"url": URL, "action": "stop"})
    body = await resp.json()

    assert resp.status == 200
    assert body["message"] == f"URL {URL} stopped"
    assert body["target"]["active"] is False
    assert body["target"]["startTime"] is None


async def test_stop_unknown_url_is_404(api_client):
    resp = await api_client.post("/api/urls", json={"url": URL, "action": "stop"})
    body = await resp.json()

    assert resp.status == 404
    assert body["message"] == f"URL {URL} not found"


async def test_counter_unknown_url_is_404(api_client):
    resp = await api_client.post("/api/urls", json={"url": URL, "action": "counter"})

    assert resp.status == 404


async def test_delete(api_client):
    await api_client.post("/api/urls", json={"url": URL})
    resp = await api_client.post("/api/urls", json={"url": URL, "action": "delete"})
    body = await resp.json()

    assert resp.status == 200
    assert body["target"] is None
    assert body["data"]["urls"] == []


async def test_invalid_url_is_400(api_client):
    resp = await api_client.post("/api/urls", json={"url": "not a url"})

    assert resp.status == 400


async def test_missing_url_is_400(api_client):
    resp = await api_client.post("/api/urls", json={"action": "add"})

    assert resp.status == 400


async def test_malformed_body_is_400(api_client):
    resp = await api_client.post(
        "/api/urls", data="{oops", headers={"Content-Type": "application/json"}
    )

    assert resp.status == 400


async def test_non_object_body_is_400(api_client):
    resp = await api_client.post("/api/urls", json=[URL])

    assert resp.status == 400


async def test_counter_without_attempt_is_409(api_client):
    await api_client.post("/api/urls", json={"url": URL, "action": "start"})

    resp = await api_client.post("/api/urls", json={"url": URL, "action": "counter"})
    body = await resp.json()

    assert resp.status == 409
    assert body["message"] == (
        f"Counter for URL {URL} not updated: successes cannot exceed attempts"
    )

    resp = await api_client.get("/api/urls")
    assert (await resp.json())["counters"] == {URL: 0}


async def test_counter_after_attempt_is_200(api_client, registry):
    await api_client.post("/api/urls", json={"url": URL, "action": "start"})
    await registry.record_attempt(URL)

    resp = await api_client.post("/api/urls", json={"url": URL, "action": "counter"})
    body = await resp.json()

    assert resp.status == 200
    assert body["target"]["requestCount"] == 1


async def _store_down(*args, **kwargs):
    raise StoreUnavailableError("store down")


async def test_query_with_store_down_is_503(api_client, registry, monkeypatch):
    monkeypatch.setattr(registry, "list_all", _store_down)

    resp = await api_client.get("/api/urls")
    body = await resp.json()

    assert resp.status == 503
    assert body["message"] == "The target store is unavailable. Please try again later."


async def test_command_with_store_down_is_503(api_client, registry, monkeypatch):
    monkeypatch.setattr(registry, "add", _store_down)

    resp = await api_client.post("/api/urls", json={"url": URL, "action": "add"})
    body = await resp.json()

    assert resp.status == 503
    assert body["message"] == "The target store is unavailable. Please try again later."
