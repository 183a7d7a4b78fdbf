from __future__ import annotations


async def test_health_ok(service_client):
    resp = await service_client.get("/health")
    assert resp.status == 200
    payload = await resp.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "metric-charts-service"


async def test_request_id_is_echoed(service_client):
    resp = await service_client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.headers["X-Request-ID"] == "abc123"


async def test_health_namespace_cannot_be_written(service_client):
    resp = await service_client.post("/health/cpu", params={"value": "1"})
    assert resp.status == 400
    assert "reserved" in (await resp.json())["error"]

    resp = await service_client.get("/health")
    assert (await resp.json())["status"] == "ok"
