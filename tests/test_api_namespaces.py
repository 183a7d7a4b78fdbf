from __future__ import annotations


async def _seed(service_client, clock, count: int) -> None:
    for i in range(count):
        clock.advance()
        resp = await service_client.post(f"/fleet/sensor-{i:02d}", params={"value": str(i)})
        assert resp.status == 200


async def test_namespace_pages(service_client, clock):
    await _seed(service_client, clock, 25)

    resp = await service_client.get("/fleet")
    assert resp.status == 200
    first = await resp.json()
    assert first["total_pages"] == 3
    assert first["current_page"] == 1
    assert len(first["charts"]) == 12
    assert first["has_prev"] is False
    assert first["has_next"] is True
    assert first["charts"][0]["id"] == "sensor-24"
    assert first["charts"][0]["point_count"] == 1
    assert first["charts"][0]["last_updated"].endswith(" UTC")

    resp = await service_client.get("/fleet", params={"page": "3"})
    last = await resp.json()
    assert len(last["charts"]) == 1
    assert last["has_prev"] is True
    assert last["has_next"] is False


async def test_invalid_page_rejected(service_client):
    resp = await service_client.get("/fleet", params={"page": "two"})
    assert resp.status == 400
    resp = await service_client.get("/fleet", params={"page": "-1"})
    assert resp.status == 400


async def test_empty_namespace(service_client):
    resp = await service_client.get("/nobody")
    assert resp.status == 200
    body = await resp.json()
    assert body["charts"] == []
    assert body["total_pages"] == 0
    assert body["current_page"] == 1
