"""Services API tests — catalog with unique titles."""

import pytest

SERVICE = {
    "title": "Cloud Migration",
    "description": "Move workloads to the cloud without downtime.",
    "features": ["Assessment", "Cutover plan"],
}


async def _create(client, admin, **overrides):
    r = await client.post("/api/services", json={**SERVICE, **overrides}, headers=admin["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_create_and_get(client, admin):
    service = await _create(client, admin)
    assert service["id"].startswith("SRV")
    assert service["is_active"] is True

    r = await client.get(f"/api/services/{service['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["features"] == ["Assessment", "Cutover plan"]


@pytest.mark.asyncio
async def test_duplicate_title(client, admin):
    await _create(client, admin)
    r = await client.post("/api/services", json=SERVICE, headers=admin["headers"])
    assert r.status_code == 409
    assert r.json()["message"] == "Service with this title already exists"


@pytest.mark.asyncio
async def test_list_with_active_filter(client, admin):
    await _create(client, admin)
    await _create(client, admin, title="Legacy Support", is_active=False)

    everything = (await client.get("/api/services")).json()["data"]
    assert len(everything) == 2

    active = (await client.get("/api/services", params={"is_active": "true"})).json()["data"]
    assert [s["title"] for s in active] == ["Cloud Migration"]


@pytest.mark.asyncio
async def test_empty_patch_leaves_service_unchanged(client, admin):
    """Scenario D."""
    service = await _create(client, admin)
    before = (await client.get(f"/api/services/{service['id']}")).json()["data"]

    r = await client.put(f"/api/services/{service['id']}", json={}, headers=admin["headers"])
    assert r.status_code == 400
    assert r.json()["message"] == "No fields to update"

    after = (await client.get(f"/api/services/{service['id']}")).json()["data"]
    assert after == before


@pytest.mark.asyncio
async def test_update_title_conflict(client, admin):
    first = await _create(client, admin)
    await _create(client, admin, title="Data Engineering")

    r = await client.put(
        f"/api/services/{first['id']}",
        json={"title": "Data Engineering"},
        headers=admin["headers"],
    )
    assert r.status_code == 409

    # Resubmitting its own title is fine
    r = await client.put(
        f"/api/services/{first['id']}",
        json={"title": "Cloud Migration"},
        headers=admin["headers"],
    )
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_writes_are_admin_only(client, admin, member):
    service = await _create(client, admin)
    url = f"/api/services/{service['id']}"
    assert (await client.put(url, json={"is_active": False})).status_code == 401
    assert (
        await client.delete(url, headers=member["headers"])
    ).status_code == 403

    r = await client.delete(url, headers=admin["headers"])
    assert r.status_code == 200
    assert (await client.get(url)).status_code == 404
