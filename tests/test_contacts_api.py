"""Contacts API tests — public submission, admin management."""

import pytest

CONTACT = {
    "name": "Grace Hopper",
    "email": "grace@navy.test",
    "company_name": "Navy",
    "service_interested": "Compilers",
    "message": "We would like to talk about a new project.",
}


async def _submit(client, **overrides):
    r = await client.post("/api/contacts", json={**CONTACT, **overrides})
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_public_submit(client):
    contact = await _submit(client)
    assert contact["id"].startswith("CNT")
    assert contact["email"] == "grace@navy.test"


@pytest.mark.asyncio
async def test_submit_validates(client):
    r = await client.post("/api/contacts", json={**CONTACT, "email": "not-an-email"})
    assert r.status_code == 400
    assert r.json()["success"] is False

    r = await client.post("/api/contacts", json={**CONTACT, "message": "short"})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_list_is_admin_only(client, admin, member):
    await _submit(client)
    await _submit(client, name="Alan Turing", email="alan@bletchley.test")

    assert (await client.get("/api/contacts/all")).status_code == 401
    assert (await client.get("/api/contacts/all", headers=member["headers"])).status_code == 403

    r = await client.get("/api/contacts/all", headers=admin["headers"])
    assert r.status_code == 200
    assert [c["name"] for c in r.json()["data"]] == ["Alan Turing", "Grace Hopper"]


@pytest.mark.asyncio
async def test_get_update_delete(client, admin):
    contact = await _submit(client)
    url = f"/api/contacts/{contact['id']}"

    r = await client.get(url, headers=admin["headers"])
    assert r.status_code == 200

    r = await client.put(url, json={"phone": "5551234567"}, headers=admin["headers"])
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["phone"] == "5551234567"
    assert updated["message"] == CONTACT["message"]

    r = await client.put(url, json={}, headers=admin["headers"])
    assert r.status_code == 400
    assert r.json()["message"] == "No fields to update"

    r = await client.delete(url, headers=admin["headers"])
    assert r.status_code == 200
    assert (await client.get(url, headers=admin["headers"])).status_code == 404


@pytest.mark.asyncio
async def test_missing_contact(client, admin):
    r = await client.delete("/api/contacts/CNTMISSING", headers=admin["headers"])
    assert r.status_code == 404
    assert r.json()["message"] == "Contact not found"
