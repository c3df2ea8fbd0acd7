"""Projects API tests — multipart create/update with image lifecycle."""

import pytest

from pipecraft.errors import NotFoundError
from pipecraft.services import project_service

PROJECT = {
    "name": "Harbor Portal",
    "client": "Port Authority",
    "scope": "Customer portal with booking and billing.",
}


async def _create(client, admin, image=None, **overrides):
    files = {"image": image} if image else None
    r = await client.post(
        "/api/projects", data={**PROJECT, **overrides}, files=files, headers=admin["headers"]
    )
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.mark.asyncio
async def test_create_without_image(client, admin):
    project = await _create(client, admin)
    assert project["id"].startswith("PRJ")
    assert project["image"] is None


@pytest.mark.asyncio
async def test_create_with_image(client, admin, blob_store):
    project = await _create(client, admin, image=("cover.png", b"png", "image/png"))
    key = f"projects/{project['id']}-cover.png"
    assert key in blob_store.objects
    assert project["image"].endswith(key)


@pytest.mark.asyncio
async def test_create_validates_fields(client, admin):
    r = await client.post(
        "/api/projects", data={**PROJECT, "scope": "tiny"}, headers=admin["headers"]
    )
    assert r.status_code == 400
    assert any(e["field"] == "scope" for e in r.json()["errors"])


@pytest.mark.asyncio
async def test_public_read(client, admin):
    project = await _create(client, admin)
    listing = await client.get("/api/projects")
    assert listing.status_code == 200
    assert [p["id"] for p in listing.json()["data"]] == [project["id"]]

    r = await client.get(f"/api/projects/{project['id']}")
    assert r.status_code == 200
    assert (await client.get("/api/projects/PRJMISSING")).status_code == 404


@pytest.mark.asyncio
async def test_update_text_only(client, admin, blob_store):
    project = await _create(client, admin, image=("cover.png", b"png", "image/png"))
    r = await client.put(
        f"/api/projects/{project['id']}",
        data={"client": "Harbor Authority"},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    updated = r.json()["data"]
    assert updated["client"] == "Harbor Authority"
    assert updated["image"] == project["image"]
    assert blob_store.deleted == []


@pytest.mark.asyncio
async def test_update_replaces_image(client, admin, blob_store):
    project = await _create(client, admin, image=("old.png", b"old", "image/png"))
    r = await client.put(
        f"/api/projects/{project['id']}",
        files={"image": ("new.png", b"new", "image/png")},
        headers=admin["headers"],
    )
    assert r.status_code == 200
    assert r.json()["data"]["image"].endswith(f"projects/{project['id']}-new.png")
    assert blob_store.deleted == [f"projects/{project['id']}-old.png"]


@pytest.mark.asyncio
async def test_update_without_changes(client, admin):
    project = await _create(client, admin)
    r = await client.put(f"/api/projects/{project['id']}", headers=admin["headers"])
    assert r.status_code == 400
    assert r.json()["message"] == "No fields to update"


@pytest.mark.asyncio
async def test_upload_failure_leaves_project_unchanged(client, admin, blob_store):
    project = await _create(client, admin, image=("old.png", b"old", "image/png"))
    blob_store.fail_uploads = True

    r = await client.put(
        f"/api/projects/{project['id']}",
        files={"image": ("new.png", b"new", "image/png")},
        headers=admin["headers"],
    )
    assert r.status_code == 500

    current = (await client.get(f"/api/projects/{project['id']}")).json()["data"]
    assert current["image"] == project["image"]


@pytest.mark.asyncio
async def test_failed_update_keeps_old_image_and_drops_new(
    client, admin, blob_store, monkeypatch
):
    """The row write fails after the upload: the old object must survive."""
    project = await _create(client, admin, image=("old.png", b"old", "image/png"))

    async def _vanished(db, record_id, changes, **kwargs):
        raise NotFoundError("Project not found")

    monkeypatch.setattr(project_service.project_patch, "apply", _vanished)
    r = await client.put(
        f"/api/projects/{project['id']}",
        files={"image": ("new.png", b"new", "image/png")},
        headers=admin["headers"],
    )
    assert r.status_code == 404

    current = (await client.get(f"/api/projects/{project['id']}")).json()["data"]
    assert current["image"] == project["image"]
    assert f"projects/{project['id']}-old.png" in blob_store.objects
    assert f"projects/{project['id']}-new.png" not in blob_store.objects


@pytest.mark.asyncio
async def test_delete_removes_image(client, admin, blob_store):
    project = await _create(client, admin, image=("cover.png", b"png", "image/png"))
    r = await client.delete(f"/api/projects/{project['id']}", headers=admin["headers"])
    assert r.status_code == 200
    assert blob_store.objects == {}
    assert (await client.get(f"/api/projects/{project['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_tolerates_blob_failure(client, admin, blob_store):
    project = await _create(client, admin, image=("cover.png", b"png", "image/png"))
    blob_store.fail_deletes = True
    r = await client.delete(f"/api/projects/{project['id']}", headers=admin["headers"])
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_writes_are_admin_only(client, member):
    r = await client.post("/api/projects", data=PROJECT, headers=member["headers"])
    assert r.status_code == 403
