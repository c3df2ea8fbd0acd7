"""Applications API tests — public submission rules and admin review."""

from datetime import datetime, timedelta, timezone

import pytest

JOB = {
    "job_title": "Data Analyst",
    "department": "Analytics",
    "location": "Berlin",
    "job_type": "Full-time",
    "experience_level": "Entry Level",
    "description": "Turn raw product data into decisions.",
    "responsibilities": ["Build dashboards"],
    "requirements": ["SQL"],
}

RESUME = ("cv.pdf", b"%PDF-1.7 resume", "application/pdf")


async def _career(client, admin, **overrides):
    r = await client.post("/api/careers", json={**JOB, **overrides}, headers=admin["headers"])
    assert r.status_code == 201, r.text
    return r.json()["data"]


async def _apply(client, career_id, resume=RESUME, **overrides):
    data = {
        "career_id": career_id,
        "applicant_name": "Katherine Johnson",
        "applicant_email": "katherine@example.com",
        **overrides,
    }
    files = {"resume": resume} if resume else None
    return await client.post("/api/applications", data=data, files=files)


@pytest.mark.asyncio
async def test_submit_application(client, admin, blob_store):
    career = await _career(client, admin)
    r = await _apply(client, career["id"], cover_letter="I love turning data into answers.")
    assert r.status_code == 201, r.text
    application = r.json()["data"]
    assert application["id"].startswith("APP")
    assert application["career_id"] == career["id"]
    key = f"resumes/{application['id']}-cv.pdf"
    assert key in blob_store.objects
    assert application["resume_link"].endswith(key)


@pytest.mark.asyncio
async def test_submit_requires_resume(client, admin):
    career = await _career(client, admin)
    r = await _apply(client, career["id"], resume=None)
    assert r.status_code == 400
    assert r.json()["message"] == "Resume file is required"


@pytest.mark.asyncio
async def test_submit_to_missing_job(client):
    r = await _apply(client, "CARMISSING")
    assert r.status_code == 404
    assert r.json()["message"] == "Job posting not found"


@pytest.mark.asyncio
async def test_submit_to_inactive_job(client, admin, blob_store):
    career = await _career(client, admin, is_active=False)
    r = await _apply(client, career["id"])
    assert r.status_code == 400
    assert r.json()["message"] == "This job posting is no longer accepting applications"
    assert blob_store.objects == {}


@pytest.mark.asyncio
async def test_submit_after_deadline(client, admin):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    career = await _career(client, admin, application_deadline=past)
    r = await _apply(client, career["id"])
    assert r.status_code == 400
    assert r.json()["message"] == "Application deadline has passed"


@pytest.mark.asyncio
async def test_submit_before_deadline(client, admin):
    future = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()
    career = await _career(client, admin, application_deadline=future)
    r = await _apply(client, career["id"])
    assert r.status_code == 201


@pytest.mark.asyncio
async def test_submit_validates_email(client, admin):
    career = await _career(client, admin)
    r = await _apply(client, career["id"], applicant_email="nope")
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_resume_upload_failure(client, admin, blob_store):
    career = await _career(client, admin)
    blob_store.fail_uploads = True
    r = await _apply(client, career["id"])
    assert r.status_code == 500
    assert r.json()["message"] == "Internal server error"


@pytest.mark.asyncio
async def test_admin_lists_applications(client, admin, member):
    first = await _career(client, admin)
    second = await _career(client, admin, job_title="Data Engineer")
    await _apply(client, first["id"])
    await _apply(client, second["id"], applicant_email="other@example.com")

    assert (await client.get("/api/applications")).status_code == 401
    assert (await client.get("/api/applications", headers=member["headers"])).status_code == 403

    everything = await client.get("/api/applications", headers=admin["headers"])
    assert len(everything.json()["data"]) == 2

    filtered = await client.get(
        "/api/applications", params={"career_id": first["id"]}, headers=admin["headers"]
    )
    assert [a["career_id"] for a in filtered.json()["data"]] == [first["id"]]


@pytest.mark.asyncio
async def test_applications_for_career(client, admin):
    career = await _career(client, admin)
    await _apply(client, career["id"])
    await _apply(client, career["id"], applicant_email="second@example.com")

    r = await client.get(f"/api/applications/career/{career['id']}", headers=admin["headers"])
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["job"]["id"] == career["id"]
    assert data["total_applications"] == 2
    assert len(data["applications"]) == 2

    missing = await client.get("/api/applications/career/CARMISSING", headers=admin["headers"])
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_get_and_delete_application(client, admin, blob_store):
    career = await _career(client, admin)
    application = (await _apply(client, career["id"])).json()["data"]
    url = f"/api/applications/{application['id']}"

    r = await client.get(url, headers=admin["headers"])
    assert r.status_code == 200
    assert r.json()["data"]["applicant_name"] == "Katherine Johnson"

    r = await client.delete(url, headers=admin["headers"])
    assert r.status_code == 200
    assert blob_store.objects == {}
    assert (await client.get(url, headers=admin["headers"])).status_code == 404


@pytest.mark.asyncio
async def test_deleting_job_removes_its_applications(client, admin):
    career = await _career(client, admin)
    application = (await _apply(client, career["id"])).json()["data"]

    await client.delete(f"/api/careers/{career['id']}", headers=admin["headers"])

    r = await client.get(f"/api/applications/{application['id']}", headers=admin["headers"])
    assert r.status_code == 404
