"""Tests for middleware — security headers, request IDs."""

import pytest


@pytest.mark.asyncio
async def test_security_headers(client):
    r = await client.get("/api/pingme")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_user_routes_are_not_cached(client):
    r = await client.get("/api/users/me")
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/api/pingme")
    r2 = await client.get("/api/pingme")
    assert r1.headers["X-Request-ID"]
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/api/pingme", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


@pytest.mark.asyncio
async def test_no_hsts_on_http_in_development(client):
    r = await client.get("/api/pingme")
    assert "Strict-Transport-Security" not in r.headers
