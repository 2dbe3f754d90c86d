"""HTTP tests for the dice API routes and error envelope."""

from __future__ import annotations

import logging

from dicebox.dependencies import get_random_source
from dicebox.main import app


async def test_health(async_client):
    resp = await async_client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert "timestamp" in body


async def test_roll_compound_expression(async_client, scripted_source):
    scripted_source.queue(4, 5, 3)
    resp = await async_client.post("/api/dice/roll", json={"expression": "2d6+1d4+3"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["expression"] == "2d6+1d4+3"
    assert body["results"] == [
        {"notation": "2d6", "rolls": [4, 5], "subtotal": 9},
        {"notation": "1d4", "rolls": [3], "subtotal": 3},
    ]
    assert body["modifiers"] == [3]
    assert body["total"] == 15
    assert body["advantageMode"] == "none"
    assert "alternateRoll" not in body
    assert "timestamp" in body


async def test_roll_with_advantage(async_client, scripted_source):
    scripted_source.queue(8, 15)
    resp = await async_client.post(
        "/api/dice/roll", json={"expression": "1d20", "advantageMode": "advantage"}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 15
    assert body["advantageMode"] == "advantage"
    assert body["alternateRoll"]["total"] == 8
    assert body["alternateRoll"]["results"][0]["rolls"] == [8]
    assert "alternateRoll" not in body["alternateRoll"]


async def test_roll_with_disadvantage(async_client, scripted_source):
    scripted_source.queue(12, 5)
    resp = await async_client.post(
        "/api/dice/roll", json={"expression": "1d20+3", "advantageMode": "disadvantage"}
    )
    body = resp.json()
    assert body["total"] == 8
    assert body["alternateRoll"]["total"] == 15


async def test_roll_with_real_source(async_client):
    resp = await async_client.post("/api/dice/roll", json={"expression": "3d6"})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["results"][0]["rolls"]) == 3
    assert body["total"] == sum(body["results"][0]["rolls"])


async def test_invalid_expression_returns_400(async_client):
    resp = await async_client.post("/api/dice/roll", json={"expression": "0d6+2d0"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "ValidationError"
    fields = [d["field"] for d in body["details"]]
    assert "count" in fields
    assert "sides" in fields


async def test_resource_limit_returns_distinct_error(async_client):
    resp = await async_client.post("/api/dice/roll", json={"expression": "10000d10000"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "ResourceLimitError"
    assert "1000" in body["message"]


async def test_multi_group_advantage_rejected(async_client):
    resp = await async_client.post(
        "/api/dice/roll", json={"expression": "2d6+1d4+3", "advantageMode": "advantage"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "ValidationError"
    assert "single dice group" in resp.json()["message"]


async def test_unknown_mode_returns_400(async_client):
    resp = await async_client.post(
        "/api/dice/roll", json={"expression": "1d20", "advantageMode": "lucky"}
    )
    assert resp.status_code == 400
    assert "Must be one of" in resp.json()["message"]


async def test_missing_expression_returns_400(async_client):
    resp = await async_client.post("/api/dice/roll", json={})
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"] == "ValidationError"
    assert body["message"] == "Expression is required and must be a string"


async def test_non_string_expression_returns_400(async_client):
    resp = await async_client.post("/api/dice/roll", json={"expression": 42})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Expression is required and must be a string"


async def test_random_source_failure_returns_500(async_client):
    class _Broken:
        def draw(self, low: int, high: int) -> int:
            return high + 1

    app.dependency_overrides[get_random_source] = lambda: _Broken()
    try:
        resp = await async_client.post("/api/dice/roll", json={"expression": "1d6"})
    finally:
        app.dependency_overrides.pop(get_random_source, None)
    assert resp.status_code == 500
    assert resp.json()["error"] == "InternalError"


async def test_requests_are_logged(async_client, caplog):
    with caplog.at_level(logging.INFO, logger="dicebox.main"):
        resp = await async_client.post("/api/dice/roll", json={"expression": "0d6"})
    assert resp.status_code == 400
    records = [r for r in caplog.records if r.name == "dicebox.main"]
    assert len(records) == 1
    assert records[0].levelno == logging.INFO
    assert "POST /api/dice/roll -> 400" in records[0].getMessage()
