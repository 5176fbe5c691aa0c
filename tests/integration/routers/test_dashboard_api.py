# tests/integration/routers/test_dashboard_api.py
# Copyright (c) Stacklion.
# SPDX-License-Identifier: MIT
"""
End-to-end HTTP tests over the full application and a SQLite database:
record writes feed the dashboard, the result cache and the status marker.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest

USER = {"X-User-Id": "1"}

INVOICE: dict[str, Any] = {
    "invoiceNumber": "F-2024-001",
    "issueDate": "2024-03-15",
    "subtotal": "1000.00",
    "tax": "210.00",
    "total": "1210.00",
    "status": "PAID",
    "additionalTaxes": [{"name": "IVA", "amount": 21, "isPercentage": True}],
}

EXPENSE: dict[str, Any] = {
    "title": "Laptop",
    "amount": "121.00",
    "date": "2024-03-20",
    "type": "expense",
    "additionalTaxes": [{"name": "IVA", "amount": "21", "isPercentage": True}],
}


async def _dashboard(client: httpx.AsyncClient, **params: str) -> httpx.Response:
    return await client.get("/api/stats/dashboard", params=params, headers=USER)


@pytest.mark.asyncio
async def test_missing_identity_is_401(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/stats/dashboard")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "INVALID_USER"

    r = await client.get("/api/dashboard-status", headers={"X-User-Id": "abc"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_empty_dashboard_shape(client: httpx.AsyncClient) -> None:
    r = await _dashboard(client, year="2024", period="q2")
    assert r.status_code == 200
    body = r.json()
    assert body["income"] == 0
    assert body["taxes"] == {"vat": 0, "vatSigned": 0, "incomeTax": 0, "ivaALiquidar": 0}
    assert body["filter"]["appliedYear"] == "2024"
    assert body["filter"]["appliedPeriod"] == "q2"
    assert body["filter"]["wasFiltered"] is True
    assert body["filter"]["periodOptions"][:5] == ["all", "q1", "q2", "q3", "q4"]
    assert body["filter"]["periodOptions"][-1] == "m12"
    assert body["filter"]["error"] is False
    assert r.headers["X-Dashboard-Year"] == "2024"
    assert r.headers["X-Dashboard-Period"] == "q2"
    assert r.headers["Cache-Control"] == "no-store, private, max-age=0"


@pytest.mark.asyncio
async def test_records_feed_the_dashboard_and_cache(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/invoices", json=INVOICE, headers=USER)
    assert r.status_code == 201
    invoice = r.json()["data"]
    assert invoice["total"] == "1210.00"
    assert invoice["status"] == "paid"

    r = await client.post("/api/transactions", json=EXPENSE, headers=USER)
    assert r.status_code == 201
    assert r.json()["data"]["date"] == "2024-03-20"

    first = await _dashboard(client, year="2024", period="q1")
    body = first.json()
    assert first.headers["X-Dashboard-Cache"] == "MISS"
    assert body["income"] == 1000.0
    assert body["expenses"] == 100.0
    assert body["taxStats"]["ivaRepercutido"] == 210.0
    assert body["taxStats"]["ivaSoportado"] == 21.0
    assert body["taxes"]["vat"] == 189.0
    assert body["baseImponible"] == 1000.0
    assert body["invoices"]["paid"] == 1
    assert 2024 in body["filter"]["yearOptions"]

    second = await _dashboard(client, year="2024", period="q1")
    assert second.headers["X-Dashboard-Cache"] == "HIT"
    assert second.json() == body

    other_user = await client.get(
        "/api/stats/dashboard", params={"year": "2024"}, headers={"X-User-Id": "2"}
    )
    assert other_user.json()["income"] == 0

    refreshed = await _dashboard(client, year="2024", period="q1", forceRefresh="true")
    assert refreshed.headers["X-Dashboard-Cache"] == "MISS"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"timestamp": "1718000000000.5"},
        {"timestamp": "2024-06-01T00:00:00Z"},
        {"forceRefresh": "maybe"},
        {"forceRefresh": "1", "timestamp": ""},
        {"period": "h1"},
    ],
)
async def test_dashboard_query_values_are_never_rejected(
    client: httpx.AsyncClient, params: dict[str, str]
) -> None:
    r = await _dashboard(client, year="2024", **params)
    assert r.status_code == 200
    assert r.json()["filter"]["error"] is False


@pytest.mark.asyncio
async def test_force_refresh_flag_is_case_insensitive_and_strict(
    client: httpx.AsyncClient,
) -> None:
    await _dashboard(client, year="2024")
    assert (await _dashboard(client, year="2024", forceRefresh="yes")).headers[
        "X-Dashboard-Cache"
    ] == "HIT"
    assert (await _dashboard(client, year="2024", forceRefresh="TRUE")).headers[
        "X-Dashboard-Cache"
    ] == "MISS"


@pytest.mark.asyncio
async def test_stored_tax_value_drives_the_dashboard(client: httpx.AsyncClient) -> None:
    expense = {
        **EXPENSE,
        "amount": "125.00",
        "additionalTaxes": [
            {"name": "IVA", "amount": "21", "isPercentage": True, "value": "21.00"}
        ],
    }
    r = await client.post("/api/transactions", json=expense, headers=USER)
    assert r.status_code == 201
    assert r.json()["data"]["additionalTaxes"][0]["value"] == "21.00"

    body = (await _dashboard(client, year="2024", period="q1")).json()
    assert body["expenses"] == 100.0
    assert body["taxStats"]["ivaSoportado"] == 21.0


@pytest.mark.asyncio
async def test_clear_cache_forces_recompute(client: httpx.AsyncClient) -> None:
    await _dashboard(client, year="2024")
    r = await client.post("/api/stats/dashboard-cached/clear", headers=USER)
    assert r.status_code == 200
    assert r.json() == {"message": "Dashboard cache cleared for user 1", "entriesDeleted": 1}

    again = await _dashboard(client, year="2024")
    assert again.headers["X-Dashboard-Cache"] == "MISS"


@pytest.mark.asyncio
async def test_invalid_year_answers_zeroes(client: httpx.AsyncClient) -> None:
    r = await _dashboard(client, year="20x4")
    assert r.status_code == 200
    assert r.json()["income"] == 0
    assert r.json()["filter"]["error"] is False


@pytest.mark.asyncio
async def test_writes_move_the_status_marker(client: httpx.AsyncClient) -> None:
    r = await client.get("/api/dashboard-status", headers=USER)
    assert r.status_code == 200
    initial = r.json()
    assert initial["lastEvent"] == "initial"

    r = await client.post("/api/quotes", json={
        "quoteNumber": "P-1",
        "issueDate": "2024-04-01",
        "subtotal": "500.00",
        "total": "500.00",
        "status": "sent",
    }, headers=USER)
    assert r.status_code == 201
    quote_id = r.json()["data"]["id"]

    after_create = (await client.get("/api/dashboard-status", headers=USER)).json()
    assert after_create["lastEvent"] == "quote-created"
    assert after_create["updated_at"] > initial["updated_at"]

    r = await client.delete(f"/api/quotes/{quote_id}", headers=USER)
    assert r.status_code == 200
    assert r.json()["data"] == {"id": quote_id, "deleted": True}

    after_delete = (await client.get("/api/dashboard-status", headers=USER)).json()
    assert after_delete["lastEvent"] == "quote-deleted"
    assert after_delete["updated_at"] > after_create["updated_at"]

    events = (await client.get("/api/dashboard-status/events", headers=USER)).json()["data"]
    assert [e["eventType"] for e in events] == ["quote-deleted", "quote-created"]


@pytest.mark.asyncio
async def test_manual_touch(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/dashboard-status/touch", headers=USER)
    assert r.status_code == 200
    assert r.json()["lastEvent"] == "manual-update"

    r = await client.post(
        "/api/dashboard-status/touch", json={"eventType": "import-finished"}, headers=USER
    )
    assert r.json()["lastEvent"] == "import-finished"


@pytest.mark.asyncio
async def test_unknown_record_is_404(client: httpx.AsyncClient) -> None:
    r = await client.put("/api/invoices/999", json=INVOICE, headers=USER)
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "RECORD_NOT_FOUND"

    r = await client.delete("/api/transactions/999", headers=USER)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_invalid_payload_is_422(client: httpx.AsyncClient) -> None:
    r = await client.post("/api/invoices", json={**INVOICE, "status": "lost"}, headers=USER)
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_health_and_metrics(client: httpx.AsyncClient) -> None:
    r = await client.get("/healthz")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

    r = await client.get("/metrics")
    assert r.status_code == 200
    assert "http_server_request_duration_seconds" in r.text
