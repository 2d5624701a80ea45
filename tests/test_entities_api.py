"""Search, company detail and rotten index tests."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError


async def test_search_empty_query_skips_database(client, monkeypatch):
    search = AsyncMock()
    monkeypatch.setattr("rotten.api.entities.search_companies", search)

    response = await client.get("/api/search-entities", params={"q": "   "})
    assert response.status_code == 200
    assert response.json() == {"results": []}
    search.assert_not_called()


async def test_search_limits_and_orders(client, seed):
    for i in range(12, 0, -1):
        await seed.company(name=f"Acme {i:02d}")
    await seed.company(name="Globex")

    response = await client.get("/api/search-entities", params={"q": "ACM"})
    results = response.json()["results"]
    assert len(results) == 10
    assert results[0] == {
        "name": "Acme 01",
        "slug": "acme-01",
        "submitEvidenceUrl": "/company/acme-01/submit-evidence",
    }
    assert [r["name"] for r in results] == sorted(r["name"] for r in results)


async def test_search_treats_wildcards_literally(client, seed):
    await seed.company(name="Acme Corp")
    response = await client.get("/api/search-entities", params={"q": "%"})
    assert response.json() == {"results": []}


async def test_search_failure_is_plain_text(client, monkeypatch):
    monkeypatch.setattr(
        "rotten.api.entities.search_companies",
        AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("gone"))),
    )
    response = await client.get("/api/search-entities", params={"q": "acme"})
    assert response.status_code == 500
    assert response.text == "Search failed"


async def test_company_detail(client, seed):
    company = await seed.company(name="Acme Corp", rotten_score=85.0, employees=120)
    await seed.evidence(company.id, status="approved", title="Shown")
    await seed.evidence(company.id, status="pending", title="Hidden")

    response = await client.get("/api/company/acme-corp")
    assert response.status_code == 200
    data = response.json()
    assert data["badge"] == "Rotten"
    assert data["color"] == "#B22222"
    assert data["flavor"] == {
        "macro_tier": "Working for the Empire from Star Wars",
        "micro_flavor": "The break room is a pit of despair.",
    }
    assert [e["title"] for e in data["evidence"]] == ["Shown"]


async def test_company_detail_unscored(client, seed):
    await seed.company(name="Globex")
    data = (await client.get("/api/company/globex")).json()
    assert data["rotten_score"] is None
    assert data["badge"] is None
    assert data["flavor"] is None


async def test_company_detail_not_found(client):
    response = await client.get("/api/company/nope")
    assert response.status_code == 404
    assert response.json() == {"error": "not_found"}


async def test_rotten_index(client, seed):
    await seed.company(name="Big Bad", rotten_score=90.0, employees=90)
    await seed.company(name="Small Bad", rotten_score=60.0)
    await seed.company(name="Unscored")

    raw = (await client.get("/api/rotten-index")).json()
    assert raw["normalization"] == "none"
    assert [r["slug"] for r in raw["results"]] == ["big-bad", "small-bad"]
    assert raw["results"][0]["badge"] == "Rotten"
    assert raw["results"][0]["macro_tier"] == "Working for Satan"

    normalized = (await client.get("/api/rotten-index", params={"normalization": "employees"})).json()
    assert [r["slug"] for r in normalized["results"]] == ["small-bad", "big-bad"]
    big = normalized["results"][1]
    assert big["rotten_score"] == 90.0
    assert big["normalized_score"] == pytest.approx(19.54, abs=0.01)
    assert big["badge"] == "Fresh"


async def test_rotten_index_limit_and_validation(client, seed):
    await seed.company(name="A", rotten_score=10.0)
    await seed.company(name="B", rotten_score=20.0)

    data = (await client.get("/api/rotten-index", params={"limit": 1})).json()
    assert [r["slug"] for r in data["results"]] == ["b"]

    assert (await client.get("/api/rotten-index", params={"normalization": "bogus"})).status_code == 422
