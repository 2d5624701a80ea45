"""Evidence lookup, metadata and submission endpoint tests."""

import pytest


@pytest.mark.parametrize("raw", ["abc", "1.5", ""])
async def test_evidence_meta_rejects_non_integer_id(client, raw):
    response = await client.get("/api/moderation/evidence-meta", params={"id": raw})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid_id"}


async def test_evidence_meta_missing_param(client):
    response = await client.get("/api/moderation/evidence-meta")
    assert response.status_code == 400


async def test_evidence_meta_unknown_id_defaults_to_pending(client):
    response = await client.get("/api/moderation/evidence-meta", params={"id": "999999"})
    assert response.status_code == 200
    assert response.json() == {"status": "pending", "assigned_moderator_id": None, "history": []}


async def test_evidence_meta_existing_row(client, seed):
    company = await seed.company()
    ev = await seed.evidence(company.id, status="rejected", assigned_moderator_id="mod-1")
    await seed.action("reject", "mod-1", "evidence", ev.id)

    response = await client.get("/api/moderation/evidence-meta", params={"id": ev.id})
    data = response.json()
    assert data["status"] == "rejected"
    assert data["assigned_moderator_id"] == "mod-1"
    assert [h["action"] for h in data["history"]] == ["reject"]
    assert data["history"][0]["moderator_id"] == "mod-1"


async def test_evidence_by_id(client, seed):
    user, _ = await seed.user()
    company = await seed.company()
    ev = await seed.evidence(company.id, user_id=user.id, severity=70, title="Wage theft")

    response = await client.get("/api/evidence/by-id", params={"id": str(ev.id)})
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == ev.id
    assert data["title"] == "Wage theft"
    assert data["severity"] == 70
    assert data["user_id"] == user.id
    assert data["entity_type"] == "company"
    assert data["entity_id"] == company.id
    assert data["status"] == "pending"


async def test_evidence_by_id_not_found(client):
    response = await client.get("/api/evidence/by-id", params={"id": "424242"})
    assert response.status_code == 404
    assert response.json() == {"error": "not_found"}


async def test_evidence_by_id_invalid(client):
    response = await client.get("/api/evidence/by-id", params={"id": "x1"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid_id"}


def _submission(entity_id, **overrides):
    body = {
        "title": "Union busting memo",
        "summary": "Leaked memo",
        "category": "union_busting",
        "severity": 65,
        "entity_type": "company",
        "entity_id": entity_id,
    }
    body.update(overrides)
    return body


async def test_submit_evidence(client, seed):
    user, headers = await seed.user()
    company = await seed.company()

    response = await client.post("/api/evidence/submit", json=_submission(company.id), headers=headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["user_id"] == user.id
    assert data["category"] == "union_busting"

    meta = await client.get("/api/moderation/evidence-meta", params={"id": data["id"]})
    assert meta.json()["status"] == "pending"


async def test_submit_requires_auth(client, seed):
    company = await seed.company()
    response = await client.post("/api/evidence/submit", json=_submission(company.id))
    assert response.status_code == 401
    assert response.json() == {"error": "not_authenticated"}


async def test_submit_blocked_by_gate(client, seed):
    _, headers = await seed.user()
    company = await seed.company()

    first = await client.post("/api/evidence/submit", json=_submission(company.id), headers=headers)
    assert first.status_code == 201

    # One pending item now requires one moderation from this user
    second = await client.post("/api/evidence/submit", json=_submission(company.id), headers=headers)
    assert second.status_code == 403
    assert second.json() == {"error": "moderation_required"}


async def test_submit_unknown_entity_type(client, seed):
    _, headers = await seed.user()
    response = await client.post(
        "/api/evidence/submit", json=_submission(1, entity_type="planet"), headers=headers
    )
    assert response.status_code == 400


async def test_submit_missing_entity(client, seed):
    _, headers = await seed.user()
    response = await client.post(
        "/api/evidence/submit", json=_submission(999, entity_type="leader"), headers=headers
    )
    assert response.status_code == 404
    assert response.json() == {"error": "leader not found"}


async def test_submit_severity_out_of_range(client, seed):
    _, headers = await seed.user()
    company = await seed.company()
    response = await client.post(
        "/api/evidence/submit", json=_submission(company.id, severity=101), headers=headers
    )
    assert response.status_code == 422


@pytest.mark.parametrize("raw", ["99999999999999999999", "2147483648", "-2147483649"])
async def test_out_of_range_ids_are_invalid(client, raw):
    meta = await client.get("/api/moderation/evidence-meta", params={"id": raw})
    assert meta.status_code == 400
    assert meta.json() == {"error": "invalid_id"}

    by_id = await client.get("/api/evidence/by-id", params={"id": raw})
    assert by_id.status_code == 400
    assert by_id.json() == {"error": "invalid_id"}


async def test_largest_id_is_a_plain_miss(client):
    meta = await client.get("/api/moderation/evidence-meta", params={"id": "2147483647"})
    assert meta.status_code == 200
    assert meta.json()["status"] == "pending"

    by_id = await client.get("/api/evidence/by-id", params={"id": "2147483647"})
    assert by_id.status_code == 404
