"""Score recalculation endpoint tests."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from rotten.models import Company, Leader


async def test_recalculate(client, seed, session_maker):
    company = await seed.company(name="Acme Corp", rotten_score=99.0)
    await seed.evidence(company.id, status="approved", category="greenwashing", severity=80)
    async with session_maker() as session:
        session.add(Leader(name="Jane Boss", slug="jane-boss"))
        await session.commit()

    response = await client.post("/api/score/recalculate")
    assert response.status_code == 200
    assert response.json() == {"success": True, "entities_processed": 2}

    # greenwashing weight 0.05
    assert (await seed.get(Company, company.id)).rotten_score == pytest.approx(4.0)
    leader = await seed.get(Leader, 1)
    assert leader.rotten_score is None


async def test_recalculate_clears_score_without_evidence(client, seed):
    company = await seed.company(name="Acme Corp", rotten_score=55.0)
    await seed.evidence(company.id, status="rejected")

    await client.post("/api/score/recalculate")
    assert (await seed.get(Company, company.id)).rotten_score is None


async def test_recalculate_failure_reports_200(client, monkeypatch):
    monkeypatch.setattr(
        "rotten.storage.scores.recompute_scores",
        AsyncMock(side_effect=SQLAlchemyError("deadlock")),
    )
    response = await client.post("/api/score/recalculate")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is False
    assert "deadlock" in data["error"]
