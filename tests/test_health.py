"""Health check endpoint tests."""

from rotten.notifications.dispatch import NotificationDispatcher


async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_metrics_reports_queue_depths(client, seed, session_maker):
    company = await seed.company()
    await seed.evidence(company.id)
    await seed.evidence(company.id, assigned_moderator_id="mod-1")
    await seed.evidence(company.id, status="approved")
    await seed.company_request()
    async with session_maker() as session:
        await NotificationDispatcher(session).notify("a@example.com", "s", "b")
        await session.commit()

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert response.json() == {
        "service": "rotten",
        "version": "0.1.0",
        "moderation": {
            "pending_evidence": 2,
            "unassigned_evidence": 1,
            "pending_company_requests": 1,
            "unassigned_company_requests": 1,
        },
        "notification_jobs": {"pending": 1, "sent": 0, "failed": 0},
    }


async def test_unknown_route_uses_error_shape(client):
    response = await client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
