"""Health and metrics endpoints."""

from fastapi import APIRouter

from rotten.api.deps import DbDep
from rotten.storage.gate import get_moderation_gate_status
from rotten.storage.repositories import count_notification_jobs

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness only; does not touch the database."""
    return {"status": "ok"}


@router.get("/metrics")
async def metrics(db: DbDep):
    """Moderation backlog and notification outbox depths."""
    gate = await get_moderation_gate_status(db, None)
    return {
        "service": "rotten",
        "version": "0.1.0",
        "moderation": {
            "pending_evidence": gate.pending_evidence,
            "unassigned_evidence": gate.unassigned_evidence,
            "pending_company_requests": gate.pending_company_requests,
            "unassigned_company_requests": gate.unassigned_company_requests,
        },
        "notification_jobs": await count_notification_jobs(db),
    }
