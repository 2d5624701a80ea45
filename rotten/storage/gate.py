"""Moderation gate - read-only view of the pending-review backlog."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.engine.gate import is_allowed, required_moderations
from rotten.models import CompanyRequest, Evidence
from rotten.schemas.moderation import GateStatus
from rotten.storage.repositories import count_user_decisions


async def _count_pending(db: AsyncSession, model) -> tuple[int, int]:
    """(pending, pending and unassigned) for one queue."""
    result = await db.execute(
        select(
            func.count(model.id),
            func.count(model.id).filter(model.assigned_moderator_id.is_(None)),
        ).where(model.status == "pending")
    )
    pending, unassigned = result.one()
    return pending or 0, unassigned or 0


async def get_moderation_gate_status(db: AsyncSession, user_id: str | None) -> GateStatus:
    """
    Compute the gate from current rows. Nothing is cached, so a newly
    submitted pending item is visible on the very next call.
    """
    pending_evidence, unassigned_evidence = await _count_pending(db, Evidence)
    pending_requests, unassigned_requests = await _count_pending(db, CompanyRequest)

    user_moderations = await count_user_decisions(db, user_id) if user_id else 0

    return GateStatus(
        pending_evidence=pending_evidence,
        pending_company_requests=pending_requests,
        unassigned_evidence=unassigned_evidence,
        unassigned_company_requests=unassigned_requests,
        required_moderations=required_moderations(pending_evidence),
        user_moderations=user_moderations,
        allowed=is_allowed(user_moderations, pending_evidence, authenticated=user_id is not None),
    )
