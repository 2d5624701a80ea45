"""Moderation endpoints - evidence review, queue assignment, gate."""

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.api.deps import DbDep, DispatcherDep, SettingsDep, parse_int_id
from rotten.auth.middleware import ModeratorDep, OptionalUserDep, is_moderator
from rotten.database import utcnow
from rotten.models import CompanyRequest, Evidence
from rotten.notifications import messages
from rotten.notifications.dispatch import NotificationDispatcher
from rotten.schemas.evidence import (
    DecisionResponse,
    EvidenceMeta,
    HistoryEntry,
    ModerationDecision,
    NotificationInfo,
    ScoreRecomputeInfo,
)
from rotten.schemas.moderation import (
    AssignCompanyRequest,
    AssignedItem,
    ClaimedItem,
    ClaimResponse,
    GateStatus,
    ReleaseResponse,
)
from rotten.storage.gate import get_moderation_gate_status
from rotten.storage.repositories import (
    assign_company_request,
    claim_oldest_company_request,
    claim_oldest_evidence,
    find_expired_assignments,
    get_action_history,
    get_assigned_company_requests,
    get_assigned_evidence,
    get_evidence_by_id,
    get_user_email,
    record_action,
    set_evidence_status,
)
from rotten.storage.scores import trigger_score_recompute

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/evidence-meta", response_model=EvidenceMeta)
async def evidence_meta(db: DbDep, id: str | None = None):
    """
    Review status and audit trail for one evidence id.

    A missing row is not an error here: it reads as pending, unassigned,
    with no history. Only a non-integer id is rejected.
    """
    evidence_id = parse_int_id(id)
    ev = await get_evidence_by_id(db, evidence_id)
    history = await get_action_history(db, "evidence", evidence_id)
    return EvidenceMeta(
        status=ev.status if ev else "pending",
        assigned_moderator_id=ev.assigned_moderator_id if ev else None,
        history=[HistoryEntry.model_validate(h) for h in history],
    )


@router.get("/gate", response_model=GateStatus)
async def gate(db: DbDep, user: OptionalUserDep):
    """Current moderation gate."""
    return await get_moderation_gate_status(db, user.id if user else None)


@router.get("/gate-status", response_model=GateStatus)
async def gate_status(db: DbDep, user: OptionalUserDep):
    """Alias of /gate kept for older clients."""
    return await get_moderation_gate_status(db, user.id if user else None)


async def _decide_evidence(
    evidence_id: int,
    decision: str,
    note: str | None,
    moderator_id: str,
    db: AsyncSession,
    dispatcher: NotificationDispatcher,
) -> DecisionResponse:
    ev = await get_evidence_by_id(db, evidence_id)
    if ev is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    # Historical rows may have no submitter; self-moderation is only checked when known
    if ev.user_id and ev.user_id == moderator_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderators cannot moderate their own submissions.",
        )
    if ev.status != "pending":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="not_pending")

    new_status = "approved" if decision == "approve" else "rejected"
    title, submitter_id = ev.title, ev.user_id

    await set_evidence_status(db, ev, new_status, moderator_id)
    await record_action(db, decision, moderator_id, "evidence", evidence_id, note=note)
    await db.commit()
    logger.info("evidence %s %s by moderator %s", evidence_id, new_status, moderator_id)

    recompute = None
    if new_status == "approved":
        result = await trigger_score_recompute(db)
        recompute = ScoreRecomputeInfo(
            success=result.success,
            entities_processed=result.entities_processed if result.success else None,
            error=result.error,
        )

    if new_status == "approved":
        subject, body = messages.evidence_approved(title, note)
    else:
        subject, body = messages.evidence_rejected(title, note or "")
    email = await get_user_email(db, submitter_id)
    job = await dispatcher.notify(
        email,
        subject,
        body,
        {"type": f"evidence_{new_status}", "evidence_id": evidence_id, "moderator_id": moderator_id},
    )
    notification = None
    if job is not None:
        if job.status == "failed":
            logger.warning("decision email for evidence %s failed: %s", evidence_id, job.last_error)
        notification = NotificationInfo(status=job.status, error=job.last_error)

    return DecisionResponse(
        status=new_status, score_recompute=recompute, notification=notification
    )


@router.post("/evidence/{evidence_id}/approve", response_model=DecisionResponse)
async def approve_evidence(
    evidence_id: str,
    body: ModerationDecision,
    moderator: ModeratorDep,
    db: DbDep,
    dispatcher: DispatcherDep,
):
    """Approve pending evidence, recompute scores, notify the submitter."""
    target_id = parse_int_id(evidence_id)
    note = (body.moderator_note or "").strip() or None
    return await _decide_evidence(target_id, "approve", note, moderator.id, db, dispatcher)


@router.post("/evidence/{evidence_id}/reject", response_model=DecisionResponse)
async def reject_evidence(
    evidence_id: str,
    body: ModerationDecision,
    moderator: ModeratorDep,
    db: DbDep,
    dispatcher: DispatcherDep,
):
    """Reject pending evidence. A reason is required and is sent to the submitter."""
    target_id = parse_int_id(evidence_id)
    note = (body.moderator_note or "").strip()
    if not note:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rejection reason is required.",
        )
    return await _decide_evidence(target_id, "reject", note, moderator.id, db, dispatcher)


@router.get("/assigned", response_model=list[AssignedItem])
async def assigned_items(moderator: ModeratorDep, db: DbDep):
    """Pending items currently assigned to the caller, oldest first."""
    evidence = await get_assigned_evidence(db, moderator.id)
    requests = await get_assigned_company_requests(db, moderator.id)
    items = [
        AssignedItem(
            kind="evidence",
            id=str(ev.id),
            title=ev.title or "(untitled)",
            created_at=ev.created_at,
            href=f"/moderation/evidence/{ev.id}",
        )
        for ev in evidence
    ] + [
        AssignedItem(
            kind="company_request",
            id=str(cr.id),
            title=cr.name or "(untitled)",
            created_at=cr.created_at,
            href=f"/moderation/company-requests/{cr.id}",
        )
        for cr in requests
    ]
    return sorted(items, key=lambda i: i.created_at)


@router.post("/claim-next", response_model=ClaimResponse)
async def claim_next(moderator: ModeratorDep, db: DbDep):
    """
    Assign the next case to the caller: oldest evidence first, then company requests.
    Refused while the caller still holds pending assigned items.
    """
    if await get_assigned_evidence(db, moderator.id) or await get_assigned_company_requests(
        db, moderator.id
    ):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="already_assigned")

    ev = await claim_oldest_evidence(db, moderator.id)
    if ev is not None:
        await record_action(db, "assign", moderator.id, "evidence", ev.id)
        logger.info("moderator %s claimed evidence %s", moderator.id, ev.id)
        return ClaimResponse(data=ClaimedItem(kind="evidence", item_id=str(ev.id)))

    cr = await claim_oldest_company_request(db, moderator.id)
    if cr is not None:
        await record_action(db, "assign", moderator.id, "company_request", cr.id)
        logger.info("moderator %s claimed company_request %s", moderator.id, cr.id)
        return ClaimResponse(data=ClaimedItem(kind="company_request", item_id=str(cr.id)))

    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="no_items")


@router.post("/assign-company")
async def assign_company(body: AssignCompanyRequest, moderator: ModeratorDep, db: DbDep):
    """Assign a specific pending, unassigned company request to a moderator."""
    request_id = parse_int_id(body.id)
    if not await is_moderator(db, body.moderator_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid moderator")

    if not await assign_company_request(db, request_id, body.moderator_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already assigned or not pending",
        )
    await record_action(
        db, "assign", body.moderator_id, "company_request", request_id,
        note=f"assigned by {moderator.id}",
    )
    return {"ok": True}


@router.post("/release-expired", response_model=ReleaseResponse)
async def release_expired(moderator: ModeratorDep, db: DbDep, settings: SettingsDep):
    """Return stale assignments to the queue."""
    cutoff = utcnow() - timedelta(minutes=settings.assignment_ttl_minutes)
    released = {"evidence": 0, "company_request": 0}

    for target_type, model in (("evidence", Evidence), ("company_request", CompanyRequest)):
        for item in await find_expired_assignments(db, model, cutoff):
            previous = item.assigned_moderator_id
            item.assigned_moderator_id = None
            item.assigned_at = None
            await record_action(
                db, "release", moderator.id, target_type, item.id,
                note=f"assignment expired (was {previous})",
            )
            released[target_type] += 1

    logger.info(
        "released expired assignments: evidence=%s company_requests=%s",
        released["evidence"], released["company_request"],
    )
    return ReleaseResponse(
        released_evidence=released["evidence"],
        released_company_requests=released["company_request"],
    )
