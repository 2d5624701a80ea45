"""Company request endpoints - submission and moderation."""

import logging

from fastapi import APIRouter, HTTPException, status

from rotten.api.deps import DbDep, DispatcherDep, parse_int_id
from rotten.auth.middleware import ModeratorDep, UserDep
from rotten.notifications import messages
from rotten.schemas.company import CompanyRequestCreate, CompanyRequestDecision
from rotten.storage.gate import get_moderation_gate_status
from rotten.storage.repositories import (
    create_company,
    create_company_request,
    decide_company_request,
    get_company_request,
    get_user_email,
    record_action,
    slug_taken,
)
from rotten.utils.slug import slug_candidates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/company/request", status_code=status.HTTP_201_CREATED)
async def request_company(body: CompanyRequestCreate, user: UserDep, db: DbDep):
    """Ask for a new company to be added. Gate-enforced like evidence submission."""
    gate = await get_moderation_gate_status(db, user.id)
    if not gate.allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="moderation_required",
        )
    cr = await create_company_request(
        db,
        name=body.name.strip(),
        user_id=user.id,
        country=body.country,
        website=body.website,
        description=body.description,
    )
    logger.info("company request %s created by %s", cr.id, user.id)
    return {"ok": True, "id": cr.id, "status": cr.status}


async def _load_pending_request(db, request_id: int):
    cr = await get_company_request(db, request_id)
    if cr is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Company request not found",
        )
    if cr.status != "pending":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Request is not pending",
        )
    return cr


@router.post("/moderation/company-requests/approve")
async def approve_company_request(
    body: CompanyRequestDecision,
    moderator: ModeratorDep,
    db: DbDep,
    dispatcher: DispatcherDep,
):
    """Approve a request: create the company under a unique slug and notify the requester."""
    request_id = parse_int_id(body.id)
    cr = await _load_pending_request(db, request_id)
    note = (body.moderator_note or "").strip() or None

    slug = None
    for candidate in slug_candidates(cr.name, fallback=f"company-{cr.id}"):
        if not await slug_taken(db, candidate):
            slug = candidate
            break
    if slug is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Could not find a free slug for this company",
        )

    company = await create_company(db, name=cr.name, slug=slug, country=cr.country)

    if not await decide_company_request(db, cr.id, "approved", moderator.id, note):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Request update blocked or already processed",
        )
    await record_action(
        db, "approve", moderator.id, "company_request", cr.id, note=note or "Approved"
    )

    subject, text = messages.company_request_approved(cr.name, company.slug)
    await dispatcher.notify(
        await get_user_email(db, cr.user_id),
        subject,
        text,
        {"requestId": cr.id, "action": "approve", "company_id": company.id},
    )
    logger.info("company request %s approved as %s by %s", cr.id, company.slug, moderator.id)
    return {"ok": True, "company_id": company.id, "slug": company.slug}


@router.post("/moderation/company-requests/reject")
async def reject_company_request(
    body: CompanyRequestDecision,
    moderator: ModeratorDep,
    db: DbDep,
    dispatcher: DispatcherDep,
):
    """Reject a request. A moderator note is required and is sent to the requester."""
    request_id = parse_int_id(body.id)
    note = (body.moderator_note or "").strip()
    if not note:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Moderator note is required",
        )
    cr = await _load_pending_request(db, request_id)

    if not await decide_company_request(db, cr.id, "rejected", moderator.id, note):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Request update blocked or already processed",
        )
    await record_action(db, "reject", moderator.id, "company_request", cr.id, note=note)

    subject, text = messages.company_request_rejected(cr.name, note)
    await dispatcher.notify(
        await get_user_email(db, cr.user_id),
        subject,
        text,
        {"requestId": cr.id, "action": "reject"},
    )
    logger.info("company request %s rejected by %s", cr.id, moderator.id)
    return {"ok": True}
