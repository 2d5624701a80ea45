"""Evidence endpoints - lookup and submission."""

import logging

from fastapi import APIRouter, HTTPException, status

from rotten.api.deps import DbDep, parse_int_id
from rotten.auth.middleware import UserDep
from rotten.models.evidence import ENTITY_TYPES
from rotten.schemas.evidence import EvidenceRecord, EvidenceSubmitRequest
from rotten.storage.gate import get_moderation_gate_status
from rotten.storage.repositories import create_evidence, entity_exists, get_evidence_by_id

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/evidence/by-id", response_model=EvidenceRecord)
async def evidence_by_id(db: DbDep, id: str | None = None):
    """Full evidence record. 400 for a non-integer id, 404 when absent."""
    evidence_id = parse_int_id(id)
    ev = await get_evidence_by_id(db, evidence_id)
    if ev is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")
    return EvidenceRecord.model_validate(ev)


@router.post("/evidence/submit", response_model=EvidenceRecord, status_code=status.HTTP_201_CREATED)
async def submit_evidence(body: EvidenceSubmitRequest, user: UserDep, db: DbDep):
    """Submit evidence about an entity. It enters the queue as pending."""
    if body.entity_type not in ENTITY_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"invalid entity_type: {body.entity_type}",
        )

    gate = await get_moderation_gate_status(db, user.id)
    if not gate.allowed:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="moderation_required",
        )

    if not await entity_exists(db, body.entity_type, body.entity_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{body.entity_type} not found",
        )

    ev = await create_evidence(
        db,
        title=body.title.strip(),
        summary=body.summary,
        file_url=body.file_url,
        category=body.category,
        severity=body.severity,
        entity_type=body.entity_type,
        entity_id=body.entity_id,
        user_id=user.id,
    )
    logger.info(
        "evidence submitted: id=%s entity=%s/%s user=%s",
        ev.id, ev.entity_type, ev.entity_id, user.id,
    )
    return EvidenceRecord.model_validate(ev)
