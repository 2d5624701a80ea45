"""Moderation queue schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class GateStatus(BaseModel):
    """Aggregate state of the pending-review backlog."""

    pending_evidence: int
    pending_company_requests: int
    unassigned_evidence: int
    unassigned_company_requests: int
    required_moderations: int
    user_moderations: int
    allowed: bool


class ClaimedItem(BaseModel):
    kind: Literal["evidence", "company_request"]
    item_id: str


class ClaimResponse(BaseModel):
    ok: bool = True
    data: ClaimedItem


class AssignCompanyRequest(BaseModel):
    id: int | str
    moderator_id: str


class AssignedItem(BaseModel):
    kind: Literal["evidence", "company_request"]
    id: str
    title: str
    created_at: datetime
    href: str


class ReleaseResponse(BaseModel):
    ok: bool = True
    released_evidence: int
    released_company_requests: int
