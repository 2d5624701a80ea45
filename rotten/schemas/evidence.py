"""Evidence request/response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class EvidenceSubmitRequest(BaseModel):
    """POST /api/evidence/submit request."""

    title: str = Field(min_length=1)
    summary: str | None = None
    file_url: str | None = None
    category: str
    severity: int = Field(default=50, ge=0, le=100)
    entity_type: str
    entity_id: int


class EvidenceRecord(BaseModel):
    """Full evidence row as returned by the by-id lookup."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    summary: str | None = None
    file_url: str | None = None
    created_at: datetime
    category: str
    severity: int
    user_id: str | None = None
    entity_type: str
    entity_id: int
    status: str


class HistoryEntry(BaseModel):
    """One moderation action in an evidence audit trail."""

    model_config = ConfigDict(from_attributes=True)

    action: str
    moderator_id: str
    note: str | None = None
    created_at: datetime


class EvidenceMeta(BaseModel):
    """GET /api/moderation/evidence-meta response."""

    status: str = "pending"
    assigned_moderator_id: str | None = None
    history: list[HistoryEntry] = Field(default_factory=list)


class ModerationDecision(BaseModel):
    """Approve/reject body."""

    moderator_note: str | None = None


class ScoreRecomputeInfo(BaseModel):
    success: bool
    entities_processed: int | None = None
    error: str | None = None


class NotificationInfo(BaseModel):
    """Outcome of the decision email. "pending" means queued for the worker."""

    status: Literal["pending", "sent", "failed"]
    error: str | None = None


class DecisionResponse(BaseModel):
    ok: bool = True
    status: Literal["approved", "rejected"]
    score_recompute: ScoreRecomputeInfo | None = None
    notification: NotificationInfo | None = None
