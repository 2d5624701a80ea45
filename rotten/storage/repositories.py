"""Repository functions for evidence, company requests, entities and the action log."""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.database import utcnow
from rotten.models import (
    Company,
    CompanyRequest,
    ENTITY_MODELS,
    Evidence,
    ModerationAction,
    NotificationJob,
    User,
)


# --- evidence ---------------------------------------------------------------


async def create_evidence(
    db: AsyncSession,
    title: str,
    category: str,
    entity_type: str,
    entity_id: int,
    user_id: str | None,
    summary: str | None = None,
    file_url: str | None = None,
    severity: int = 50,
) -> Evidence:
    """Create a pending evidence row."""
    ev = Evidence(
        title=title,
        summary=summary,
        file_url=file_url,
        category=category,
        severity=severity,
        user_id=user_id,
        entity_type=entity_type,
        entity_id=entity_id,
        status="pending",
        created_at=utcnow(),
    )
    db.add(ev)
    await db.flush()
    return ev


async def get_evidence_by_id(db: AsyncSession, evidence_id: int) -> Evidence | None:
    result = await db.execute(select(Evidence).where(Evidence.id == evidence_id))
    return result.scalar_one_or_none()


async def list_evidence_for_entity(
    db: AsyncSession, entity_type: str, entity_id: int, status: str | None = None
) -> list[Evidence]:
    """Evidence attached to an entity, newest first, optionally filtered by status."""
    query = select(Evidence).where(
        Evidence.entity_type == entity_type,
        Evidence.entity_id == entity_id,
    )
    if status is not None:
        query = query.where(Evidence.status == status)
    result = await db.execute(query.order_by(Evidence.created_at.desc(), Evidence.id.desc()))
    return list(result.scalars().all())


async def set_evidence_status(
    db: AsyncSession, evidence: Evidence, status: str, moderator_id: str
) -> Evidence:
    evidence.status = status
    evidence.assigned_moderator_id = moderator_id
    evidence.assigned_at = utcnow()
    await db.flush()
    return evidence


# --- moderation action log ----------------------------------------------------


async def record_action(
    db: AsyncSession,
    action: str,
    moderator_id: str,
    target_type: str,
    target_id: int | str,
    note: str | None = None,
    source: str = "api",
) -> ModerationAction:
    """Append a moderation action. Rows are never updated or deleted."""
    entry = ModerationAction(
        action=action,
        moderator_id=moderator_id,
        target_type=target_type,
        target_id=str(target_id),
        note=note,
        source=source,
        created_at=utcnow(),
    )
    db.add(entry)
    await db.flush()
    return entry


async def get_action_history(
    db: AsyncSession, target_type: str, target_id: int | str
) -> list[ModerationAction]:
    """Audit trail for one target, oldest first."""
    result = await db.execute(
        select(ModerationAction)
        .where(
            ModerationAction.target_type == target_type,
            ModerationAction.target_id == str(target_id),
        )
        .order_by(ModerationAction.created_at.asc(), ModerationAction.id.asc())
    )
    return list(result.scalars().all())


async def count_user_decisions(db: AsyncSession, user_id: str) -> int:
    """Approve/reject decisions made by a user."""
    result = await db.execute(
        select(func.count(ModerationAction.id)).where(
            ModerationAction.moderator_id == user_id,
            ModerationAction.action.in_(("approve", "reject")),
        )
    )
    return result.scalar_one()


# --- assignment -------------------------------------------------------------


async def get_assigned_evidence(db: AsyncSession, moderator_id: str) -> list[Evidence]:
    result = await db.execute(
        select(Evidence)
        .where(
            Evidence.assigned_moderator_id == moderator_id,
            Evidence.status == "pending",
        )
        .order_by(Evidence.created_at.asc(), Evidence.id.asc())
    )
    return list(result.scalars().all())


async def get_assigned_company_requests(
    db: AsyncSession, moderator_id: str
) -> list[CompanyRequest]:
    result = await db.execute(
        select(CompanyRequest)
        .where(
            CompanyRequest.assigned_moderator_id == moderator_id,
            CompanyRequest.status == "pending",
        )
        .order_by(CompanyRequest.created_at.asc(), CompanyRequest.id.asc())
    )
    return list(result.scalars().all())


async def claim_oldest_evidence(db: AsyncSession, moderator_id: str) -> Evidence | None:
    """
    Assign the oldest pending, unassigned evidence to a moderator.
    Submitters never receive their own evidence.
    """
    result = await db.execute(
        select(Evidence)
        .where(
            Evidence.status == "pending",
            Evidence.assigned_moderator_id.is_(None),
            (Evidence.user_id.is_(None)) | (Evidence.user_id != moderator_id),
        )
        .order_by(Evidence.created_at.asc(), Evidence.id.asc())
        .limit(1)
        .with_for_update(skip_locked=True)
    )
    ev = result.scalar_one_or_none()
    if ev is None:
        return None
    ev.assigned_moderator_id = moderator_id
    ev.assigned_at = utcnow()
    await db.flush()
    return ev


async def claim_oldest_company_request(
    db: AsyncSession, moderator_id: str
) -> CompanyRequest | None:
    result = await db.execute(
        select(CompanyRequest)
        .where(
            CompanyRequest.status == "pending",
            CompanyRequest.assigned_moderator_id.is_(None),
            (CompanyRequest.user_id.is_(None)) | (CompanyRequest.user_id != moderator_id),
        )
        .order_by(CompanyRequest.created_at.asc(), CompanyRequest.id.asc())
        .limit(1)
        .with_for_update(skip_locked=True)
    )
    cr = result.scalar_one_or_none()
    if cr is None:
        return None
    cr.assigned_moderator_id = moderator_id
    cr.assigned_at = utcnow()
    await db.flush()
    return cr


async def assign_company_request(
    db: AsyncSession, request_id: int, moderator_id: str
) -> bool:
    """Conditional assignment: only a pending, unassigned request is taken."""
    result = await db.execute(
        update(CompanyRequest)
        .where(
            CompanyRequest.id == request_id,
            CompanyRequest.status == "pending",
            CompanyRequest.assigned_moderator_id.is_(None),
        )
        .values(assigned_moderator_id=moderator_id, assigned_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def find_expired_assignments(
    db: AsyncSession, model: type[Evidence] | type[CompanyRequest], cutoff: datetime
) -> list:
    result = await db.execute(
        select(model).where(
            model.status == "pending",
            model.assigned_moderator_id.is_not(None),
            model.assigned_at < cutoff,
        )
    )
    return list(result.scalars().all())


# --- company requests ---------------------------------------------------------


async def create_company_request(
    db: AsyncSession,
    name: str,
    user_id: str,
    country: str | None = None,
    website: str | None = None,
    description: str | None = None,
) -> CompanyRequest:
    cr = CompanyRequest(
        name=name,
        country=country,
        website=website,
        description=description,
        user_id=user_id,
        status="pending",
        created_at=utcnow(),
    )
    db.add(cr)
    await db.flush()
    return cr


async def get_company_request(db: AsyncSession, request_id: int) -> CompanyRequest | None:
    result = await db.execute(select(CompanyRequest).where(CompanyRequest.id == request_id))
    return result.scalar_one_or_none()


async def decide_company_request(
    db: AsyncSession,
    request_id: int,
    status: str,
    moderator_id: str,
    reason: str | None,
) -> bool:
    """Move a pending request to approved/rejected. False when it was no longer pending."""
    result = await db.execute(
        update(CompanyRequest)
        .where(CompanyRequest.id == request_id, CompanyRequest.status == "pending")
        .values(
            status=status,
            moderator_id=moderator_id,
            decision_reason=reason,
            moderated_at=utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


# --- entities -----------------------------------------------------------------


async def entity_exists(db: AsyncSession, entity_type: str, entity_id: int) -> bool:
    model = ENTITY_MODELS.get(entity_type)
    if model is None:
        return False
    result = await db.execute(select(model.id).where(model.id == entity_id))
    return result.scalar_one_or_none() is not None


async def get_company_by_slug(db: AsyncSession, slug: str) -> Company | None:
    result = await db.execute(select(Company).where(Company.slug == slug))
    return result.scalar_one_or_none()


async def slug_taken(db: AsyncSession, slug: str) -> bool:
    result = await db.execute(select(Company.id).where(Company.slug == slug))
    return result.scalar_one_or_none() is not None


async def create_company(
    db: AsyncSession, name: str, slug: str, country: str | None = None
) -> Company:
    company = Company(name=name, slug=slug, country=country, created_at=utcnow())
    db.add(company)
    await db.flush()
    return company


async def search_companies(db: AsyncSession, q: str, limit: int) -> list[Company]:
    """Case-insensitive substring match on company name."""
    result = await db.execute(
        select(Company)
        .where(Company.name.icontains(q, autoescape=True))
        .order_by(Company.name.asc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_scored_companies(db: AsyncSession) -> list[Company]:
    result = await db.execute(select(Company).where(Company.rotten_score.is_not(None)))
    return list(result.scalars().all())


async def get_user_email(db: AsyncSession, user_id: str | None) -> str | None:
    if not user_id:
        return None
    result = await db.execute(select(User.email).where(User.id == user_id))
    return result.scalar_one_or_none()


async def count_notification_jobs(db: AsyncSession) -> dict[str, int]:
    """Outbox size per status; statuses with no jobs report 0."""
    result = await db.execute(
        select(NotificationJob.status, func.count(NotificationJob.id)).group_by(
            NotificationJob.status
        )
    )
    counts = {"pending": 0, "sent": 0, "failed": 0}
    counts.update({status: n for status, n in result.all()})
    return counts
