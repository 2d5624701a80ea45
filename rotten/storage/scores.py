"""Score recompute - rebuilds every entity's rotten_score from approved evidence."""

import logging
from collections import defaultdict
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rotten.engine.rotten_score import EntityContext, compute_rotten_score
from rotten.models import ENTITY_MODELS, Company, Evidence

logger = logging.getLogger(__name__)


@dataclass
class RecomputeResult:
    success: bool
    entities_processed: int = 0
    error: str | None = None


async def recompute_scores(db: AsyncSession) -> int:
    """Recompute rotten_score for all companies, leaders and managers. Returns entities processed."""
    result = await db.execute(
        select(Evidence.entity_type, Evidence.entity_id, Evidence.category, Evidence.severity)
        .where(Evidence.status == "approved")
    )
    evidence_by_entity: dict[tuple[str, int], list[tuple[str, float]]] = defaultdict(list)
    for entity_type, entity_id, category, severity in result.all():
        evidence_by_entity[(entity_type, entity_id)].append((category, severity))

    processed = 0
    for entity_type, model in ENTITY_MODELS.items():
        rows = (await db.execute(select(model))).scalars().all()
        for entity in rows:
            if isinstance(entity, Company):
                context = EntityContext(
                    employees=entity.employees,
                    ownership_type=entity.ownership_type,
                    country_region=entity.country_region,
                )
            else:
                context = EntityContext()
            entity.rotten_score = compute_rotten_score(
                evidence_by_entity.get((entity_type, entity.id), []), context
            )
            processed += 1

    await db.flush()
    return processed


async def trigger_score_recompute(db: AsyncSession) -> RecomputeResult:
    """
    Run the recompute and commit it. Failures are logged and reported,
    never raised; work committed before this call is left in place.
    """
    try:
        processed = await recompute_scores(db)
        await db.commit()
    except SQLAlchemyError as e:
        logger.error("score recompute failed: %s", e)
        await db.rollback()
        return RecomputeResult(success=False, error=str(e))
    logger.info("score recompute finished: entities_processed=%s", processed)
    return RecomputeResult(success=True, entities_processed=processed)
