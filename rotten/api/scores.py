"""Score recalculation endpoint."""

from fastapi import APIRouter

from rotten.api.deps import DbDep
from rotten.storage.scores import trigger_score_recompute

router = APIRouter()


@router.post("/score/recalculate")
async def recalculate_scores(db: DbDep):
    """Recompute every entity score. Failures come back as 200 with success=false."""
    result = await trigger_score_recompute(db)
    if not result.success:
        return {"success": False, "error": result.error}
    return {"success": True, "entities_processed": result.entities_processed}
