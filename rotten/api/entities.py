"""Entity endpoints - search, company detail, rotten index."""

import logging

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError

from rotten.api.deps import DbDep, SettingsDep
from rotten.engine.normalization import NormalizationMode, normalize_score
from rotten.engine.scoring import score_color, score_to_badge, score_to_flavor
from rotten.schemas.company import (
    CompanyDetail,
    FlavorInfo,
    RottenIndexResponse,
    RottenIndexRow,
    SearchResponse,
    SearchResult,
)
from rotten.schemas.evidence import EvidenceRecord
from rotten.storage.repositories import (
    get_company_by_slug,
    list_evidence_for_entity,
    list_scored_companies,
    search_companies,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/search-entities", response_model=SearchResponse)
async def search_entities(db: DbDep, settings: SettingsDep, q: str = ""):
    """Company name autocomplete for the evidence submission flow."""
    q = q.strip()
    if not q:
        return SearchResponse()

    logger.debug("searching companies q=%r", q)
    try:
        companies = await search_companies(db, q, settings.search_limit)
    except SQLAlchemyError as e:
        logger.error("company search failed q=%r: %s", q, e)
        return PlainTextResponse("Search failed", status_code=500)

    return SearchResponse(
        results=[
            SearchResult(
                name=c.name,
                slug=c.slug,
                submitEvidenceUrl=f"/company/{c.slug}/submit-evidence",
            )
            for c in companies
        ]
    )


@router.get("/company/{slug}", response_model=CompanyDetail)
async def company_detail(slug: str, db: DbDep):
    """Company profile with its score, badge, flavor and approved evidence."""
    company = await get_company_by_slug(db, slug)
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not_found")

    evidence = await list_evidence_for_entity(db, "company", company.id, status="approved")
    detail = CompanyDetail(
        id=company.id,
        name=company.name,
        slug=company.slug,
        country=company.country,
        industry=company.industry,
        description=company.description,
        employees=company.employees,
        annual_revenue=company.annual_revenue,
        rotten_score=company.rotten_score,
        evidence=[EvidenceRecord.model_validate(ev) for ev in evidence],
    )
    if company.rotten_score is not None:
        flavor = score_to_flavor(company.rotten_score)
        detail.badge = score_to_badge(company.rotten_score)
        detail.color = score_color(company.rotten_score)
        detail.flavor = FlavorInfo(macro_tier=flavor.macro_tier, micro_flavor=flavor.micro_flavor)
    return detail


@router.get("/rotten-index", response_model=RottenIndexResponse)
async def rotten_index(
    db: DbDep,
    normalization: NormalizationMode = NormalizationMode.NONE,
    limit: int = Query(default=50, ge=1, le=500),
):
    """Scored companies ranked by (optionally size-normalized) rotten score."""
    rows = []
    for company in await list_scored_companies(db):
        normalized = normalize_score(company.rotten_score, company, normalization)
        rows.append(
            RottenIndexRow(
                name=company.name,
                slug=company.slug,
                rotten_score=company.rotten_score,
                normalized_score=normalized,
                badge=score_to_badge(normalized),
                macro_tier=score_to_flavor(normalized).macro_tier,
            )
        )
    rows.sort(key=lambda r: r.normalized_score, reverse=True)
    return RottenIndexResponse(normalization=normalization.value, results=rows[:limit])
