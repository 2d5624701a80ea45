"""Company and company-request schemas."""

from pydantic import BaseModel, Field

from rotten.schemas.evidence import EvidenceRecord


class CompanyRequestCreate(BaseModel):
    """POST /api/company/request body."""

    name: str = Field(min_length=1)
    country: str | None = None
    website: str | None = None
    description: str | None = None


class CompanyRequestDecision(BaseModel):
    id: int | str
    moderator_note: str | None = None


class SearchResult(BaseModel):
    name: str
    slug: str
    submitEvidenceUrl: str


class SearchResponse(BaseModel):
    results: list[SearchResult] = Field(default_factory=list)


class FlavorInfo(BaseModel):
    macro_tier: str
    micro_flavor: str


class CompanyDetail(BaseModel):
    id: int
    name: str
    slug: str
    country: str | None = None
    industry: str | None = None
    description: str | None = None
    employees: int | None = None
    annual_revenue: float | None = None
    rotten_score: float | None = None
    badge: str | None = None
    color: str | None = None
    flavor: FlavorInfo | None = None
    evidence: list[EvidenceRecord] = Field(default_factory=list)


class RottenIndexRow(BaseModel):
    name: str
    slug: str
    rotten_score: float
    normalized_score: float
    badge: str
    macro_tier: str


class RottenIndexResponse(BaseModel):
    normalization: str
    results: list[RottenIndexRow] = Field(default_factory=list)
