"""Rotten score aggregation - turns approved evidence into a 0-100 entity score.

Direction: 0 = clean, 100 = extremely rotten.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

# Weights sum to 1.0 so the weighted base score stays within 0-100.
CATEGORY_WEIGHTS: dict[str, float] = {
    # Labor & workplace harm
    "toxic_workplace": 0.11,
    "wage_abuse": 0.08,
    "union_busting": 0.06,
    "discrimination_harassment": 0.07,
    # Environmental harm
    "greenwashing": 0.05,
    "pollution_environmental_damage": 0.10,
    "climate_obstruction": 0.05,
    # Consumer harm
    "customer_trust": 0.06,
    "unfair_pricing": 0.06,
    "product_safety_failures": 0.04,
    "privacy_data_abuse": 0.04,
    # Governance & ethics
    "ethics_failures": 0.05,
    "corruption_bribery": 0.04,
    "fraud_financial_misconduct": 0.05,
    # Social harm
    "community_harm": 0.03,
    "public_health_risk": 0.03,
    # Brand integrity
    "broken_promises": 0.04,
    "misleading_marketing": 0.04,
}

SIZE_MULTIPLIERS: dict[str, float] = {
    "micro": 0.8,
    "small": 0.9,
    "medium": 1.0,
    "large": 1.1,
    "enterprise": 1.2,
}

OWNERSHIP_MULTIPLIERS: dict[str, float] = {
    "independent": 1.0,
    "family_owned": 0.95,
    "public_company": 1.05,
    "private_equity_owned": 1.2,
    "hedge_fund_owned": 1.25,
}

COUNTRY_REGION_MULTIPLIERS: dict[str, float] = {
    "global": 1.2,
    "western": 1.1,
    "non_western": 1.0,
}


@dataclass(frozen=True)
class EntityContext:
    """Company context used for multipliers. Leaders and managers use the defaults."""

    employees: int | None = None
    ownership_type: str = "independent"
    country_region: str = "non_western"


def derive_size_tier(employees: int | None) -> str:
    if employees is None or employees <= 0:
        return "medium"
    if employees <= 10:
        return "micro"
    if employees <= 50:
        return "small"
    if employees <= 250:
        return "medium"
    if employees <= 1000:
        return "large"
    return "enterprise"


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def category_averages(evidence: Iterable[tuple[str, float]]) -> dict[str, float]:
    """Average severity per category from (category, severity) pairs."""
    by_category: dict[str, list[float]] = defaultdict(list)
    for category, severity in evidence:
        by_category[category].append(severity)
    return {cat: sum(vals) / len(vals) for cat, vals in by_category.items()}


def base_category_score(averages: dict[str, float]) -> float:
    total = 0.0
    for category, avg in averages.items():
        weight = CATEGORY_WEIGHTS.get(category)
        if weight is None:
            continue
        total += _clamp(avg) * weight
    return total


def compute_rotten_score(
    evidence: Iterable[tuple[str, float]],
    context: EntityContext | None = None,
) -> float | None:
    """
    Score an entity from its approved (category, severity) evidence.
    Returns None when there is no evidence at all.
    """
    averages = category_averages(evidence)
    if not averages:
        return None

    context = context or EntityContext()
    score = base_category_score(averages)
    score *= SIZE_MULTIPLIERS[derive_size_tier(context.employees)]
    score *= OWNERSHIP_MULTIPLIERS.get(context.ownership_type, 1.0)
    score *= COUNTRY_REGION_MULTIPLIERS.get(context.country_region, 1.0)
    return _clamp(score)
