"""Size/revenue normalization of rotten scores."""

import math
from collections.abc import Mapping
from enum import Enum
from typing import Any


class NormalizationMode(str, Enum):
    NONE = "none"
    EMPLOYEES = "employees"
    REVENUE = "revenue"


def _field(company: Any, name: str) -> Any:
    if isinstance(company, Mapping):
        return company.get(name)
    return getattr(company, name, None)


def normalize_score(score: float, company: Any, mode: NormalizationMode | str) -> float:
    """
    Dampen a raw score by company size.

    employees: score / ln(employees + 10), revenue: score / ln(annual_revenue + 10).
    Missing or non-positive size fields pass the score through unchanged.
    """
    mode = NormalizationMode(mode)

    if mode is NormalizationMode.EMPLOYEES:
        employees = _field(company, "employees")
        if employees and employees > 0:
            return score / math.log(employees + 10)

    if mode is NormalizationMode.REVENUE:
        revenue = _field(company, "annual_revenue")
        if revenue and revenue > 0:
            return score / math.log(float(revenue) + 10)

    return score
