"""Unit tests for rotten score aggregation."""

import pytest

from rotten.engine.rotten_score import (
    CATEGORY_WEIGHTS,
    EntityContext,
    category_averages,
    compute_rotten_score,
    derive_size_tier,
)


def test_weights_sum_to_one():
    assert sum(CATEGORY_WEIGHTS.values()) == pytest.approx(1.0)


def test_no_evidence_is_unscored():
    assert compute_rotten_score([]) is None


def test_single_category_default_context():
    # wage_abuse weight 0.08, medium/independent/non_western multipliers are all 1.0
    assert compute_rotten_score([("wage_abuse", 50)]) == pytest.approx(4.0)


def test_severities_averaged_per_category():
    assert category_averages([("wage_abuse", 40), ("wage_abuse", 60), ("greenwashing", 10)]) == {
        "wage_abuse": 50,
        "greenwashing": 10,
    }


def test_context_multipliers():
    context = EntityContext(
        employees=12000, ownership_type="public_company", country_region="global"
    )
    # 4.0 * enterprise 1.2 * public 1.05 * global 1.2
    assert compute_rotten_score([("wage_abuse", 50)], context) == pytest.approx(6.048)


def test_unknown_category_scores_zero():
    assert compute_rotten_score([("not_a_category", 90)]) == 0.0


def test_clamped_to_100():
    evidence = [(category, 100) for category in CATEGORY_WEIGHTS]
    context = EntityContext(
        employees=5000, ownership_type="hedge_fund_owned", country_region="global"
    )
    assert compute_rotten_score(evidence, context) == 100.0


@pytest.mark.parametrize(
    "employees,tier",
    [(None, "medium"), (0, "medium"), (10, "micro"), (50, "small"), (250, "medium"),
     (1000, "large"), (1001, "enterprise")],
)
def test_size_tiers(employees, tier):
    assert derive_size_tier(employees) == tier
