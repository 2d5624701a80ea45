"""Unit tests for size normalization."""

import math

import pytest

from rotten.engine.normalization import NormalizationMode, normalize_score


def test_none_mode_passes_through():
    assert normalize_score(72.5, {"employees": 5000}, "none") == 72.5


def test_employees_mode():
    result = normalize_score(100, {"employees": 90}, NormalizationMode.EMPLOYEES)
    assert result == pytest.approx(100 / math.log(100))
    assert result == pytest.approx(21.71, abs=0.01)


def test_revenue_mode():
    result = normalize_score(50, {"annual_revenue": 1_000_000}, "revenue")
    assert result == pytest.approx(50 / math.log(1_000_010))


@pytest.mark.parametrize("employees", [None, 0, -3])
def test_missing_or_non_positive_size_passes_through(employees):
    assert normalize_score(40, {"employees": employees}, "employees") == 40


def test_accepts_objects():
    class Row:
        employees = None
        annual_revenue = 990

    assert normalize_score(30, Row(), "revenue") == pytest.approx(30 / math.log(1000))
    assert normalize_score(30, Row(), "employees") == 30


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        normalize_score(10, {}, "headcount")
