"""Unit coverage for employee social-insurance contributions."""

from __future__ import annotations

import pytest

from wagetax.backend.app.services.calculators.contributions import (
    calculate_care_rate,
    calculate_social_contributions,
)
from wagetax.backend.config.profile_config import load_profile


@pytest.fixture()
def profile():
    return load_profile()


def test_contributions_below_all_ceilings(profile) -> None:
    contributions = calculate_social_contributions(20_000, 2.9, 30, 0, profile)

    assert contributions.pension == 1_860.0
    assert contributions.unemployment == 260.0
    assert contributions.health == 1_750.0
    assert contributions.care == 580.0
    assert contributions.total == 4_450.0


def test_contributions_are_capped_at_assessment_ceilings(profile) -> None:
    at_cap = calculate_social_contributions(101_400, 2.9, 30, 0, profile)
    above_cap = calculate_social_contributions(250_000, 2.9, 30, 0, profile)

    assert above_cap == at_cap
    assert above_cap.pension == 9_430.2
    assert above_cap.health == pytest.approx(6_103.13, abs=0.01)


def test_zero_income_has_no_contributions(profile) -> None:
    contributions = calculate_social_contributions(0, 2.9, 30, 0, profile)

    assert contributions.total == 0.0


@pytest.mark.parametrize(
    ("age", "children", "expected"),
    [
        (22, 0, 0.023),
        (23, 0, 0.029),
        (40, 1, 0.023),
        (40, 2, 0.0205),
        (40, 3, 0.018),
        (40, 4, 0.017),
        (40, 8, 0.017),
    ],
)
def test_care_rate_by_age_and_children(profile, age: int, children: int, expected: float) -> None:
    assert calculate_care_rate(age, children, profile.care) == pytest.approx(expected)


def test_care_rate_reductions_stop_after_fifth_child(profile) -> None:
    care = profile.care.model_copy(update={"minimum_employee_rate": 0.0})

    assert calculate_care_rate(40, 5, care) == pytest.approx(0.013)
    assert calculate_care_rate(40, 9, care) == pytest.approx(0.013)
