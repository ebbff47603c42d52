"""Unit coverage for allowances and the lump-sum provision deduction."""

from __future__ import annotations

import pytest

from wagetax.backend.app.models import TaxClass
from wagetax.backend.app.services.calculators.contributions import SocialContributions
from wagetax.backend.app.services.calculators.deductions import (
    estimate_lump_sum_deduction,
    resolve_allowances,
)
from wagetax.backend.config.profile_config import load_profile


@pytest.fixture()
def profile():
    return load_profile()


def test_standard_class_receives_flat_allowances(profile) -> None:
    allowances = resolve_allowances(TaxClass.I, 0, profile)

    assert allowances.work_expense_allowance == 1_230
    assert allowances.special_expense_allowance == 36
    assert allowances.single_parent_relief == 0
    assert allowances.total == 1_266


def test_declared_expenses_replace_flat_allowance_only_when_larger(profile) -> None:
    assert resolve_allowances(TaxClass.I, 900, profile).work_expense_allowance == 1_230
    assert resolve_allowances(TaxClass.I, 2_500, profile).work_expense_allowance == 2_500


def test_single_parent_relief_applies_to_class_two_only(profile) -> None:
    assert resolve_allowances(TaxClass.II, 0, profile).single_parent_relief == 4_260
    for tax_class in (TaxClass.I, TaxClass.III, TaxClass.IV, TaxClass.V, TaxClass.VI):
        assert resolve_allowances(tax_class, 0, profile).single_parent_relief == 0


def test_secondary_employment_receives_no_allowances(profile) -> None:
    allowances = resolve_allowances(TaxClass.VI, 5_000, profile)

    assert allowances.total == 0


def test_lump_sum_weights_unemployment_contribution(profile) -> None:
    contributions = SocialContributions(
        pension=1_860.0, unemployment=260.0, health=1_750.0, care=480.0, care_rate=0.024
    )

    assert estimate_lump_sum_deduction(contributions, profile) == 4_151.0
