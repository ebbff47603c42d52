"""Allowances and the lump-sum provision deduction (Vorsorgepauschale)."""

from __future__ import annotations

from dataclasses import dataclass

from wagetax.backend.app.models import TaxClass
from wagetax.backend.config.profile_config import ProfileConfiguration

from .contributions import SocialContributions
from .utils import round_whole


@dataclass(frozen=True)
class AppliedAllowances:
    """Allowances deducted from gross income for one tax class."""

    work_expense_allowance: float
    special_expense_allowance: float
    single_parent_relief: float

    @property
    def total(self) -> float:
        return (
            self.work_expense_allowance
            + self.special_expense_allowance
            + self.single_parent_relief
        )


def resolve_allowances(
    tax_class: TaxClass,
    excess_work_expenses: float,
    profile: ProfileConfiguration,
) -> AppliedAllowances:
    """Return the allowances that apply to ``tax_class``.

    Declared work expenses replace the flat allowance only when larger.
    Secondary employment (class VI) receives neither flat allowance.
    """

    allowances = profile.allowances

    if tax_class is TaxClass.VI:
        work_expense = 0.0
        special_expense = 0.0
    else:
        work_expense = max(allowances.work_expense_allowance, excess_work_expenses)
        special_expense = allowances.special_expense_allowance

    relief = allowances.single_parent_relief if tax_class is TaxClass.II else 0.0

    return AppliedAllowances(
        work_expense_allowance=work_expense,
        special_expense_allowance=special_expense,
        single_parent_relief=relief,
    )


def estimate_lump_sum_deduction(
    contributions: SocialContributions, profile: ProfileConfiguration
) -> float:
    """Approximate the Vorsorgepauschale from the employee contributions.

    Pension, health, and care contributions count in full; unemployment
    insurance only with the profile's factor. This is a simplification of
    the statutory procedure in §39b Abs. 4 EStG and is only expected to
    match the official tables within tolerance.
    """

    estimate = (
        contributions.pension
        + contributions.unemployment * profile.lump_sum.unemployment_factor
        + contributions.health
        + contributions.care
    )
    return round_whole(estimate)


__all__ = ["AppliedAllowances", "estimate_lump_sum_deduction", "resolve_allowances"]
