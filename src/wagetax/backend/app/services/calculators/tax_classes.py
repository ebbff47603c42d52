"""Tax-class dispatch for the wage-tax tariff (§39b Abs. 2 EStG).

Every tax class maps onto exactly one of four procedures. The mapping is kept
in ``TARIFF_PROCEDURES`` and resolved in ``calculate_income_tax``.
"""

from __future__ import annotations

import math
from types import MappingProxyType

from wagetax.backend.app.models import TariffProcedure, TaxClass
from wagetax.backend.config.profile_config import ProfileConfiguration

from .tariff import calculate_tariff
from .utils import floor_currency, round_down_to_multiple

TARIFF_PROCEDURES = MappingProxyType(
    {
        TaxClass.I: TariffProcedure.STANDARD,
        TaxClass.II: TariffProcedure.STANDARD,
        TaxClass.III: TariffProcedure.SPLITTING,
        TaxClass.IV: TariffProcedure.STANDARD,
        TaxClass.V: TariffProcedure.SECONDARY,
        TaxClass.VI: TariffProcedure.SECONDARY,
    }
)


def round_taxable_income(taxable_income: float, profile: ProfileConfiguration) -> int:
    """Round the taxable base down to the profile granularity (36 euros)."""

    return round_down_to_multiple(taxable_income, profile.tariff.rounding_granularity)


def standard_tariff(rounded_income: int, profile: ProfileConfiguration) -> int:
    return calculate_tariff(rounded_income, profile.tariff)


def splitting_tariff(rounded_income: int, profile: ProfileConfiguration) -> int:
    """Splitting procedure: twice the tariff on half the income (§32a Abs. 5)."""

    return 2 * calculate_tariff(rounded_income / 2, profile.tariff)


def double_difference(income: float, profile: ProfileConfiguration) -> int:
    """Twice the tariff difference between 125 % and 75 % of ``income``.

    Never less than the minimum rate (14 %) of ``income``.
    """

    upper = calculate_tariff(income * 1.25, profile.tariff)
    lower = calculate_tariff(income * 0.75, profile.tariff)
    difference = math.floor((upper - lower) * 2)
    minimum = math.floor(income * profile.secondary_class.minimum_rate)
    return max(difference, minimum)


def secondary_class_tariff(rounded_income: int, profile: ProfileConfiguration) -> int:
    """Special tariff for tax classes V and VI (§39b Abs. 2 Satz 7 EStG)."""

    tariff = profile.tariff
    breakpoints = profile.secondary_class
    x = floor_currency(rounded_income)

    tax = double_difference(min(x, breakpoints.breakpoint2), profile)

    if x > breakpoints.breakpoint2:
        if x > breakpoints.breakpoint3:
            tax = math.floor(
                tax
                + (breakpoints.breakpoint3 - breakpoints.breakpoint2) * tariff.zone4_rate
                + (x - breakpoints.breakpoint3) * tariff.zone5_rate
            )
        else:
            tax = math.floor(tax + (x - breakpoints.breakpoint2) * tariff.zone4_rate)

    if x > breakpoints.breakpoint1:
        # Comparison calculation: the marginal rate may not drop after breakpoint1.
        at_breakpoint = double_difference(breakpoints.breakpoint1, profile)
        comparison = math.floor(
            at_breakpoint + (x - breakpoints.breakpoint1) * tariff.zone4_rate
        )
        tax = max(tax, comparison)

    return max(0, math.floor(tax))


def calculate_income_tax(
    taxable_income: float,
    tax_class: TaxClass,
    profile: ProfileConfiguration,
    procedure: TariffProcedure | None = None,
) -> tuple[int, TariffProcedure, int]:
    """Return ``(rounded_base, procedure, income_tax)`` for ``tax_class``.

    ``procedure`` overrides the class mapping; it exists so every procedure
    can be run against any base.
    """

    selected = procedure or TARIFF_PROCEDURES[tax_class]

    if selected is TariffProcedure.STANDARD:
        rounded = round_taxable_income(taxable_income, profile)
        return rounded, selected, standard_tariff(rounded, profile)
    if selected is TariffProcedure.SPLITTING:
        rounded = round_taxable_income(taxable_income, profile)
        return rounded, selected, splitting_tariff(rounded, profile)
    if selected is TariffProcedure.SHIFTED_STANDARD:
        rounded = round_taxable_income(
            taxable_income + profile.tariff.basic_allowance, profile
        )
        return rounded, selected, calculate_tariff(rounded, profile.tariff)
    if selected is TariffProcedure.SECONDARY:
        rounded = round_taxable_income(taxable_income, profile)
        return rounded, selected, secondary_class_tariff(rounded, profile)

    raise ValueError(f"Unsupported tariff procedure: {selected}")


__all__ = [
    "TARIFF_PROCEDURES",
    "calculate_income_tax",
    "double_difference",
    "round_taxable_income",
    "secondary_class_tariff",
    "splitting_tariff",
    "standard_tariff",
]
