"""Domain-specific calculation helpers."""

from .contributions import SocialContributions, calculate_care_rate, calculate_social_contributions
from .deductions import AppliedAllowances, estimate_lump_sum_deduction, resolve_allowances
from .surcharges import calculate_church_tax, calculate_solidarity_surcharge
from .tariff import calculate_tariff, marginal_tax_rate
from .tax_classes import (
    TARIFF_PROCEDURES,
    calculate_income_tax,
    double_difference,
    round_taxable_income,
    secondary_class_tariff,
)
from .utils import (
    floor_currency,
    percentage_of,
    round_currency,
    round_down_to_multiple,
    round_whole,
)

__all__ = [
    "AppliedAllowances",
    "SocialContributions",
    "TARIFF_PROCEDURES",
    "calculate_care_rate",
    "calculate_church_tax",
    "calculate_income_tax",
    "calculate_social_contributions",
    "calculate_solidarity_surcharge",
    "calculate_tariff",
    "double_difference",
    "estimate_lump_sum_deduction",
    "floor_currency",
    "marginal_tax_rate",
    "percentage_of",
    "resolve_allowances",
    "round_currency",
    "round_down_to_multiple",
    "round_taxable_income",
    "round_whole",
    "secondary_class_tariff",
]
