"""Employee social-insurance contributions.

Pension, unemployment, and health insurance are split evenly between
employer and employee; each branch is assessed up to its own ceiling. The
long-term-care share depends on age and the number of children (PUEG).
"""

from __future__ import annotations

from dataclasses import dataclass

from wagetax.backend.config.profile_config import (
    CareInsuranceConfig,
    ContributionRate,
    ProfileConfiguration,
)

from .utils import round_currency


@dataclass(frozen=True)
class SocialContributions:
    """Employee contributions for one year, rounded to cents."""

    pension: float
    unemployment: float
    health: float
    care: float
    care_rate: float

    @property
    def total(self) -> float:
        return round_currency(self.pension + self.unemployment + self.health + self.care)


def _assessment_base(gross_income: float, branch: ContributionRate) -> float:
    return min(gross_income, branch.ceiling)


def calculate_care_rate(age: int, children: int, care: CareInsuranceConfig) -> float:
    """Return the employee long-term-care rate for ``age`` and ``children``.

    Childless employees from age 23 pay a surcharge; the second to fifth
    child each reduce the rate. The result never drops below the minimum.
    """

    rate = care.employee_base_rate

    if age >= care.childless_surcharge_min_age and children == 0:
        rate += care.childless_surcharge

    reductions = max(0, min(children - 1, care.max_child_reductions))
    rate -= reductions * care.child_reduction

    return max(care.minimum_employee_rate, rate)


def calculate_social_contributions(
    gross_income: float,
    additional_contribution_rate: float,
    age: int,
    children: int,
    profile: ProfileConfiguration,
) -> SocialContributions:
    """Return the four employee contributions for ``gross_income``.

    ``additional_contribution_rate`` is the health insurer's surcharge in
    percent (e.g. ``2.9``); the employee carries half of it.
    """

    contributions = profile.contributions

    pension = round_currency(
        _assessment_base(gross_income, contributions.pension) * (contributions.pension.rate / 2)
    )
    unemployment = round_currency(
        _assessment_base(gross_income, contributions.unemployment)
        * (contributions.unemployment.rate / 2)
    )

    health_rate = contributions.health.rate / 2 + additional_contribution_rate / 100 / 2
    health = round_currency(_assessment_base(gross_income, contributions.health) * health_rate)

    care_rate = calculate_care_rate(age, children, profile.care)
    care = round_currency(_assessment_base(gross_income, contributions.care) * care_rate)

    return SocialContributions(
        pension=pension,
        unemployment=unemployment,
        health=health,
        care=care,
        care_rate=care_rate,
    )


__all__ = ["SocialContributions", "calculate_care_rate", "calculate_social_contributions"]
