"""Orchestrate request validation and the wage-tax calculation pipeline.

The calculation service resolves the tax profile and runs the calculators in
statutory order: contributions, allowances, the lump-sum deduction, the
tariff for the tax class, then surcharges and totals. Timing hooks live here
to give the rest of the application a simple ``calculate_tax`` entry point.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from wagetax.backend.app.models import (
    CalculationRequest,
    CalculationResult,
    CalculationValidationError,
)
from wagetax.backend.config.profile_config import ProfileConfiguration, load_profile

from .calculators import (
    calculate_church_tax,
    calculate_income_tax,
    calculate_social_contributions,
    calculate_solidarity_surcharge,
    estimate_lump_sum_deduction,
    percentage_of,
    resolve_allowances,
    round_currency,
)

_LOGGER = logging.getLogger(__name__)


def _timing_enabled() -> bool:
    """Return ``True`` when calculation sections should be timed."""

    flag = os.getenv("WAGETAX_TIME_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _timed_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when timing is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def parse_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    """Validate ``payload`` into a :class:`CalculationRequest`."""

    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise CalculationValidationError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(dict(payload))
    except ValidationError as exc:
        raise CalculationValidationError.from_validation_error(exc) from exc


def _ensure_permitted_church_rate(
    request: CalculationRequest, profile: ProfileConfiguration
) -> None:
    permitted = profile.church_tax.permitted_rates
    if any(math.isclose(request.church_tax_rate, rate) for rate in permitted):
        return
    allowed = ", ".join(f"{rate:g}" for rate in permitted)
    raise CalculationValidationError(
        "Invalid calculation request: church_tax_rate: "
        f"must be one of {allowed} for profile '{profile.id}'",
        field="church_tax_rate",
    )


def calculate_for_profile(
    request: CalculationRequest, profile: ProfileConfiguration
) -> CalculationResult:
    """Run the calculation for an already validated request and profile."""

    _ensure_permitted_church_rate(request, profile)

    timings: dict[str, float] | None = {} if _timing_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    gross = request.gross_income

    with _timed_section("contributions", timings):
        contributions = calculate_social_contributions(
            gross,
            request.additional_contribution_rate,
            request.age,
            request.children,
            profile,
        )
        total_contributions = contributions.total

    with _timed_section("taxable_income", timings):
        allowances = resolve_allowances(
            request.tax_class, request.excess_work_expenses, profile
        )
        lump_sum = estimate_lump_sum_deduction(contributions, profile)
        taxable_income = max(0.0, gross - allowances.total - lump_sum)

    with _timed_section("income_tax", timings):
        rounded_taxable, procedure, income_tax = calculate_income_tax(
            taxable_income, request.tax_class, profile
        )

    with _timed_section("surcharges", timings):
        solidarity = calculate_solidarity_surcharge(income_tax, profile.solidarity)
        church_tax = calculate_church_tax(
            income_tax, request.church_tax, request.church_tax_rate
        )

    total_tax = round_currency(income_tax + solidarity + church_tax)
    total_deductions = round_currency(total_tax + total_contributions)
    net_income = round_currency(gross - total_deductions)
    net_monthly_income = round_currency(net_income / 12)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate_tax timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return CalculationResult(
        gross_income=gross,
        tax_class=request.tax_class,
        profile_id=profile.id,
        church_tax=request.church_tax,
        church_tax_rate=request.church_tax_rate,
        additional_contribution_rate=request.additional_contribution_rate,
        children=request.children,
        age=request.age,
        pension_contribution=contributions.pension,
        unemployment_contribution=contributions.unemployment,
        health_contribution=contributions.health,
        care_contribution=contributions.care,
        care_rate=contributions.care_rate,
        total_contributions=total_contributions,
        work_expense_allowance=allowances.work_expense_allowance,
        special_expense_allowance=allowances.special_expense_allowance,
        single_parent_relief=allowances.single_parent_relief,
        lump_sum_deduction=lump_sum,
        taxable_income=taxable_income,
        rounded_taxable_income=rounded_taxable,
        tariff_procedure=procedure,
        income_tax=float(income_tax),
        solidarity_surcharge=solidarity,
        church_tax_amount=church_tax,
        total_tax=total_tax,
        total_deductions=total_deductions,
        net_income=net_income,
        net_monthly_income=net_monthly_income,
        effective_tax_rate=round_currency(percentage_of(total_tax, gross)),
        deduction_rate=round_currency(percentage_of(total_deductions, gross)),
        net_retention_rate=round_currency(percentage_of(net_income, gross)),
    )


def calculate_tax(payload: Mapping[str, Any] | CalculationRequest) -> CalculationResult:
    """Compute the wage-tax breakdown for the provided payload.

    Raises :class:`CalculationValidationError` for invalid inputs and
    :class:`~wagetax.backend.config.profile_config.UnknownProfileError` when
    ``profile_id`` names no shipped profile.
    """

    request = parse_request(payload)
    profile = load_profile(request.profile_id)
    return calculate_for_profile(request, profile)


__all__ = ["calculate_for_profile", "calculate_tax", "parse_request"]
