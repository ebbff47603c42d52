"""Derived series for charting: income sweeps and tax progression."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

from wagetax.backend.app.models import (
    CalculationRequest,
    CalculationValidationError,
    IncomeSeriesPoint,
    ProgressionPoint,
    TaxClass,
)
from wagetax.backend.config.profile_config import load_profile, load_profile_or_default

from .calculation_service import calculate_for_profile, parse_request
from .calculators import marginal_tax_rate, percentage_of, round_currency

_LOGGER = logging.getLogger(__name__)

INCOME_SERIES_RANGE = (0.0, 200_000.0, 5_000.0)
PROGRESSION_SERIES_RANGE = (0.0, 300_000.0, 1_000.0)

_PROGRESSION_DEFAULTS: Mapping[str, Any] = {
    "tax_class": TaxClass.I,
    "church_tax": False,
    "additional_contribution_rate": 1.7,
    "excess_work_expenses": 0.0,
    "children": 0,
    "age": 30,
}


def _sweep(start: float, stop: float, step: float) -> list[float]:
    """Return ``start, start + step, ...`` up to and including ``stop``."""

    for name, value in (("start", start), ("stop", stop), ("step", step)):
        if not math.isfinite(value):
            raise CalculationValidationError(
                f"Series {name} must be a finite number", field=name
            )
    if step <= 0:
        raise CalculationValidationError("Series step must be positive", field="step")
    if start < 0:
        raise CalculationValidationError("Series start cannot be negative", field="start")
    if stop < start:
        raise CalculationValidationError(
            "Series stop must not be lower than start", field="stop"
        )

    count = math.floor((stop - start) / step + 1e-9) + 1
    return [start + index * step for index in range(count)]


def generate_income_series(
    payload: Mapping[str, Any] | CalculationRequest,
    start: float = INCOME_SERIES_RANGE[0],
    stop: float = INCOME_SERIES_RANGE[1],
    step: float = INCOME_SERIES_RANGE[2],
) -> list[IncomeSeriesPoint]:
    """Recompute ``payload`` across gross incomes from ``start`` to ``stop``.

    Every input except the gross income is held constant. The payload's own
    ``gross_income`` may be omitted for mappings.
    """

    incomes = _sweep(start, stop, step)
    if isinstance(payload, Mapping) and "gross_income" not in payload:
        payload = {**payload, "gross_income": start}
    request = parse_request(payload)
    profile = load_profile(request.profile_id)

    points: list[IncomeSeriesPoint] = []
    for gross in incomes:
        result = calculate_for_profile(
            request.model_copy(update={"gross_income": gross}), profile
        )
        points.append(
            IncomeSeriesPoint(
                gross_income=gross,
                net_income=result.net_income,
                total_tax=result.total_tax,
                total_contributions=result.total_contributions,
            )
        )

    _LOGGER.debug("Generated %d income series points for %s", len(points), profile.id)
    return points


def generate_progression_series(
    profile_id: str | None = None,
    start: float = PROGRESSION_SERIES_RANGE[0],
    stop: float = PROGRESSION_SERIES_RANGE[1],
    step: float = PROGRESSION_SERIES_RANGE[2],
) -> list[ProgressionPoint]:
    """Marginal and average income-tax rates (percent) for a single earner.

    The marginal rate is the analytic derivative of the tariff at the raw
    taxable base, not a difference quotient. Unknown ``profile_id`` values
    fall back to the default profile.
    """

    incomes = _sweep(start, stop, step)
    profile = load_profile_or_default(profile_id)
    template = CalculationRequest(
        gross_income=0.0, profile_id=profile.id, **_PROGRESSION_DEFAULTS
    )

    points: list[ProgressionPoint] = []
    for income in incomes:
        result = calculate_for_profile(
            template.model_copy(update={"gross_income": income}), profile
        )
        marginal = marginal_tax_rate(result.taxable_income, profile.tariff) * 100
        average = percentage_of(result.income_tax, income)
        points.append(
            ProgressionPoint(
                income=income,
                marginal_rate=round_currency(marginal),
                average_rate=round_currency(average),
            )
        )

    return points


__all__ = [
    "INCOME_SERIES_RANGE",
    "PROGRESSION_SERIES_RANGE",
    "generate_income_series",
    "generate_progression_series",
]
