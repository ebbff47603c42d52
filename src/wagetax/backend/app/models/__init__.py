"""Typed request/response models shared across the calculation services."""

from __future__ import annotations

from .api import (
    CalculationRequest,
    CalculationResult,
    CalculationValidationError,
    IncomeSeriesPoint,
    ProgressionPoint,
    TariffProcedure,
    TaxClass,
    format_validation_error,
)

__all__ = [
    "CalculationRequest",
    "CalculationResult",
    "CalculationValidationError",
    "IncomeSeriesPoint",
    "ProgressionPoint",
    "TariffProcedure",
    "TaxClass",
    "format_validation_error",
]
