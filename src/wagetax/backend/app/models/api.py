"""Pydantic models describing the public API surface."""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "TaxClass",
    "TariffProcedure",
    "CalculationRequest",
    "CalculationResult",
    "CalculationValidationError",
    "IncomeSeriesPoint",
    "ProgressionPoint",
    "format_validation_error",
]


class TaxClass(str, Enum):
    """Wage-tax classes (Steuerklassen) I to VI."""

    I = "I"  # noqa: E741
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"
    VI = "VI"


class TariffProcedure(str, Enum):
    """Ways of applying the income tax tariff to a taxable base."""

    STANDARD = "standard"
    SPLITTING = "splitting"
    SHIFTED_STANDARD = "shifted_standard"
    SECONDARY = "secondary"


class CalculationValidationError(ValueError):
    """Raised when a calculation request cannot be computed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    @classmethod
    def from_validation_error(cls, error: ValidationError) -> "CalculationValidationError":
        issues = error.errors()
        field = None
        if issues:
            location = issues[0].get("loc", ())
            field = ".".join(str(part) for part in location) or None
        return cls(format_validation_error(error), field=field)


class CalculationRequest(BaseModel):
    """Inputs for a single annual wage-tax calculation.

    Monetary amounts are annual euros; ``additional_contribution_rate`` is the
    health insurer's surcharge in percent. Fields are validated in
    declaration order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_income: float = Field(..., ge=0, allow_inf_nan=False)
    tax_class: TaxClass
    church_tax: bool = False
    church_tax_rate: float = Field(default=0.09, ge=0, le=1, allow_inf_nan=False)
    additional_contribution_rate: float = Field(default=1.7, ge=0, allow_inf_nan=False)
    excess_work_expenses: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    children: int = Field(default=0, ge=0)
    age: int = Field(default=30, ge=0)
    profile_id: str | None = None

    @field_validator("tax_class", mode="before")
    @classmethod
    def _normalise_tax_class(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("profile_id", mode="before")
    @classmethod
    def _blank_profile_is_default(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CalculationResult(BaseModel):
    """Breakdown of one calculation, from gross to net income.

    Rates are percentages rounded to two decimals.
    """

    model_config = ConfigDict(frozen=True)

    gross_income: float
    tax_class: TaxClass
    profile_id: str
    church_tax: bool
    church_tax_rate: float
    additional_contribution_rate: float
    children: int
    age: int

    pension_contribution: float
    unemployment_contribution: float
    health_contribution: float
    care_contribution: float
    care_rate: float
    total_contributions: float

    work_expense_allowance: float
    special_expense_allowance: float
    single_parent_relief: float
    lump_sum_deduction: float
    taxable_income: float
    rounded_taxable_income: int
    tariff_procedure: TariffProcedure

    income_tax: float
    solidarity_surcharge: float
    church_tax_amount: float
    total_tax: float
    total_deductions: float

    net_income: float
    net_monthly_income: float
    effective_tax_rate: float
    deduction_rate: float
    net_retention_rate: float


class IncomeSeriesPoint(NamedTuple):
    gross_income: float
    net_income: float
    total_tax: float
    total_contributions: float


class ProgressionPoint(NamedTuple):
    income: float
    marginal_rate: float
    average_rate: float


def format_validation_error(error: ValidationError) -> str:
    """Return a concise description of the first validation issue."""

    issues = error.errors()
    if not issues:
        return f"Invalid calculation request: {error}"

    issue = issues[0]
    location = ".".join(str(part) for part in issue.get("loc", ()))
    message = issue.get("msg", "Invalid value")
    if "greater than or equal to 0" in message.lower():
        message = "value cannot be negative"
    if location:
        return f"Invalid calculation request: {location}: {message}"
    return f"Invalid calculation request: {message}"
