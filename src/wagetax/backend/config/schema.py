"""Pydantic models describing the parameter profile schema."""

from __future__ import annotations

from typing import Any, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class UnknownProfileError(LookupError):
    """Raised when a strict lookup names a profile that is not declared."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Unknown tax profile '{profile_id}'")
        self.profile_id = profile_id


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _ensure_non_negative(scope: str, values: dict[str, float]) -> None:
    for name, value in values.items():
        if value < 0:
            raise ConfigurationError(f"{scope}: '{name}' must be non-negative")


class TariffConfig(ImmutableModel):
    """Coefficients of the five-zone income tax tariff (§32a EStG)."""

    basic_allowance: float
    zone1_end: float
    zone2_end: float
    zone3_end: float
    zone2_coefficient: float
    zone2_linear: float = 1400.0
    zone3_coefficient: float
    zone3_linear: float = 2397.0
    zone3_base: float
    zone4_rate: float = 0.42
    zone4_offset: float
    zone5_rate: float = 0.45
    zone5_offset: float
    rounding_granularity: int = 36

    @model_validator(mode="after")
    def _validate_zones(self) -> Self:
        _ensure_non_negative("tariff", self.model_dump())
        if not (self.basic_allowance < self.zone1_end < self.zone2_end < self.zone3_end):
            raise ConfigurationError(
                "tariff: zone thresholds must be strictly ascending "
                "(basic_allowance < zone1_end < zone2_end < zone3_end)"
            )
        if self.rounding_granularity <= 0:
            raise ConfigurationError("tariff: 'rounding_granularity' must be positive")
        if self.zone5_rate < self.zone4_rate:
            raise ConfigurationError("tariff: 'zone5_rate' cannot be below 'zone4_rate'")
        return self


class AllowanceConfig(ImmutableModel):
    """Flat allowances subtracted from gross income before the tariff."""

    work_expense_allowance: float
    special_expense_allowance: float
    single_parent_relief: float

    @model_validator(mode="after")
    def _validate_amounts(self) -> Self:
        _ensure_non_negative("allowances", self.model_dump())
        return self


class ContributionRate(ImmutableModel):
    """Combined employer and employee rate with its assessment ceiling."""

    rate: float
    ceiling: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Contribution rates must be between 0 and 1")
        if self.ceiling < 0:
            raise ConfigurationError("Contribution ceilings must be non-negative")
        return self


class ContributionConfig(ImmutableModel):
    """Social-insurance branches with their own rates and ceilings."""

    pension: ContributionRate
    unemployment: ContributionRate
    health: ContributionRate
    care: ContributionRate


class CareInsuranceConfig(ImmutableModel):
    """Employee long-term-care rate adjustments for age and children."""

    employee_base_rate: float
    childless_surcharge: float
    childless_surcharge_min_age: int = 23
    child_reduction: float
    max_child_reductions: int = 4
    minimum_employee_rate: float = 0.017

    @model_validator(mode="after")
    def _validate_rates(self) -> Self:
        _ensure_non_negative("care", self.model_dump())
        if self.minimum_employee_rate > self.employee_base_rate:
            raise ConfigurationError(
                "care: 'minimum_employee_rate' cannot exceed 'employee_base_rate'"
            )
        return self


class SolidarityConfig(ImmutableModel):
    """Solidarity surcharge exemption limit and rates (§4 SolZG)."""

    exemption_threshold: float
    rate: float
    mitigation_rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        _ensure_non_negative("solidarity", self.model_dump())
        if self.mitigation_rate < self.rate:
            raise ConfigurationError(
                "solidarity: 'mitigation_rate' must not be below the flat rate"
            )
        return self


class SecondaryClassConfig(ImmutableModel):
    """Breakpoints of the special procedure for tax classes V and VI."""

    breakpoint1: float
    breakpoint2: float
    breakpoint3: float
    minimum_rate: float = 0.14

    @model_validator(mode="after")
    def _validate_breakpoints(self) -> Self:
        _ensure_non_negative("secondary_class", self.model_dump())
        if not (self.breakpoint1 < self.breakpoint2 < self.breakpoint3):
            raise ConfigurationError(
                "secondary_class: breakpoints must be strictly ascending"
            )
        return self


class LumpSumConfig(ImmutableModel):
    """Factors of the simplified Vorsorgepauschale estimate."""

    unemployment_factor: float

    @model_validator(mode="after")
    def _validate_factor(self) -> Self:
        if not 0 <= self.unemployment_factor <= 1:
            raise ConfigurationError(
                "lump_sum: 'unemployment_factor' must be between 0 and 1"
            )
        return self


class ChurchTaxConfig(ImmutableModel):
    """Church tax rates accepted for a profile."""

    permitted_rates: Sequence[float] = (0.08, 0.09)

    @field_validator("permitted_rates", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Sequence[float]:
        if value is None:
            return (0.08, 0.09)
        if isinstance(value, (list, tuple)):
            return tuple(float(entry) for entry in value)
        raise ConfigurationError("church_tax: 'permitted_rates' must be a list")

    @model_validator(mode="after")
    def _validate_rates(self) -> Self:
        if not self.permitted_rates:
            raise ConfigurationError("church_tax: at least one rate must be permitted")
        if any(not 0 <= rate <= 1 for rate in self.permitted_rates):
            raise ConfigurationError("church_tax: rates must be between 0 and 1")
        return self


class ProfileConfiguration(ImmutableModel):
    """Complete constant set parameterising one tax year or revision."""

    id: str
    year: int
    label: str
    description: str = ""
    tariff: TariffConfig
    allowances: AllowanceConfig
    contributions: ContributionConfig
    care: CareInsuranceConfig
    solidarity: SolidarityConfig
    secondary_class: SecondaryClassConfig
    lump_sum: LumpSumConfig
    church_tax: ChurchTaxConfig = Field(default_factory=ChurchTaxConfig)

    @model_validator(mode="after")
    def _validate_profile(self) -> Self:
        if not self.id.strip():
            raise ConfigurationError("Profiles require a non-empty 'id'")
        if self.year <= 0:
            raise ConfigurationError("Profile 'year' must be a positive integer")
        return self


class ProfileManifestEntry(ImmutableModel):
    """Entry describing a shipped profile in the manifest."""

    id: str
    filename: str | None = None
    status: str = "active"

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.id}.yaml"


class ProfileManifest(ImmutableModel):
    """Manifest listing the available profile files and the default one."""

    default_profile: str
    profiles: Sequence[ProfileManifestEntry]

    @model_validator(mode="after")
    def _validate_profiles(self) -> Self:
        seen: set[str] = set()
        for entry in self.profiles:
            if entry.id in seen:
                raise ConfigurationError(
                    f"Duplicate profile '{entry.id}' declared in the configuration manifest"
                )
            seen.add(entry.id)
        if self.default_profile not in seen:
            raise ConfigurationError(
                f"Default profile '{self.default_profile}' is not declared in the manifest"
            )
        return self

    def get_entry(self, profile_id: str) -> ProfileManifestEntry:
        for entry in self.profiles:
            if entry.id == profile_id:
                return entry
        raise KeyError(profile_id)

    @computed_field
    @property
    def profile_ids(self) -> tuple[str, ...]:
        return tuple(entry.id for entry in self.profiles)


__all__ = [
    "AllowanceConfig",
    "CareInsuranceConfig",
    "ChurchTaxConfig",
    "ConfigurationError",
    "ContributionConfig",
    "ContributionRate",
    "ImmutableModel",
    "LumpSumConfig",
    "ProfileConfiguration",
    "ProfileManifest",
    "ProfileManifestEntry",
    "SecondaryClassConfig",
    "SolidarityConfig",
    "TariffConfig",
    "UnknownProfileError",
    "ValidationError",
]
