"""Service-layer helpers for the WageTax backend."""

from wagetax.backend.app.services.calculation_service import calculate_tax
from wagetax.backend.app.services.series_service import (
    generate_income_series,
    generate_progression_series,
)
from wagetax.backend.config.profile_config import (
    list_profiles,
    load_profile,
    load_profile_or_default,
)

from .request_parser import parse_calculation_payload, parse_series_range
from .response_builder import build_calculation_response, build_series_response

__all__ = [
    "build_calculation_response",
    "build_series_response",
    "calculate_tax",
    "generate_income_series",
    "generate_progression_series",
    "list_profiles",
    "load_profile",
    "load_profile_or_default",
    "parse_calculation_payload",
    "parse_series_range",
]
