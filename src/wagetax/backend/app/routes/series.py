"""REST endpoints for chart series derived from repeated calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from wagetax.backend.app.services.series_service import (
    INCOME_SERIES_RANGE,
    PROGRESSION_SERIES_RANGE,
    generate_income_series,
    generate_progression_series,
)
from wagetax.backend.services.request_parser import (
    parse_calculation_payload,
    parse_series_range,
)
from wagetax.backend.services.response_builder import build_series_response

blueprint = Blueprint("series", __name__, url_prefix="/api/v1/series")


@blueprint.post("/income")
def create_income_series() -> tuple[Any, int]:
    """Sweep gross income while holding the submitted inputs constant."""

    payload = parse_calculation_payload(request)
    start, stop, step = parse_series_range(request, INCOME_SERIES_RANGE)
    points = generate_income_series(payload, start=start, stop=stop, step=step)
    return build_series_response(points)


@blueprint.get("/progression")
def get_progression_series() -> tuple[Any, int]:
    """Marginal and average tax rates for a single earner in class I."""

    start, stop, step = parse_series_range(request, PROGRESSION_SERIES_RANGE)
    points = generate_progression_series(
        request.args.get("profile"), start=start, stop=stop, step=step
    )
    return build_series_response(points)
