"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NamedTuple, Tuple

from flask import jsonify

from wagetax.backend.app.models import CalculationResult

ResponseTuple = Tuple[Any, int]


def build_calculation_response(result: CalculationResult) -> ResponseTuple:
    """Return a Flask JSON response for the calculation ``result``."""

    return jsonify(result.model_dump(mode="json")), 200


def build_series_response(points: Sequence[NamedTuple]) -> ResponseTuple:
    """Return a Flask JSON response wrapping series ``points``."""

    return jsonify({"points": [point._asdict() for point in points]}), 200
