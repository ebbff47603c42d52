"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest


def _resolve_profile(req: Request, payload: dict[str, Any]) -> None:
    """Populate ``profile_id`` from the ``profile`` query parameter if absent."""

    profile_id = payload.get("profile_id")
    if isinstance(profile_id, str) and profile_id.strip():
        return

    profile_param = req.args.get("profile")
    if profile_param and profile_param.strip():
        payload["profile_id"] = profile_param.strip()


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract and validate a JSON payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_profile(req, payload)

    return payload


def parse_series_range(
    req: Request, defaults: tuple[float, float, float]
) -> tuple[float, float, float]:
    """Read ``start``, ``stop``, and ``step`` query parameters from ``req``."""

    values: list[float] = []
    for name, default in zip(("start", "stop", "step"), defaults):
        raw = req.args.get(name)
        if raw is None or not raw.strip():
            values.append(default)
            continue
        try:
            values.append(float(raw))
        except ValueError as exc:
            raise BadRequest(f"Query parameter '{name}' must be a number") from exc

    start, stop, step = values
    return start, stop, step
