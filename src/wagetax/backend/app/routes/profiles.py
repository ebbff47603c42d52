"""Expose tax profile metadata and constants to API clients.

Clients use these endpoints to offer a profile selector and to display the
constants a calculation was based on.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from wagetax.backend.app.http import problem_response
from wagetax.backend.config.profile_config import (
    UnknownProfileError,
    available_profiles,
    default_profile_id,
    list_profiles,
    load_profile,
    manifest_entries,
)
from wagetax.backend.version import get_project_version

blueprint = Blueprint("profiles", __name__, url_prefix="/api/v1/profiles")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the profile manifest."""

    return {
        "version": get_project_version(),
        "profiles": list(available_profiles()),
        "default_profile": default_profile_id(),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    payload = get_configuration_metadata()
    return jsonify(payload), 200


@blueprint.get("")
def list_profile_summaries() -> tuple[Any, int]:
    """Return all configured profiles with lightweight metadata."""

    statuses = {entry.id: entry.status for entry in manifest_entries()}
    profiles = [
        {
            "id": summary.id,
            "year": summary.year,
            "label": summary.label,
            "description": summary.description,
            "status": statuses.get(summary.id),
        }
        for summary in list_profiles()
    ]
    payload = {"profiles": profiles, "default_profile": default_profile_id()}
    return jsonify(payload), 200


@blueprint.get("/<profile_id>")
def get_profile(profile_id: str) -> tuple[Any, int]:
    """Return the full constant set of a single profile."""

    try:
        profile = load_profile(profile_id)
    except UnknownProfileError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(profile.model_dump(mode="json")), 200
