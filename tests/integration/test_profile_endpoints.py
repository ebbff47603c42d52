"""Integration tests for the profile metadata endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask.testing import FlaskClient

from wagetax.backend.version import get_project_version


def test_list_profiles_returns_summaries(client: FlaskClient) -> None:
    response = client.get("/api/v1/profiles")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["default_profile"] == "2026_current"
    assert [entry["id"] for entry in payload["profiles"]] == ["2026_current", "2026_legacy"]
    statuses = {entry["id"]: entry["status"] for entry in payload["profiles"]}
    assert statuses == {"2026_current": "active", "2026_legacy": "compatibility"}


def test_meta_endpoint_exposes_version(client: FlaskClient) -> None:
    response = client.get("/api/v1/profiles/meta")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["version"] == get_project_version()
    assert payload["default_profile"] == "2026_current"


def test_profile_detail_returns_constants(client: FlaskClient) -> None:
    response = client.get("/api/v1/profiles/2026_legacy")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["id"] == "2026_legacy"
    assert payload["tariff"]["zone1_end"] == 17_443
    assert payload["solidarity"]["exemption_threshold"] == 20_350
    assert payload["church_tax"]["permitted_rates"] == [0.08, 0.09]


def test_unknown_profile_returns_not_found(client: FlaskClient) -> None:
    response = client.get("/api/v1/profiles/1999")

    assert response.status_code == HTTPStatus.NOT_FOUND
    payload = response.get_json()
    assert payload["error"] == "not_found"
    assert "1999" in payload["message"]
