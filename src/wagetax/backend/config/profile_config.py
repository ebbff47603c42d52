"""Configuration loader wrapping the shared profile schema models."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    AllowanceConfig,
    CareInsuranceConfig,
    ChurchTaxConfig,
    ConfigurationError,
    ContributionConfig,
    ContributionRate,
    LumpSumConfig,
    ProfileConfiguration,
    ProfileManifest,
    ProfileManifestEntry,
    SecondaryClassConfig,
    SolidarityConfig,
    TariffConfig,
    UnknownProfileError,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


@dataclass(frozen=True)
class ProfileSummary:
    """Lightweight listing entry for a configured profile."""

    id: str
    year: int
    label: str
    description: str


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> ProfileManifest:
    """Load and cache the profile manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return ProfileManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[ProfileManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().profiles


def default_profile_id() -> str:
    """Return the identifier used when a caller does not name a profile."""

    return load_manifest().default_profile


def available_profiles() -> Sequence[str]:
    """Return the profile identifiers declared in the manifest, in order."""

    return load_manifest().profile_ids


@lru_cache(maxsize=8)
def _load_profile_file(profile_id: str) -> ProfileConfiguration:
    try:
        manifest_entry = load_manifest().get_entry(profile_id)
    except KeyError as exc:
        raise UnknownProfileError(profile_id) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for profile {profile_id} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("id", profile_id)

    try:
        configuration = ProfileConfiguration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Configuration validation failed for {profile_id}: {error}"
        ) from error

    if configuration.id != profile_id:
        raise ConfigurationError(
            f"Configuration id mismatch: expected {profile_id}, found {configuration.id}"
        )

    _LOGGER.debug("Loaded tax profile %s from %s", profile_id, config_file.name)
    return configuration


def load_profile(profile_id: str | None = None) -> ProfileConfiguration:
    """Return the profile named ``profile_id``, or the default profile.

    Unknown identifiers raise :class:`UnknownProfileError`; there is no
    silent fallback on this path.
    """

    return _load_profile_file(profile_id or default_profile_id())


def load_profile_or_default(profile_id: str | None = None) -> ProfileConfiguration:
    """Return the named profile, falling back to the default for unknown ids."""

    if profile_id and profile_id in available_profiles():
        return _load_profile_file(profile_id)
    if profile_id:
        _LOGGER.debug("Unknown tax profile %s requested; using default", profile_id)
    return _load_profile_file(default_profile_id())


def list_profiles() -> list[ProfileSummary]:
    """Return identifier, year tag, label, and description for every profile."""

    summaries: list[ProfileSummary] = []
    for profile_id in available_profiles():
        profile = _load_profile_file(profile_id)
        summaries.append(
            ProfileSummary(
                id=profile.id,
                year=profile.year,
                label=profile.label,
                description=profile.description,
            )
        )
    return summaries


def clear_caches() -> None:
    """Drop cached manifest and profile data (used when files change)."""

    _load_profile_file.cache_clear()
    load_manifest.cache_clear()


__all__ = [
    "AllowanceConfig",
    "CONFIG_DIRECTORY",
    "CareInsuranceConfig",
    "ChurchTaxConfig",
    "ConfigurationError",
    "ContributionConfig",
    "ContributionRate",
    "LumpSumConfig",
    "MANIFEST_FILE",
    "ProfileConfiguration",
    "ProfileManifest",
    "ProfileManifestEntry",
    "ProfileSummary",
    "SecondaryClassConfig",
    "SolidarityConfig",
    "TariffConfig",
    "UnknownProfileError",
    "available_profiles",
    "clear_caches",
    "default_profile_id",
    "list_profiles",
    "load_manifest",
    "load_profile",
    "load_profile_or_default",
    "manifest_entries",
]
