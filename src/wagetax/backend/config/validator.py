"""Utilities for validating profile configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from .profile_config import (
    CareInsuranceConfig,
    ContributionConfig,
    ProfileConfiguration,
    SecondaryClassConfig,
    SolidarityConfig,
    TariffConfig,
    UnknownProfileError,
    available_profiles,
    load_profile,
)
from .schema import ConfigurationError


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _tariff_value(tariff: TariffConfig, x: float) -> float:
    """Unrounded tariff amount used for continuity checks."""

    if x <= tariff.basic_allowance:
        return 0.0
    if x <= tariff.zone1_end:
        y = (x - tariff.basic_allowance) / 10000
        return (tariff.zone2_coefficient * y + tariff.zone2_linear) * y
    if x <= tariff.zone2_end:
        z = (x - tariff.zone1_end) / 10000
        return (tariff.zone3_coefficient * z + tariff.zone3_linear) * z + tariff.zone3_base
    if x <= tariff.zone3_end:
        return tariff.zone4_rate * x - tariff.zone4_offset
    return tariff.zone5_rate * x - tariff.zone5_offset


def _validate_tariff(tariff: TariffConfig) -> list[str]:
    errors: list[str] = []

    # The tariff must never fall when income crosses a zone threshold.
    boundaries = (
        ("basic_allowance", tariff.basic_allowance),
        ("zone1_end", tariff.zone1_end),
        ("zone2_end", tariff.zone2_end),
        ("zone3_end", tariff.zone3_end),
    )
    for name, boundary in boundaries:
        below = _tariff_value(tariff, boundary)
        above = _tariff_value(tariff, boundary + 1)
        if above < below:
            errors.append(
                _format_scope(
                    "tariff",
                    f"tax decreases across {name} ({below:.2f} -> {above:.2f})",
                )
            )

    for label, rate in {"zone4_rate": tariff.zone4_rate, "zone5_rate": tariff.zone5_rate}.items():
        if rate > 1:
            errors.append(_format_scope("tariff", f"{label} {rate} must not exceed 1"))

    return errors


def _validate_contributions(contributions: ContributionConfig) -> list[str]:
    errors: list[str] = []

    for branch in ("pension", "unemployment", "health", "care"):
        entry = getattr(contributions, branch)
        if entry.ceiling == 0:
            errors.append(
                _format_scope(
                    f"contributions.{branch}",
                    "ceiling of 0 disables the contribution entirely",
                )
            )

    return errors


def _validate_care(care: CareInsuranceConfig, contributions: ContributionConfig) -> list[str]:
    errors: list[str] = []

    highest = care.employee_base_rate + care.childless_surcharge
    if highest > contributions.care.rate:
        errors.append(
            _format_scope(
                "care",
                (
                    f"employee rate {highest:.4f} including the childless surcharge "
                    f"exceeds the combined care rate {contributions.care.rate:.4f}"
                ),
            )
        )

    return errors


def _validate_solidarity(solidarity: SolidarityConfig) -> list[str]:
    errors: list[str] = []

    if solidarity.rate > 1 or solidarity.mitigation_rate > 1:
        errors.append(_format_scope("solidarity", "rates must not exceed 1"))

    return errors


def _validate_secondary_class(
    secondary: SecondaryClassConfig, tariff: TariffConfig
) -> list[str]:
    errors: list[str] = []

    if secondary.breakpoint3 > tariff.zone3_end:
        errors.append(
            _format_scope(
                "secondary_class",
                "breakpoint3 lies beyond the top tariff threshold",
            )
        )

    return errors


def validate_profile_configuration(config: ProfileConfiguration) -> list[str]:
    """Return a list of cross-field issues for the provided profile."""

    errors: list[str] = []

    errors.extend(_validate_tariff(config.tariff))
    errors.extend(_validate_contributions(config.contributions))
    errors.extend(_validate_care(config.care, config.contributions))
    errors.extend(_validate_solidarity(config.solidarity))
    errors.extend(_validate_secondary_class(config.secondary_class, config.tariff))

    return errors


def validate_all_profiles(profile_ids: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate all configured profiles and return issues keyed by identifier."""

    targets = profile_ids or available_profiles()
    results: dict[str, list[str]] = {}

    for profile_id in targets:
        config = load_profile(profile_id)
        results[profile_id] = validate_profile_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax profiles and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "profiles",
        nargs="*",
        help="Specific profile identifiers to validate (defaults to all configured profiles)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    profile_ids = args.profiles or list(available_profiles())

    if not profile_ids:
        parser.print_help()
        return 1

    exit_code = 0

    for profile_id in profile_ids:
        try:
            config = load_profile(profile_id)
        except (FileNotFoundError, UnknownProfileError, ConfigurationError) as error:
            print(f"[{profile_id}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_profile_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{profile_id}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{profile_id}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
