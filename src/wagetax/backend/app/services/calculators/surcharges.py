"""Surcharges levied on top of the income tax."""

from __future__ import annotations

from wagetax.backend.config.profile_config import SolidarityConfig

from .utils import round_currency


def calculate_solidarity_surcharge(income_tax: float, solidarity: SolidarityConfig) -> float:
    """Solidarity surcharge with mitigation zone (§4 SolZG).

    Nothing is due up to the exemption threshold. Above it the surcharge is
    the lesser of the flat rate on the whole tax and the mitigation rate on
    the excess over the threshold.
    """

    if income_tax <= solidarity.exemption_threshold:
        return 0.0

    full = income_tax * solidarity.rate
    mitigated = (income_tax - solidarity.exemption_threshold) * solidarity.mitigation_rate
    return round_currency(min(full, mitigated))


def calculate_church_tax(income_tax: float, enabled: bool, rate: float) -> float:
    """Church tax as a flat share (8 % or 9 %) of the income tax."""

    if not enabled:
        return 0.0
    return round_currency(income_tax * rate)


__all__ = ["calculate_church_tax", "calculate_solidarity_surcharge"]
