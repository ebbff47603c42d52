"""Income tax tariff of §32a Abs. 1 EStG.

The tariff maps a taxable income ``x`` (whole euros) onto five zones:

  1. ``x <= basic_allowance``                      -> 0
  2. ``x <= zone1_end``   y = (x - allowance) / 10 000
                          (a * y + 1400) * y
  3. ``x <= zone2_end``   z = (x - zone1_end) / 10 000
                          (b * z + 2397) * z + zone3_base
  4. ``x <= zone3_end``   0.42 * x - zone4_offset
  5. otherwise            0.45 * x - zone5_offset

Coefficients come from the selected profile; the zone structure does not.
"""

from __future__ import annotations

import math

from wagetax.backend.config.profile_config import TariffConfig

from .utils import floor_currency


def calculate_tariff(taxable_income: float, tariff: TariffConfig) -> int:
    """Return the income tax for ``taxable_income`` in whole euros."""

    x = floor_currency(taxable_income)

    if x <= tariff.basic_allowance:
        return 0

    if x <= tariff.zone1_end:
        y = (x - tariff.basic_allowance) / 10000
        tax = (tariff.zone2_coefficient * y + tariff.zone2_linear) * y
    elif x <= tariff.zone2_end:
        z = (x - tariff.zone1_end) / 10000
        tax = (tariff.zone3_coefficient * z + tariff.zone3_linear) * z + tariff.zone3_base
    elif x <= tariff.zone3_end:
        tax = tariff.zone4_rate * x - tariff.zone4_offset
    else:
        tax = tariff.zone5_rate * x - tariff.zone5_offset

    return max(0, math.floor(tax))


def marginal_tax_rate(taxable_income: float, tariff: TariffConfig) -> float:
    """Return the analytic marginal rate (fraction) at ``taxable_income``.

    Derivative of the zone polynomials; clamped to ``[0, zone5_rate]``.
    """

    x = taxable_income

    if x <= tariff.basic_allowance:
        rate = 0.0
    elif x <= tariff.zone1_end:
        y = (x - tariff.basic_allowance) / 10000
        rate = (2 * tariff.zone2_coefficient * y + tariff.zone2_linear) / 10000
    elif x <= tariff.zone2_end:
        z = (x - tariff.zone1_end) / 10000
        rate = (2 * tariff.zone3_coefficient * z + tariff.zone3_linear) / 10000
    elif x <= tariff.zone3_end:
        rate = tariff.zone4_rate
    else:
        rate = tariff.zone5_rate

    return min(tariff.zone5_rate, max(0.0, rate))


__all__ = ["calculate_tariff", "marginal_tax_rate"]
