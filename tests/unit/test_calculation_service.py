"""Unit tests for the calculation orchestrator."""

from __future__ import annotations

import logging
import math

import pytest

from wagetax.backend.app.models import (
    CalculationRequest,
    CalculationValidationError,
    TariffProcedure,
    TaxClass,
)
from wagetax.backend.app.services.calculators import calculate_solidarity_surcharge
from wagetax.backend.config.profile_config import UnknownProfileError, load_profile
from wagetax.backend.services import calculate_tax


def _scenario(gross_income: float, tax_class: str, **overrides) -> dict:
    payload = {
        "gross_income": gross_income,
        "tax_class": tax_class,
        "church_tax": False,
        "church_tax_rate": 0.09,
        "additional_contribution_rate": 2.9,
        "excess_work_expenses": 0,
        "children": 0,
        "age": 30,
    }
    payload.update(overrides)
    return payload


@pytest.mark.parametrize(
    ("gross_income", "tax_class", "expected", "tolerance"),
    [
        (20_000, "I", 380, 160),
        (20_000, "V", 2_234, 450),
        (50_000, "III", 2_810, 160),
        (100_000, "VI", 30_689, 450),
    ],
)
def test_income_tax_matches_reference_tables(
    gross_income: float, tax_class: str, expected: int, tolerance: int
) -> None:
    result = calculate_tax(_scenario(gross_income, tax_class))

    assert abs(result.income_tax - expected) <= tolerance


def test_twenty_thousand_class_one_breakdown() -> None:
    result = calculate_tax(_scenario(20_000, "I"))

    assert result.total_contributions == 4_450.0
    assert result.lump_sum_deduction == 4_251.0
    assert result.taxable_income == 14_483.0
    assert result.rounded_taxable_income == 14_472
    assert result.tariff_procedure is TariffProcedure.STANDARD
    assert result.solidarity_surcharge == 0.0
    assert result.total_deductions == pytest.approx(result.total_tax + 4_450.0)
    assert result.net_income == pytest.approx(20_000 - result.total_deductions)
    assert result.net_monthly_income == pytest.approx(result.net_income / 12, abs=0.01)


def test_low_income_classes_two_and_three_pay_no_income_tax() -> None:
    assert calculate_tax(_scenario(20_000, "II", children=1)).income_tax == 0
    assert calculate_tax(_scenario(20_000, "III")).income_tax == 0


def test_secondary_employment_has_no_allowances() -> None:
    result = calculate_tax(_scenario(50_000, "VI"))

    assert result.work_expense_allowance == 0
    assert result.special_expense_allowance == 0
    assert result.tariff_procedure is TariffProcedure.SECONDARY


def test_single_parent_pays_less_than_single() -> None:
    single = calculate_tax(_scenario(50_000, "I"))
    single_parent = calculate_tax(_scenario(50_000, "II", children=1))

    assert single_parent.single_parent_relief == 4_260
    assert single_parent.income_tax < single.income_tax


def test_excess_work_expenses_reduce_taxable_income() -> None:
    baseline = calculate_tax(_scenario(50_000, "I"))
    with_expenses = calculate_tax(_scenario(50_000, "I", excess_work_expenses=3_000))

    assert with_expenses.work_expense_allowance == 3_000
    assert with_expenses.taxable_income == baseline.taxable_income - (3_000 - 1_230)


def test_zero_income_yields_all_zeros() -> None:
    result = calculate_tax(_scenario(0, "I"))

    for field in (
        "total_contributions",
        "taxable_income",
        "income_tax",
        "solidarity_surcharge",
        "church_tax_amount",
        "total_tax",
        "net_income",
        "net_monthly_income",
        "effective_tax_rate",
        "deduction_rate",
        "net_retention_rate",
    ):
        assert getattr(result, field) == 0, field


def test_church_tax_is_share_of_income_tax() -> None:
    result = calculate_tax(_scenario(60_000, "I", church_tax=True, church_tax_rate=0.08))

    assert result.church_tax_amount == pytest.approx(round(result.income_tax * 0.08, 2))
    assert result.total_tax == pytest.approx(
        result.income_tax + result.solidarity_surcharge + result.church_tax_amount
    )


def test_solidarity_surcharge_applies_above_threshold() -> None:
    result = calculate_tax(_scenario(100_000, "I"))
    solidarity = load_profile().solidarity

    assert result.income_tax > solidarity.exemption_threshold
    assert result.solidarity_surcharge > 0
    assert result.solidarity_surcharge == calculate_solidarity_surcharge(
        result.income_tax, solidarity
    )


def test_percentages_relate_to_gross_income() -> None:
    result = calculate_tax(_scenario(80_000, "IV"))

    assert result.effective_tax_rate == pytest.approx(result.total_tax / 800, abs=0.01)
    assert result.deduction_rate == pytest.approx(result.total_deductions / 800, abs=0.01)
    assert result.deduction_rate + result.net_retention_rate == pytest.approx(100, abs=0.02)


@pytest.mark.parametrize("tax_class", [member.value for member in TaxClass])
def test_results_are_consistent_across_income_range(tax_class: str) -> None:
    previous_tax = 0.0
    for gross_income in range(0, 260_000, 997):
        result = calculate_tax(_scenario(gross_income, tax_class, church_tax=True))

        assert result.income_tax >= previous_tax, gross_income
        assert result.total_contributions >= 0
        assert result.total_tax >= 0
        assert result.net_income >= 0
        assert result.total_deductions <= gross_income
        previous_tax = result.income_tax


def test_accepts_request_model_and_lowercase_class() -> None:
    request = CalculationRequest(gross_income=45_000, tax_class="iv")

    result = calculate_tax(request)

    assert result.tax_class is TaxClass.IV
    assert result.additional_contribution_rate == 1.7
    assert result.profile_id == load_profile().id


def test_named_profile_is_used() -> None:
    current = calculate_tax(_scenario(50_000, "I"))
    legacy = calculate_tax(_scenario(50_000, "I", profile_id="2026_legacy"))

    assert legacy.profile_id == "2026_legacy"
    assert legacy.income_tax != current.income_tax


def test_unknown_profile_is_rejected() -> None:
    with pytest.raises(UnknownProfileError):
        calculate_tax(_scenario(50_000, "I", profile_id="1999"))


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"gross_income": -1}, "gross_income"),
        ({"gross_income": math.inf}, "gross_income"),
        ({"gross_income": math.nan}, "gross_income"),
        ({"tax_class": "VII"}, "tax_class"),
        ({"additional_contribution_rate": -0.5}, "additional_contribution_rate"),
        ({"excess_work_expenses": -10}, "excess_work_expenses"),
        ({"children": -1}, "children"),
        ({"age": -1}, "age"),
        ({"church_tax_rate": 0.07}, "church_tax_rate"),
    ],
)
def test_invalid_inputs_raise_validation_error(overrides: dict, field: str) -> None:
    with pytest.raises(CalculationValidationError) as error:
        calculate_tax(_scenario(50_000, "I", **overrides))

    assert error.value.field == field
    assert str(error.value).startswith(f"Invalid calculation request: {field}")


def test_first_invalid_field_is_reported() -> None:
    with pytest.raises(CalculationValidationError) as error:
        calculate_tax(_scenario(-1, "I", age=-1))

    assert error.value.field == "gross_income"


def test_unknown_fields_are_rejected() -> None:
    with pytest.raises(CalculationValidationError):
        calculate_tax(_scenario(50_000, "I", bonus=1_000))


def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(CalculationValidationError):
        calculate_tax([("gross_income", 1)])  # type: ignore[arg-type]


def test_section_timings_are_logged_when_enabled(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("WAGETAX_TIME_CALCULATIONS", "1")

    with caplog.at_level(logging.DEBUG, logger="wagetax.backend.app.services.calculation_service"):
        calculate_tax(_scenario(30_000, "I"))

    assert any("calculate_tax timings" in record.getMessage() for record in caplog.records)


def test_section_timings_are_silent_by_default(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.delenv("WAGETAX_TIME_CALCULATIONS", raising=False)

    with caplog.at_level(logging.DEBUG, logger="wagetax.backend.app.services.calculation_service"):
        calculate_tax(_scenario(30_000, "I"))

    assert not any("calculate_tax timings" in record.getMessage() for record in caplog.records)


def test_each_child_from_the_second_lowers_care_contribution() -> None:
    care = [
        calculate_tax(_scenario(50_000, "I", children=children)).care_contribution
        for children in (1, 2, 3, 4, 5)
    ]

    assert care == [1_150.0, 1_025.0, 900.0, 850.0, 850.0]


def test_very_large_incomes_are_calculated() -> None:
    result = calculate_tax({"gross_income": 1e27, "tax_class": "I"})

    assert result.income_tax > 0
    assert result.solidarity_surcharge == pytest.approx(result.income_tax * 0.055)
    assert result.effective_tax_rate == pytest.approx(47.475, abs=0.01)
    assert 0 <= result.net_income <= result.gross_income
