"""Tests for request resolution and the full calculation pipeline."""

from decimal import Decimal

import pytest

from ccs_engine.calculators.errors import InvalidInput, UnknownLookup
from ccs_engine.pipeline import run_calculations
from ccs_engine.resolve import (
    CalculationRequest,
    resolve_age_group,
    resolve_daily_fee,
    resolve_hours_per_day,
    resolve_income,
    resolve_inputs,
)


def _request(**overrides) -> CalculationRequest:  # type: ignore[no-untyped-def]
    """One child under 6, $120k family income, $120/day for 3 x 10hr days."""
    values = {
        "combined_annual_income": Decimal("120000"),
        "fee_per_day": Decimal("120"),
        "hours_per_day": Decimal("10"),
        "days_per_week": 3,
    }
    values.update(overrides)
    return CalculationRequest(**values)


# --- Resolution ---


class TestResolveIncome:
    def test_exact_income_wins(self) -> None:
        assert resolve_income("over_350000", Decimal("95000")) == 95000

    def test_negative_income_kept(self) -> None:
        """A stated loss is not replaced by the range midpoint."""
        assert resolve_income("120001_160000", Decimal("-5000")) == -5000
        assert resolve_income(None, Decimal("-5000")) == -5000

    def test_range_midpoint(self) -> None:
        assert resolve_income("120001_160000", None) == 140000

    def test_missing_income(self) -> None:
        with pytest.raises(InvalidInput):
            resolve_income(None, None)


class TestResolveCareDetails:
    def test_age_group(self) -> None:
        assert resolve_age_group("under_6") == "below_school_age"
        assert resolve_age_group("6_to_13") == "school_age"

    def test_default_hours(self) -> None:
        assert resolve_hours_per_day(None, "outside_school_hours") == 4
        assert resolve_hours_per_day(Decimal("0"), "family_day_care") == 9
        assert resolve_hours_per_day(Decimal("11"), "centre_based_day_care") == 11

    def test_own_fee(self, ccs_rates) -> None:
        assert resolve_daily_fee(_request(), ccs_rates) == 120

    def test_state_average_when_asked(self, ccs_rates) -> None:
        request = _request(use_state_average=True, state="VIC")
        assert resolve_daily_fee(request, ccs_rates) == 148

    def test_state_average_when_fee_missing(self, ccs_rates) -> None:
        resolved = resolve_inputs(_request(fee_per_day=None, state="QLD"), ccs_rates)
        assert resolved.daily_fee == 142
        assert resolved.using_state_average is True

    def test_in_home_care_needs_a_fee(self, ccs_rates) -> None:
        with pytest.raises(UnknownLookup):
            resolve_inputs(_request(care_type="in_home_care", use_state_average=True), ccs_rates)

    def test_resolved_inputs(self, ccs_rates) -> None:
        resolved = resolve_inputs(
            _request(number_of_children=2, current_annual_income=Decimal("20000")), ccs_rates
        )
        assert resolved.eligible_for_higher_rate is True
        assert resolved.age_group == "below_school_age"
        assert resolved.using_state_average is False
        assert resolved.partner_income == 100000

    def test_at_least_one_child(self) -> None:
        with pytest.raises(ValueError):
            CalculationRequest(number_of_children=0, combined_annual_income=Decimal("1"))


# --- Pipeline ---


class TestRunCalculations:
    def test_single_child(self, ccs_rates, tax_rates) -> None:
        """$120,000 -> 83%; $12/hr under the cap so subsidy is $99.60 a day."""
        output = run_calculations(_request(), ccs_rates, tax_rates)

        assert output.ccs_percentage.percent == 83
        assert output.higher_ccs is None
        assert output.session.subsidy_per_session == Decimal("99.60")
        assert output.session.out_of_pocket_per_session == Decimal("20.40")
        assert output.annual.per_year.out_of_pocket == Decimal("3182.40")
        assert output.family_totals.annual_out_of_pocket == Decimal("3182.40")
        assert output.eldest_child_session is None
        assert output.back_to_work is None
        assert output.rates_version == "2025-26"

    def test_annual_cap_reported(self, ccs_rates, tax_rates) -> None:
        """$99.60 x 156 sessions = $15,537.60, above the $11,003 cap."""
        output = run_calculations(_request(), ccs_rates, tax_rates)
        assert output.annual_cap.applies is True
        assert output.annual_cap.capped_annual_subsidy == 11003
        assert output.annual_cap.subsidy_lost == Decimal("4534.60")

    def test_two_children_higher_rate(self, ccs_rates, tax_rates) -> None:
        """Younger child at 95% (capped); eldest stays on 83%."""
        output = run_calculations(_request(number_of_children=2), ccs_rates, tax_rates)

        assert output.higher_ccs is not None
        assert output.higher_ccs.higher_percent == 95
        assert output.higher_ccs.was_capped is True
        assert output.session.subsidy_per_session == 114
        assert output.eldest_child_session is not None
        assert output.eldest_child_session.subsidy_per_session == Decimal("99.60")
        assert output.family_totals.weekly_out_of_pocket == Decimal("79.20")
        assert output.family_totals.annual_out_of_pocket == Decimal("4118.40")

    def test_three_children(self, ccs_rates, tax_rates) -> None:
        output = run_calculations(_request(number_of_children=3), ccs_rates, tax_rates)
        assert output.family_totals.annual_out_of_pocket == Decimal("5054.40")

    def test_school_age_youngest_not_eligible(self, ccs_rates, tax_rates) -> None:
        output = run_calculations(
            _request(number_of_children=2, youngest_child_age="6_to_13"), ccs_rates, tax_rates
        )
        assert output.higher_ccs is None
        assert output.session.hourly_rate_cap == Decimal("12.81")
        assert output.family_totals.annual_out_of_pocket == Decimal("6364.80")

    def test_back_to_work_included(self, ccs_rates, tax_rates) -> None:
        output = run_calculations(
            _request(include_back_to_work=True, proposed_annual_income=Decimal("80000")),
            ccs_rates,
            tax_rates,
        )
        assert output.back_to_work is not None
        assert len(output.back_to_work.scenarios) == 5
        assert output.back_to_work.current.childcare_days == 3

    def test_sensitivity_follows_request(self, ccs_rates, tax_rates) -> None:
        output = run_calculations(_request(), ccs_rates, tax_rates)
        user_row = output.sensitivity.rows[output.sensitivity.user_row_index]
        assert user_row.income == 120000
        assert user_row.subsidy_percent == output.ccs_percentage.percent
        assert output.sensitivity.user_row_index in output.condensed_sensitivity_rows

    def test_output_serialises_to_numbers(self, ccs_rates, tax_rates) -> None:
        data = run_calculations(_request(), ccs_rates, tax_rates).model_dump(mode="json")
        assert data["session"]["subsidy_per_session"] == 99.6
        assert data["resolved"]["daily_fee"] == 120.0

    def test_back_to_work_without_salary(self, ccs_rates, tax_rates) -> None:
        with pytest.raises(InvalidInput):
            run_calculations(_request(include_back_to_work=True), ccs_rates, tax_rates)
