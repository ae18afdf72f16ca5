"""Tests for the back-to-work comparison."""

from decimal import Decimal

import pytest

from ccs_engine.calculators.back_to_work import calculate_back_to_work, find_break_even_fte_income
from ccs_engine.calculators.errors import InvalidInput
from ccs_engine.models import BackToWorkParams


def _params(**overrides) -> BackToWorkParams:  # type: ignore[no-untyped-def]
    """Partner on $100k, returning parent offered $80k FTE, 2 days in care now."""
    values = {
        "combined_annual_income": Decimal("100000"),
        "current_individual_income": Decimal("0"),
        "proposed_fte_income": Decimal("80000"),
        "work_related_costs_per_week": Decimal("50"),
        "current_days_in_care": 2,
        "daily_fee": Decimal("100"),
        "hours_per_day": Decimal("10"),
        "care_type": "centre_based_day_care",
        "age_group": "below_school_age",
    }
    values.update(overrides)
    return BackToWorkParams(**values)


class TestCurrentSituation:
    def test_baseline(self, ccs_rates, tax_rates) -> None:
        """$100,000 family income -> 87%; 2 days x $13 gap x 52 = $1,352."""
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False)
        assert result.current.ccs_percent == 87
        assert result.current.net_income == 0
        assert result.current.childcare_days == 2
        assert result.current.annual_childcare_cost == 1352

    def test_current_days_clamped(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(
            _params(current_days_in_care=0), ccs_rates, tax_rates, find_break_even=False
        )
        assert result.current.childcare_days == 1


class TestScenarios:
    def test_five_scenarios(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False)
        assert [s.days_working for s in result.scenarios] == [1, 2, 3, 4, 5]
        assert [s.gross_income for s in result.scenarios] == [16000, 32000, 48000, 64000, 80000]
        assert [s.combined_family_income for s in result.scenarios] == [
            116000,
            132000,
            148000,
            164000,
            180000,
        ]

    def test_childcare_days_never_below_current(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False)
        assert [s.childcare_days for s in result.scenarios] == [2, 2, 3, 4, 5]
        assert [s.annual_childcare.per_year.gross_fee for s in result.scenarios] == [
            10400,
            10400,
            15600,
            20800,
            26000,
        ]

    def test_work_costs_scale_with_days(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False)
        assert [s.annual_work_costs for s in result.scenarios] == [520, 1040, 1560, 2080, 2600]

    def test_one_day(self, ccs_rates, tax_rates) -> None:
        """$16,000 is tax free; CCS drops to 83% adding $416 of gap fees."""
        one_day = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False).scenarios[0]
        assert one_day.net_income == 16000
        assert one_day.ccs_percent == 83
        assert one_day.extra_childcare_cost == 416
        assert one_day.net_benefit == 15064
        assert one_day.effective_hourly_rate == Decimal("15064") / Decimal("416")
        assert one_day.is_worth_it is True

    def test_three_days(self, ccs_rates, tax_rates) -> None:
        """$48,000: net $42,132, 77% CCS over 3 days of care."""
        three = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False).scenarios[2]
        assert three.net_income == 42132
        assert three.ccs_percent == 77
        assert three.extra_childcare_cost == 2236
        assert three.net_benefit == 38336

    def test_best_scenario(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False)
        assert result.scenarios[3].net_benefit == 46636
        assert result.scenarios[4].net_income == 63612
        assert result.scenarios[4].ccs_percent == 71
        assert result.best_scenario is not None
        assert result.best_scenario.days_working == 5
        assert result.best_scenario.net_benefit == 54824

    def test_net_benefit_identity(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates, find_break_even=False)
        for s in result.scenarios:
            assert s.net_benefit == s.net_income_gain - s.extra_childcare_cost - s.annual_work_costs

    def test_never_worth_it(self, ccs_rates, tax_rates) -> None:
        """Work costs swamp a $1,000 FTE salary: negative results are still results."""
        result = calculate_back_to_work(
            _params(proposed_fte_income=Decimal("1000"), work_related_costs_per_week=Decimal("500")),
            ccs_rates,
            tax_rates,
            find_break_even=False,
        )
        assert all(s.net_benefit < 0 for s in result.scenarios)
        assert not any(s.is_worth_it for s in result.scenarios)
        assert result.best_scenario is None

    def test_single_parent_has_no_partner_income(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(
            _params(combined_annual_income=Decimal("20000"), current_individual_income=Decimal("30000")),
            ccs_rates,
            tax_rates,
            find_break_even=False,
        )
        assert result.scenarios[0].combined_family_income == 16000

    def test_zero_fte_income(self, ccs_rates, tax_rates) -> None:
        with pytest.raises(InvalidInput):
            calculate_back_to_work(_params(proposed_fte_income=Decimal("0")), ccs_rates, tax_rates)

    def test_zero_work_hours(self, ccs_rates, tax_rates) -> None:
        with pytest.raises(InvalidInput):
            calculate_back_to_work(_params(work_hours_per_day=Decimal("0")), ccs_rates, tax_rates)


class TestBreakEven:
    def test_break_even_salary(self, ccs_rates, tax_rates) -> None:
        """Two days first pays off once 0.4 x FTE covers $1,040 of costs and a 1-point CCS drop."""
        assert find_break_even_fte_income(_params(), ccs_rates, tax_rates) == 2861

    def test_result_is_a_crossing(self, ccs_rates, tax_rates) -> None:
        """Some scenario pays off at the salary and none does a dollar below it."""
        params = _params()
        salary = find_break_even_fte_income(params, ccs_rates, tax_rates)
        at = calculate_back_to_work(
            params.model_copy(update={"proposed_fte_income": salary}), ccs_rates, tax_rates, find_break_even=False
        )
        below = calculate_back_to_work(
            params.model_copy(update={"proposed_fte_income": salary - 1}), ccs_rates, tax_rates, find_break_even=False
        )
        assert at.best_scenario is not None
        assert below.best_scenario is None

    def test_included_in_result(self, ccs_rates, tax_rates) -> None:
        result = calculate_back_to_work(_params(), ccs_rates, tax_rates)
        assert result.break_even_fte_income == 2861

    def test_unreachable(self, ccs_rates, tax_rates) -> None:
        params = _params(work_related_costs_per_week=Decimal("5000"))
        assert find_break_even_fte_income(params, ccs_rates, tax_rates, upper=Decimal("50000")) is None
