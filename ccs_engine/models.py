"""Pydantic models for calculation inputs and results.

Every model here is a value: created fresh for one calculation, frozen,
and serialisable to plain JSON numbers.
"""

from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field, PlainSerializer

from config.settings import settings


def _exact_decimal(value: Any) -> Any:
    """Route floats through str so 14.63 stays 14.63 and not its binary expansion."""
    if isinstance(value, float):
        return str(value)
    return value


Amount = Annotated[
    Decimal,
    BeforeValidator(_exact_decimal),
    PlainSerializer(float, return_type=float, when_used="json"),
]

CareType = Literal[
    "centre_based_day_care",
    "family_day_care",
    "outside_school_hours",
    "in_home_care",
]
AgeGroup = Literal["below_school_age", "school_age"]
State = Literal["ACT", "NSW", "NT", "QLD", "SA", "TAS", "VIC", "WA"]
ChildAge = Literal["under_6", "6_to_13"]


class ValueModel(BaseModel):
    """Base for immutable calculation values."""

    model_config = {"frozen": True}


# --- Income taper ---


class CCSPercentageResult(ValueModel):
    """Standard CCS percentage and how the income taper produced it."""

    percent: Amount
    income_above_threshold: Amount
    brackets_above: int
    percent_reduction: Amount


class HigherCCSResult(ValueModel):
    """Higher CCS rate for younger children in multi-child families."""

    higher_percent: Amount
    standard_percent: Amount
    additional_points: Amount
    was_capped: bool


# --- Sessions and annual cost ---


class SessionResult(ValueModel):
    """Subsidy for a single childcare session (one day)."""

    daily_fee: Amount
    hours_per_day: Amount
    hourly_fee: Amount
    hourly_rate_cap: Amount
    effective_hourly_rate: Amount
    fee_above_cap_per_hour: Amount
    subsidy_per_hour: Amount
    subsidy_per_session: Amount
    out_of_pocket_per_session: Amount
    ccs_percent: Amount


class PeriodCost(ValueModel):
    """Fee, subsidy and gap over one period (week, fortnight or year)."""

    gross_fee: Amount
    subsidy: Amount
    out_of_pocket: Amount  # gap fee, after reconciliation
    withholding: Amount
    net_out_of_pocket: Amount  # gap fee + withholding, paid during the year

    def scaled(self, factor: int | Decimal) -> "PeriodCost":
        """Return this period's figures multiplied by factor."""
        return PeriodCost(
            gross_fee=self.gross_fee * factor,
            subsidy=self.subsidy * factor,
            out_of_pocket=self.out_of_pocket * factor,
            withholding=self.withholding * factor,
            net_out_of_pocket=self.net_out_of_pocket * factor,
        )


class AnnualCostResult(ValueModel):
    """A session annualised over an attendance pattern."""

    days_per_week: int
    withholding_percent: Amount
    per_week: PeriodCost
    per_fortnight: PeriodCost
    per_year: PeriodCost


class AnnualCapResult(ValueModel):
    """Effect of the annual per-child subsidy cap on a year of care."""

    applies: bool
    cap_amount: Amount | None = None
    annual_subsidy: Amount
    capped_annual_subsidy: Amount
    subsidy_lost: Amount
    out_of_pocket_per_year: Amount
    weeks_until_cap: Amount | None = None


# --- Income tax ---


class BracketTax(ValueModel):
    """Tax charged within a single bracket."""

    lower: Amount
    upper: Amount | None  # None = top bracket
    rate: Amount
    taxable_amount: Amount
    tax: Amount


class BaseIncomeTax(ValueModel):
    """Progressive tax before offsets and levies."""

    tax: Amount
    marginal_rate: Amount
    breakdown: list[BracketTax] = []


class IncomeTaxResult(ValueModel):
    """Individual income tax including Medicare levy and LITO."""

    gross_income: Amount
    income_tax: Amount
    medicare_levy: Amount
    lito_offset: Amount
    tax_after_lito: Amount
    total_tax: Amount
    net_income: Amount
    effective_rate: Amount
    marginal_rate: Amount
    breakdown: list[BracketTax] = []


# --- Income sensitivity ---


class SensitivityParams(ValueModel):
    """A fixed care scenario to run across the income domain."""

    user_income: Amount
    daily_fee: Amount
    hours_per_day: Amount
    days_per_week: int
    care_type: CareType
    age_group: AgeGroup
    income_min: Amount = Field(default_factory=lambda: Decimal(settings.sensitivity_income_min))
    income_max: Amount = Field(default_factory=lambda: Decimal(settings.sensitivity_income_max))
    increment: Amount = Field(default_factory=lambda: Decimal(settings.sensitivity_increment))


class IncomeSensitivityRow(ValueModel):
    income: Amount
    subsidy_percent: Amount
    weekly_out_of_pocket: Amount
    annual_out_of_pocket: Amount
    annual_subsidy: Amount


class MarginalRange(ValueModel):
    """A $5,000 income band and the extra annual childcare cost it brings."""

    income_from: Amount
    income_to: Amount
    cost_increase: Amount


class IncomeSensitivityResult(ValueModel):
    rows: list[IncomeSensitivityRow]
    user_row_index: int
    zero_ccs_income: Amount | None = None
    highest_marginal_range: MarginalRange | None = None
    lowest_marginal_range: MarginalRange | None = None


# --- Back to work ---


class BackToWorkParams(ValueModel):
    """Inputs for comparing 1-5 day return-to-work scenarios."""

    combined_annual_income: Amount
    current_individual_income: Amount = Decimal("0")
    proposed_fte_income: Amount
    work_related_costs_per_week: Amount = Decimal("0")
    current_days_in_care: int
    daily_fee: Amount
    hours_per_day: Amount
    care_type: CareType
    age_group: AgeGroup
    work_hours_per_day: Amount = Field(default_factory=lambda: Decimal(settings.work_hours_per_day))


class CurrentSituation(ValueModel):
    """The family's position before returning to work."""

    gross_income: Amount
    tax: IncomeTaxResult
    net_income: Amount
    combined_family_income: Amount
    ccs_percent: Amount
    childcare_days: int
    annual_childcare_cost: Amount


class BackToWorkScenario(ValueModel):
    days_working: int
    gross_income: Amount
    tax: IncomeTaxResult
    net_income: Amount
    combined_family_income: Amount
    ccs_percent: Amount
    childcare_days: int
    session: SessionResult
    annual_childcare: AnnualCostResult
    annual_work_costs: Amount
    net_income_gain: Amount
    extra_childcare_cost: Amount
    net_benefit: Amount
    effective_hourly_rate: Amount
    is_worth_it: bool


class BackToWorkResult(ValueModel):
    current: CurrentSituation
    scenarios: list[BackToWorkScenario] = Field(min_length=5, max_length=5)
    best_scenario: BackToWorkScenario | None = None
    break_even_fte_income: Amount | None = None
