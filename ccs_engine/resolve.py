"""Resolve a calculation request into concrete, calculation-ready values.

Income ranges, "use the state average" flags and missing hours are turned
into plain numbers here so the calculators stay pure.
"""

from decimal import Decimal
from typing import Literal

from pydantic import Field

from ccs_engine.calculators.errors import InvalidInput
from ccs_engine.calculators.income_taper import is_eligible_for_higher_rate
from ccs_engine.calculators.rate_cap import get_state_average_daily_fee
from ccs_engine.calculators.rate_data import RateConfig
from ccs_engine.models import AgeGroup, Amount, CareType, ChildAge, State, ValueModel

IncomeRange = Literal[
    "under_85279",
    "85280_120000",
    "120001_160000",
    "160001_220000",
    "220001_350000",
    "over_350000",
]

# Representative income for each range a family can pick instead of an exact figure
INCOME_RANGE_MIDPOINTS: dict[str, Decimal] = {
    "under_85279": Decimal("60000"),
    "85280_120000": Decimal("102640"),
    "120001_160000": Decimal("140000"),
    "160001_220000": Decimal("190000"),
    "220001_350000": Decimal("285000"),
    "over_350000": Decimal("400000"),
}

DEFAULT_HOURS_PER_DAY: dict[str, Decimal] = {
    "centre_based_day_care": Decimal("10"),
    "family_day_care": Decimal("9"),
    "outside_school_hours": Decimal("4"),  # before + after school combined
    "in_home_care": Decimal("10"),
}


class CalculationRequest(ValueModel):
    """Everything the family told us, as one immutable record."""

    number_of_children: int = Field(default=1, ge=1)
    youngest_child_age: ChildAge = "under_6"

    combined_annual_income: Amount | None = None
    income_range: IncomeRange | None = None

    care_type: CareType = "centre_based_day_care"
    state: State = "NSW"
    days_per_week: int = 3
    hours_per_day: Amount | None = None
    fee_per_day: Amount | None = None
    use_state_average: bool = False

    include_back_to_work: bool = False
    current_annual_income: Amount = Decimal("0")
    proposed_annual_income: Amount = Decimal("0")
    work_related_costs_per_week: Amount = Decimal("0")


class ResolvedInputs(ValueModel):
    """Concrete values only: no ranges, no nulls, no lookup flags."""

    number_of_children: int
    youngest_child_age: ChildAge
    age_group: AgeGroup
    eligible_for_higher_rate: bool

    combined_annual_income: Amount

    care_type: CareType
    state: State
    days_per_week: int
    hours_per_day: Amount
    daily_fee: Amount
    using_state_average: bool

    include_back_to_work: bool
    current_individual_income: Amount
    proposed_fte_income: Amount
    work_related_costs_per_week: Amount
    partner_income: Amount


def resolve_income(income_range: IncomeRange | None, exact_income: Decimal | None) -> Decimal:
    """Use the exact income when given, otherwise the range midpoint.

    A negative exact income is kept as stated; the taper treats it as zero.
    """
    if exact_income is not None:
        return exact_income
    if income_range is None:
        raise InvalidInput("Either combined_annual_income or income_range is required.")
    return INCOME_RANGE_MIDPOINTS[income_range]


def resolve_age_group(youngest_child_age: ChildAge) -> AgeGroup:
    """Children under 6 attract the below-school-age rate cap."""
    return "below_school_age" if youngest_child_age == "under_6" else "school_age"


def resolve_daily_fee(request: CalculationRequest, config: RateConfig) -> Decimal:
    """Use the family's fee when known, otherwise the state average.

    Raises:
        UnknownLookup: No state average for the care type (in-home care).
    """
    if not _uses_state_average(request):
        return request.fee_per_day
    return get_state_average_daily_fee(request.state, request.care_type, config)


def _uses_state_average(request: CalculationRequest) -> bool:
    return request.use_state_average or request.fee_per_day is None or request.fee_per_day <= 0


def resolve_hours_per_day(hours_per_day: Decimal | None, care_type: CareType) -> Decimal:
    if hours_per_day is not None and hours_per_day > 0:
        return hours_per_day
    return DEFAULT_HOURS_PER_DAY[care_type]


def resolve_inputs(request: CalculationRequest, config: RateConfig) -> ResolvedInputs:
    """Resolve a request into concrete values for the calculators."""
    combined_income = resolve_income(request.income_range, request.combined_annual_income)
    daily_fee = resolve_daily_fee(request, config)

    return ResolvedInputs(
        number_of_children=request.number_of_children,
        youngest_child_age=request.youngest_child_age,
        age_group=resolve_age_group(request.youngest_child_age),
        eligible_for_higher_rate=is_eligible_for_higher_rate(
            request.number_of_children, request.youngest_child_age
        ),
        combined_annual_income=combined_income,
        care_type=request.care_type,
        state=request.state,
        days_per_week=request.days_per_week,
        hours_per_day=resolve_hours_per_day(request.hours_per_day, request.care_type),
        daily_fee=daily_fee,
        using_state_average=_uses_state_average(request),
        include_back_to_work=request.include_back_to_work,
        current_individual_income=request.current_annual_income,
        proposed_fte_income=request.proposed_annual_income,
        work_related_costs_per_week=request.work_related_costs_per_week,
        partner_income=max(Decimal("0"), combined_income - request.current_annual_income),
    )
