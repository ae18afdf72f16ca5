"""Annualised childcare cost: weekly, fortnightly and yearly figures."""

from decimal import Decimal

from ccs_engine.calculators.errors import InvalidInput
from ccs_engine.calculators.rate_data import RateConfig
from ccs_engine.models import AnnualCapResult, AnnualCostResult, PeriodCost, SessionResult

WEEKS_PER_FORTNIGHT = 2
WEEKS_PER_YEAR = 52


def calculate_annual_cost(
    session: SessionResult,
    days_per_week: int,
    withholding_percent: Decimal = Decimal("5"),
) -> AnnualCostResult:
    """Scale one session to weekly, fortnightly and yearly figures.

    Services Australia withholds a share of each CCS payment as a buffer
    against reconciliation debts, so during the year the family pays the
    gap fee plus the withheld amount:

        net_out_of_pocket = out_of_pocket + subsidy x withholding%

    The split is presentational and always reconciles back to the gap fee.

    Args:
        session: Per-session result from calculate_session_ccs().
        days_per_week: Sessions per week (1-5).
        withholding_percent: Percentage of CCS withheld (5% by default).

    Returns:
        AnnualCostResult with per_week, per_fortnight and per_year figures.

    Raises:
        InvalidInput: days_per_week outside 1-5.
    """
    if not 1 <= days_per_week <= 5:
        raise InvalidInput("days_per_week must be between 1 and 5.")

    gross_fee = session.daily_fee * days_per_week
    subsidy = session.subsidy_per_session * days_per_week
    out_of_pocket = session.out_of_pocket_per_session * days_per_week
    withholding = subsidy * withholding_percent / 100

    per_week = PeriodCost(
        gross_fee=gross_fee,
        subsidy=subsidy,
        out_of_pocket=out_of_pocket,
        withholding=withholding,
        net_out_of_pocket=out_of_pocket + withholding,
    )

    return AnnualCostResult(
        days_per_week=days_per_week,
        withholding_percent=withholding_percent,
        per_week=per_week,
        per_fortnight=per_week.scaled(WEEKS_PER_FORTNIGHT),
        per_year=per_week.scaled(WEEKS_PER_YEAR),
    )


def apply_annual_subsidy_cap(
    annual: AnnualCostResult,
    family_income: Decimal,
    config: RateConfig,
) -> AnnualCapResult:
    """Check a year of care for one child against the annual subsidy cap.

    Families above the cap income threshold receive at most the cap in CCS
    per child per financial year; once it is reached they pay the full fee
    for the rest of the year. Families at or below the threshold are
    uncapped. This check is kept apart from calculate_annual_cost() so
    the core annual figures stay uncapped.

    Args:
        annual: Annualised figures for a single child.
        family_income: Combined annual family income.
        config: CCS rate table for the financial year.

    Returns:
        AnnualCapResult; weeks_until_cap is set only when the cap binds.
    """
    year = annual.per_year

    if family_income <= config.annual_cap_income_threshold:
        return AnnualCapResult(
            applies=False,
            annual_subsidy=year.subsidy,
            capped_annual_subsidy=year.subsidy,
            subsidy_lost=Decimal("0"),
            out_of_pocket_per_year=year.out_of_pocket,
        )

    cap = config.annual_cap_per_child
    capped = min(year.subsidy, cap)
    weeks_until_cap = None
    if year.subsidy > cap:
        weeks_until_cap = cap / annual.per_week.subsidy

    return AnnualCapResult(
        applies=True,
        cap_amount=cap,
        annual_subsidy=year.subsidy,
        capped_annual_subsidy=capped,
        subsidy_lost=year.subsidy - capped,
        out_of_pocket_per_year=year.gross_fee - capped,
        weeks_until_cap=weeks_until_cap,
    )
