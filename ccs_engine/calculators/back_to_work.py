"""Back-to-work comparison: is returning to paid work worth it?

Compares the family's position across 1-5 working days per week,
accounting for the extra income tax on the returning parent, the lower
CCS rate that comes with a higher combined income, extra days of care,
and work-related costs.
"""

import logging
from decimal import Decimal

from ccs_engine.calculators.annual_cost import WEEKS_PER_YEAR, calculate_annual_cost
from ccs_engine.calculators.errors import InvalidInput
from ccs_engine.calculators.income_taper import calculate_ccs_percentage
from ccs_engine.calculators.income_tax import calculate_income_tax
from ccs_engine.calculators.rate_cap import calculate_session_ccs
from ccs_engine.calculators.rate_data import RateConfig, TaxRates
from ccs_engine.models import (
    BackToWorkParams,
    BackToWorkResult,
    BackToWorkScenario,
    CurrentSituation,
)
from config.settings import settings

logger = logging.getLogger(__name__)

WORKING_DAYS = (1, 2, 3, 4, 5)
DAYS_PER_FTE_WEEK = 5


def calculate_back_to_work(
    params: BackToWorkParams,
    config: RateConfig,
    tax_rates: TaxRates,
    find_break_even: bool = True,
) -> BackToWorkResult:
    """Compare 1-5 day return-to-work scenarios against the current position.

    For each day count:

        net benefit = (new net income - current net income)
                    - (new childcare cost - current childcare cost)
                    - annual work-related costs

    A negative net benefit, or an effective hourly rate below minimum
    wage, is a valid result.

    Args:
        params: Incomes, care details and work costs.
        config: CCS rate table for the financial year.
        tax_rates: Tax table for the financial year.
        find_break_even: Also search for the break-even FTE salary.

    Returns:
        BackToWorkResult with the baseline, five scenarios, the best
        positive scenario and the break-even FTE salary.

    Raises:
        InvalidInput: Proposed FTE salary is not positive, work hours per
            day is not positive, or a care input is invalid.
    """
    current, scenarios = _compare(params, config, tax_rates)

    positive = [s for s in scenarios if s.net_benefit > 0]
    best = max(positive, key=lambda s: s.net_benefit) if positive else None

    break_even = find_break_even_fte_income(params, config, tax_rates) if find_break_even else None

    return BackToWorkResult(
        current=current,
        scenarios=scenarios,
        best_scenario=best,
        break_even_fte_income=break_even,
    )


def find_break_even_fte_income(
    params: BackToWorkParams,
    config: RateConfig,
    tax_rates: TaxRates,
    upper: Decimal | None = None,
) -> Decimal | None:
    """Find an FTE salary at which some scenario starts to pay off.

    Bisects to the whole dollar between $0 and `upper` (the top of the
    sensitivity income domain by default). Net benefit steps down by a
    CCS point every $5,000 of family income, so it is not strictly
    monotonic in salary; the result is a crossing point where one dollar
    less does not pay off, assumed to be the lowest.

    Returns:
        The salary, or None if no scenario has a positive net benefit even
        at `upper`.
    """
    if upper is None:
        upper = Decimal(settings.sensitivity_income_max)

    def pays_off(fte_income: Decimal) -> bool:
        trial = params.model_copy(update={"proposed_fte_income": fte_income})
        _, scenarios = _compare(trial, config, tax_rates)
        return any(s.net_benefit > 0 for s in scenarios)

    if not pays_off(upper):
        return None

    low, high = Decimal("0"), upper
    while high - low > 1:
        mid = ((low + high) / 2).to_integral_value()
        if pays_off(mid):
            high = mid
        else:
            low = mid
    return high


def _compare(
    params: BackToWorkParams,
    config: RateConfig,
    tax_rates: TaxRates,
) -> tuple[CurrentSituation, list[BackToWorkScenario]]:
    if params.proposed_fte_income <= 0:
        raise InvalidInput("proposed_fte_income must be greater than 0.")
    if params.work_hours_per_day <= 0:
        raise InvalidInput("work_hours_per_day must be greater than 0.")

    # Single parents have no partner income
    partner_income = max(Decimal("0"), params.combined_annual_income - params.current_individual_income)

    current = _current_situation(params, config, tax_rates)
    scenarios: list[BackToWorkScenario] = []

    for days in WORKING_DAYS:
        gross_income = params.proposed_fte_income * days / DAYS_PER_FTE_WEEK
        combined_income = partner_income + gross_income

        tax = calculate_income_tax(gross_income, tax_rates)
        ccs = calculate_ccs_percentage(combined_income, config)

        # Care is needed on every working day, and never fewer days than now
        childcare_days = max(current.childcare_days, days)
        session = calculate_session_ccs(
            params.daily_fee,
            params.hours_per_day,
            ccs.percent,
            params.care_type,
            params.age_group,
            config,
        )
        annual = calculate_annual_cost(session, childcare_days, config.withholding_percent)

        annual_work_costs = params.work_related_costs_per_week * days / DAYS_PER_FTE_WEEK * WEEKS_PER_YEAR
        net_income_gain = tax.net_income - current.net_income
        extra_childcare_cost = annual.per_year.out_of_pocket - current.annual_childcare_cost
        net_benefit = net_income_gain - extra_childcare_cost - annual_work_costs

        annual_hours_worked = days * params.work_hours_per_day * WEEKS_PER_YEAR
        effective_hourly_rate = net_benefit / annual_hours_worked

        logger.debug(
            "%d day(s): CCS %s%%, net benefit %s, %s/hr",
            days,
            ccs.percent,
            net_benefit,
            effective_hourly_rate,
        )

        scenarios.append(
            BackToWorkScenario(
                days_working=days,
                gross_income=gross_income,
                tax=tax,
                net_income=tax.net_income,
                combined_family_income=combined_income,
                ccs_percent=ccs.percent,
                childcare_days=childcare_days,
                session=session,
                annual_childcare=annual,
                annual_work_costs=annual_work_costs,
                net_income_gain=net_income_gain,
                extra_childcare_cost=extra_childcare_cost,
                net_benefit=net_benefit,
                effective_hourly_rate=effective_hourly_rate,
                is_worth_it=net_benefit > 0,
            )
        )

    return current, scenarios


def _current_situation(
    params: BackToWorkParams,
    config: RateConfig,
    tax_rates: TaxRates,
) -> CurrentSituation:
    """Baseline before returning to work, at the current days in care."""
    tax = calculate_income_tax(params.current_individual_income, tax_rates)
    ccs = calculate_ccs_percentage(params.combined_annual_income, config)
    childcare_days = max(1, min(5, params.current_days_in_care))

    session = calculate_session_ccs(
        params.daily_fee,
        params.hours_per_day,
        ccs.percent,
        params.care_type,
        params.age_group,
        config,
    )
    annual = calculate_annual_cost(session, childcare_days, config.withholding_percent)

    return CurrentSituation(
        gross_income=params.current_individual_income,
        tax=tax,
        net_income=tax.net_income,
        combined_family_income=params.combined_annual_income,
        ccs_percent=ccs.percent,
        childcare_days=childcare_days,
        annual_childcare_cost=annual.per_year.out_of_pocket,
    )
