"""Calculation pipeline: one request in, every result out.

Flow:
    1. resolve_inputs                 -> concrete values
    2. calculate_ccs_percentage       -> standard rate (eldest / only child)
    3. calculate_higher_ccs_percentage -> younger children (if eligible)
    4. calculate_session_ccs          -> per-session subsidy
    5. calculate_annual_cost          -> weekly / fortnightly / yearly
    6. calculate_back_to_work         -> optional 1-5 day scenarios
    7. calculate_income_sensitivity   -> income vs. cost table
"""

import logging
from decimal import Decimal

from ccs_engine.calculators.annual_cost import apply_annual_subsidy_cap, calculate_annual_cost
from ccs_engine.calculators.back_to_work import calculate_back_to_work
from ccs_engine.calculators.income_taper import (
    calculate_ccs_percentage,
    calculate_higher_ccs_percentage,
)
from ccs_engine.calculators.rate_cap import calculate_session_ccs
from ccs_engine.calculators.rate_data import RateConfig, TaxRates
from ccs_engine.calculators.sensitivity import (
    calculate_income_sensitivity,
    condensed_row_indices,
)
from ccs_engine.models import (
    Amount,
    AnnualCapResult,
    AnnualCostResult,
    BackToWorkParams,
    BackToWorkResult,
    CCSPercentageResult,
    HigherCCSResult,
    IncomeSensitivityResult,
    SensitivityParams,
    SessionResult,
    ValueModel,
)
from ccs_engine.resolve import CalculationRequest, ResolvedInputs, resolve_inputs
from config.settings import settings

logger = logging.getLogger(__name__)


class FamilyTotals(ValueModel):
    """Costs summed over every child in care."""

    annual_out_of_pocket: Amount
    annual_subsidy: Amount
    weekly_out_of_pocket: Amount


class CalculationOutput(ValueModel):
    """All intermediate and final results for a request."""

    resolved: ResolvedInputs
    ccs_percentage: CCSPercentageResult
    higher_ccs: HigherCCSResult | None = None

    # Younger child at the higher rate when eligible, otherwise the only/eldest child
    session: SessionResult
    annual: AnnualCostResult
    annual_cap: AnnualCapResult

    # Eldest child at the standard rate; only set alongside higher_ccs
    eldest_child_session: SessionResult | None = None
    eldest_child_annual: AnnualCostResult | None = None
    eldest_child_annual_cap: AnnualCapResult | None = None

    family_totals: FamilyTotals
    back_to_work: BackToWorkResult | None = None
    sensitivity: IncomeSensitivityResult
    condensed_sensitivity_rows: list[int]

    rates_version: str


def run_calculations(
    request: CalculationRequest,
    config: RateConfig,
    tax_rates: TaxRates,
) -> CalculationOutput:
    """Run every calculation for a request.

    Args:
        request: The family's answers.
        config: CCS rate table for the financial year.
        tax_rates: Tax table for the same financial year.

    Returns:
        CalculationOutput with every intermediate result for display.
    """
    resolved = resolve_inputs(request, config)
    income = resolved.combined_annual_income

    ccs_percentage = calculate_ccs_percentage(income, config)
    higher_ccs = (
        calculate_higher_ccs_percentage(ccs_percentage.percent, config)
        if resolved.eligible_for_higher_rate
        else None
    )

    def annualise(percent: Decimal) -> tuple[SessionResult, AnnualCostResult, AnnualCapResult]:
        session = calculate_session_ccs(
            resolved.daily_fee,
            resolved.hours_per_day,
            percent,
            resolved.care_type,
            resolved.age_group,
            config,
        )
        annual = calculate_annual_cost(session, resolved.days_per_week, config.withholding_percent)
        return session, annual, apply_annual_subsidy_cap(annual, income, config)

    eldest_session = eldest_annual = eldest_cap = None
    if higher_ccs is not None:
        session, annual, annual_cap = annualise(higher_ccs.higher_percent)
        eldest_session, eldest_annual, eldest_cap = annualise(ccs_percentage.percent)
        younger_children = resolved.number_of_children - 1
        family_totals = FamilyTotals(
            annual_out_of_pocket=eldest_annual.per_year.out_of_pocket
            + annual.per_year.out_of_pocket * younger_children,
            annual_subsidy=eldest_annual.per_year.subsidy + annual.per_year.subsidy * younger_children,
            weekly_out_of_pocket=eldest_annual.per_week.out_of_pocket
            + annual.per_week.out_of_pocket * younger_children,
        )
    else:
        session, annual, annual_cap = annualise(ccs_percentage.percent)
        children = resolved.number_of_children
        family_totals = FamilyTotals(
            annual_out_of_pocket=annual.per_year.out_of_pocket * children,
            annual_subsidy=annual.per_year.subsidy * children,
            weekly_out_of_pocket=annual.per_week.out_of_pocket * children,
        )

    back_to_work = None
    if resolved.include_back_to_work:
        back_to_work = calculate_back_to_work(
            BackToWorkParams(
                combined_annual_income=income,
                current_individual_income=resolved.current_individual_income,
                proposed_fte_income=resolved.proposed_fte_income,
                work_related_costs_per_week=resolved.work_related_costs_per_week,
                current_days_in_care=resolved.days_per_week,
                daily_fee=resolved.daily_fee,
                hours_per_day=resolved.hours_per_day,
                care_type=resolved.care_type,
                age_group=resolved.age_group,
            ),
            config,
            tax_rates,
        )

    sensitivity = calculate_income_sensitivity(
        SensitivityParams(
            user_income=income,
            daily_fee=resolved.daily_fee,
            hours_per_day=resolved.hours_per_day,
            days_per_week=resolved.days_per_week,
            care_type=resolved.care_type,
            age_group=resolved.age_group,
        ),
        config,
    )

    logger.debug("Calculated %s request at %s%% CCS", config.fiscal_year, ccs_percentage.percent)

    return CalculationOutput(
        resolved=resolved,
        ccs_percentage=ccs_percentage,
        higher_ccs=higher_ccs,
        session=session,
        annual=annual,
        annual_cap=annual_cap,
        eldest_child_session=eldest_session,
        eldest_child_annual=eldest_annual,
        eldest_child_annual_cap=eldest_cap,
        family_totals=family_totals,
        back_to_work=back_to_work,
        sensitivity=sensitivity,
        condensed_sensitivity_rows=condensed_row_indices(
            sensitivity, config, settings.condensed_context_rows
        ),
        rates_version=config.fiscal_year,
    )
