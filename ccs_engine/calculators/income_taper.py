"""CCS income taper: family income to subsidy percentage."""

from decimal import ROUND_CEILING, Decimal

from ccs_engine.calculators.rate_data import RateConfig
from ccs_engine.models import CCSPercentageResult, ChildAge, HigherCCSResult

_ZERO = Decimal("0")


def calculate_ccs_percentage(income: Decimal, config: RateConfig) -> CCSPercentageResult:
    """Calculate the standard CCS percentage for a combined family income.

    One step of the taper is lost for every $5,000 *or part thereof* above
    the base threshold, so the first dollar into a band costs the whole step:

        $85,279 -> 90%   (at threshold)
        $85,280 -> 89%   (ceil(1 / 5000) = 1 bracket)
        $90,280 -> 88%   (ceil(5001 / 5000) = 2 brackets)
        $600,000 -> 0%   (clamped)

    Args:
        income: Combined annual family income. Zero or negative income is
            not an error; it gets the maximum rate.
        config: CCS rate table for the financial year.

    Returns:
        CCSPercentageResult with percent and the taper breakdown.
    """
    income = max(income, _ZERO)

    if income <= config.base_income_threshold:
        return CCSPercentageResult(
            percent=config.max_subsidy_percent,
            income_above_threshold=_ZERO,
            brackets_above=0,
            percent_reduction=_ZERO,
        )

    income_above_threshold = income - config.base_income_threshold
    brackets_above = int(
        (income_above_threshold / config.taper_step_amount).to_integral_value(rounding=ROUND_CEILING)
    )
    percent_reduction = brackets_above * config.taper_step_percent
    percent = min(
        config.max_subsidy_percent,
        max(config.min_subsidy_percent, config.max_subsidy_percent - percent_reduction),
    )

    return CCSPercentageResult(
        percent=percent,
        income_above_threshold=income_above_threshold,
        brackets_above=brackets_above,
        percent_reduction=percent_reduction,
    )


def calculate_higher_ccs_percentage(standard_percent: Decimal, config: RateConfig) -> HigherCCSResult:
    """Calculate the higher CCS rate for a younger child.

    The eldest child in care keeps the standard rate; each younger child
    gets standard + 30 points, capped at 95%. Landing exactly on the cap
    (65% -> 95%) does not count as capped.
    """
    uncapped = standard_percent + config.higher_rate_boost
    return HigherCCSResult(
        higher_percent=min(uncapped, config.higher_rate_cap),
        standard_percent=standard_percent,
        additional_points=config.higher_rate_boost,
        was_capped=uncapped > config.higher_rate_cap,
    )


def is_eligible_for_higher_rate(number_of_children: int, youngest_child_age: ChildAge) -> bool:
    """Two or more children in care and the youngest aged 5 or under."""
    return number_of_children >= 2 and youngest_child_age == "under_6"
