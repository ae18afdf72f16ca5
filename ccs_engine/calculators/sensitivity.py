"""Income sensitivity: how subsidy and out-of-pocket cost move with income.

Runs the taper -> session -> annual pipeline at every increment across the
income domain for one fixed care scenario. The change in annual
out-of-pocket cost between neighbouring rows is the effective marginal
cost of childcare for that band of extra income.
"""

import logging
from decimal import Decimal

from ccs_engine.calculators.annual_cost import calculate_annual_cost
from ccs_engine.calculators.errors import InvalidInput
from ccs_engine.calculators.income_taper import calculate_ccs_percentage
from ccs_engine.calculators.rate_cap import calculate_session_ccs
from ccs_engine.calculators.rate_data import RateConfig
from ccs_engine.models import (
    IncomeSensitivityResult,
    IncomeSensitivityRow,
    MarginalRange,
    SensitivityParams,
)
from config.settings import settings

logger = logging.getLogger(__name__)


def calculate_income_sensitivity(params: SensitivityParams, config: RateConfig) -> IncomeSensitivityResult:
    """Build the income vs. cost table and its summary.

    Args:
        params: Fixed care scenario, user income and income domain.
        config: CCS rate table for the financial year.

    Returns:
        IncomeSensitivityResult with one row per increment, the row nearest
        the user's income, the first income with no subsidy, and the bands
        with the largest and smallest cost increase.

    Raises:
        InvalidInput: Non-positive increment, an empty income domain, or
            more rows than settings.max_sensitivity_rows.
    """
    if params.increment <= 0:
        raise InvalidInput("increment must be greater than 0.")
    if params.income_max < params.income_min:
        raise InvalidInput("income_max must not be below income_min.")

    row_count = int((params.income_max - params.income_min) // params.increment) + 1
    if row_count > settings.max_sensitivity_rows:
        raise InvalidInput(
            f"Income domain needs {row_count} rows; at most {settings.max_sensitivity_rows} allowed."
        )

    rows: list[IncomeSensitivityRow] = []
    zero_ccs_income: Decimal | None = None
    user_row_index = 0
    min_user_distance: Decimal | None = None

    income = params.income_min
    while income <= params.income_max:
        ccs = calculate_ccs_percentage(income, config)
        session = calculate_session_ccs(
            params.daily_fee,
            params.hours_per_day,
            ccs.percent,
            params.care_type,
            params.age_group,
            config,
        )
        annual = calculate_annual_cost(session, params.days_per_week, config.withholding_percent)

        rows.append(
            IncomeSensitivityRow(
                income=income,
                subsidy_percent=ccs.percent,
                weekly_out_of_pocket=annual.per_week.out_of_pocket,
                annual_out_of_pocket=annual.per_year.out_of_pocket,
                annual_subsidy=annual.per_year.subsidy,
            )
        )

        if ccs.percent == 0 and zero_ccs_income is None:
            zero_ccs_income = income

        # Nearest row to the user's income; ties keep the lower row
        distance = abs(income - params.user_income)
        if min_user_distance is None or distance < min_user_distance:
            min_user_distance = distance
            user_row_index = len(rows) - 1

        income += params.increment

    highest, lowest = _marginal_ranges(rows)
    logger.debug("Sensitivity table: %d rows, zero CCS at %s", len(rows), zero_ccs_income)

    return IncomeSensitivityResult(
        rows=rows,
        user_row_index=user_row_index,
        zero_ccs_income=zero_ccs_income,
        highest_marginal_range=highest,
        lowest_marginal_range=lowest,
    )


def _marginal_ranges(
    rows: list[IncomeSensitivityRow],
) -> tuple[MarginalRange | None, MarginalRange | None]:
    """Find the bands with the largest and smallest cost increase.

    Only bands that start with some subsidy left are considered, and the
    smallest band must still be a real increase (> 0).
    """
    highest: MarginalRange | None = None
    lowest: MarginalRange | None = None

    for prev, row in zip(rows, rows[1:]):
        if prev.subsidy_percent <= 0:
            continue

        band = MarginalRange(
            income_from=prev.income,
            income_to=row.income,
            cost_increase=row.annual_out_of_pocket - prev.annual_out_of_pocket,
        )
        if highest is None or band.cost_increase > highest.cost_increase:
            highest = band
        if band.cost_increase > 0 and (lowest is None or band.cost_increase < lowest.cost_increase):
            lowest = band

    return highest, lowest


def condensed_row_indices(
    result: IncomeSensitivityResult,
    config: RateConfig,
    context: int = 4,
) -> list[int]:
    """Pick the rows to show when the table is collapsed.

    Keeps the first and last rows, `context` rows either side of the user's
    row, the pair straddling the first zero-subsidy row, and the rows around
    the base income threshold, so every structural transition stays visible.
    """
    rows = result.rows
    if not rows:
        return []

    last = len(rows) - 1
    indices = {0, last}

    start = max(0, result.user_row_index - context)
    end = min(last, result.user_row_index + context)
    indices.update(range(start, end + 1))

    for i, row in enumerate(rows):
        if i > 0 and row.subsidy_percent == 0:
            indices.update((i - 1, i))
            break

    for i, row in enumerate(rows):
        if row.income >= config.base_income_threshold:
            indices.update((max(0, i - 1), i, min(last, i + 1)))
            break

    return sorted(indices)
