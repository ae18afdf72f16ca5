"""Per-session CCS with the hourly rate cap applied."""

from decimal import ROUND_HALF_UP, Decimal

from ccs_engine.calculators.errors import InvalidInput, UnknownLookup
from ccs_engine.calculators.rate_data import RateConfig
from ccs_engine.models import AgeGroup, CareType, SessionResult, State

CENT = Decimal("0.01")


def get_hourly_rate_cap(care_type: CareType, age_group: AgeGroup, config: RateConfig) -> Decimal:
    """Look up the hourly rate cap for a care type and age group.

    Raises:
        UnknownLookup: No cap is configured for the pair (e.g. OSHC for a
            child below school age).
    """
    try:
        return config.hourly_rate_caps[care_type][age_group]
    except KeyError:
        raise UnknownLookup(
            f"No hourly rate cap for care type {care_type!r} and age group {age_group!r} "
            f"in {config.fiscal_year}"
        ) from None


def get_state_average_daily_fee(state: State, care_type: CareType, config: RateConfig) -> Decimal:
    """Look up the average daily fee for a state and care type.

    In-home care has no meaningful average; the family must supply a fee.

    Raises:
        UnknownLookup: State or care type has no average in the table.
    """
    if state not in config.state_average_fees:
        raise UnknownLookup(f"No state average data for {state!r}")
    fees = config.state_average_fees[state]
    if care_type not in fees:
        raise UnknownLookup(f"No average daily fee for {care_type!r} in {state}")
    return fees[care_type]


def calculate_session_ccs(
    daily_fee: Decimal,
    hours_per_day: Decimal,
    ccs_percent: Decimal,
    care_type: CareType,
    age_group: AgeGroup,
    config: RateConfig,
) -> SessionResult:
    """Calculate the subsidy for one session (day) of care.

    The subsidy applies to the lower of the hourly fee and the hourly rate
    cap; any fee above the cap is entirely out of pocket.

    Worked example (centre-based, below school age, $160/day, 10hr, 85%):
        hourly fee $16.00, cap $14.63, fee above cap $1.37/hr
        subsidy $14.63 x 0.85 x 10 = $124.36, out of pocket $35.64

    Args:
        daily_fee: Fee charged for the session (must be >= 0).
        hours_per_day: Session length in hours (must be > 0).
        ccs_percent: Subsidy percentage to apply (0-95).
        care_type: Type of care, selects the rate cap.
        age_group: Child's age group, selects the rate cap.
        config: CCS rate table for the financial year.

    Returns:
        SessionResult. The session subsidy is paid in whole cents.

    Raises:
        InvalidInput: Non-positive hours or negative fee.
        UnknownLookup: No rate cap for the care type / age group.
    """
    if hours_per_day <= 0:
        raise InvalidInput("hours_per_day must be greater than 0.")
    if daily_fee < 0:
        raise InvalidInput("daily_fee cannot be negative.")

    hourly_fee = daily_fee / hours_per_day
    hourly_rate_cap = get_hourly_rate_cap(care_type, age_group, config)
    effective_hourly_rate = min(hourly_fee, hourly_rate_cap)
    fee_above_cap_per_hour = max(Decimal("0"), hourly_fee - hourly_rate_cap)

    subsidy_per_hour = effective_hourly_rate * ccs_percent / 100
    subsidy_per_session = (subsidy_per_hour * hours_per_day).quantize(CENT, rounding=ROUND_HALF_UP)

    return SessionResult(
        daily_fee=daily_fee,
        hours_per_day=hours_per_day,
        hourly_fee=hourly_fee,
        hourly_rate_cap=hourly_rate_cap,
        effective_hourly_rate=effective_hourly_rate,
        fee_above_cap_per_hour=fee_above_cap_per_hour,
        subsidy_per_hour=subsidy_per_hour,
        subsidy_per_session=subsidy_per_session,
        out_of_pocket_per_session=daily_fee - subsidy_per_session,
        ccs_percent=ccs_percent,
    )
