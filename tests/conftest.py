"""Shared test fixtures."""

from decimal import Decimal

import pytest

from ccs_engine.calculators.rate_data import RateConfig, TaxRates, load_rate_config, load_tax_rates
from ccs_engine.models import SessionResult

FISCAL_YEAR = "2025-26"


@pytest.fixture(scope="session")
def ccs_rates() -> RateConfig:
    """FY2025-26 CCS rate table from config/ccs_rates.yaml."""
    return load_rate_config(FISCAL_YEAR)


@pytest.fixture(scope="session")
def tax_rates() -> TaxRates:
    """FY2025-26 tax table from config/tax_rates.yaml."""
    return load_tax_rates(FISCAL_YEAR)


@pytest.fixture
def make_session():  # type: ignore[no-untyped-def]
    """Factory for hand-built sessions, e.g. make_session(daily_fee="100")."""
    return _make_session


def _make_session(
    daily_fee: str = "100",
    subsidy_per_session: str = "80",
    out_of_pocket_per_session: str = "20",
    hours_per_day: str = "10",
    ccs_percent: str = "80",
) -> SessionResult:
    """Build a SessionResult by hand, below the rate cap."""
    fee = Decimal(daily_fee)
    hours = Decimal(hours_per_day)
    return SessionResult(
        daily_fee=fee,
        hours_per_day=hours,
        hourly_fee=fee / hours,
        hourly_rate_cap=Decimal("14.63"),
        effective_hourly_rate=fee / hours,
        fee_above_cap_per_hour=Decimal("0"),
        subsidy_per_hour=Decimal(subsidy_per_session) / hours,
        subsidy_per_session=Decimal(subsidy_per_session),
        out_of_pocket_per_session=Decimal(out_of_pocket_per_session),
        ccs_percent=Decimal(ccs_percent),
    )
