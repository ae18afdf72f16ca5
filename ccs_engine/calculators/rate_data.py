"""CCS and income tax rate tables for each financial year.

Tables live in config/ccs_rates.yaml and config/tax_rates.yaml, keyed by
financial year. Each year is validated into a frozen model on first use
and cached for the life of the process. Changing year means loading a
different model, never editing one.
"""

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from functools import lru_cache
from types import MappingProxyType

from pydantic import SerializationInfo, field_serializer, field_validator, model_validator

from ccs_engine.calculators.errors import UnknownLookup
from ccs_engine.models import AgeGroup, Amount, CareType, State, ValueModel
from config import load_yaml_config
from config.settings import settings

logger = logging.getLogger(__name__)

CCS_RATES_FILE = "ccs_rates.yaml"
TAX_RATES_FILE = "tax_rates.yaml"

DEFAULT_FISCAL_YEAR = settings.fiscal_year


class RateConfig(ValueModel):
    """All CCS parameters for a single financial year."""

    fiscal_year: str
    effective_date: date
    source: str = ""

    base_income_threshold: Amount
    max_subsidy_percent: Amount
    min_subsidy_percent: Amount = Decimal("0")
    taper_step_amount: Amount
    taper_step_percent: Amount

    higher_rate_boost: Amount
    higher_rate_cap: Amount

    hourly_rate_caps: dict[CareType, dict[AgeGroup, Amount]]
    state_average_fees: dict[State, dict[CareType, Amount]]

    annual_cap_per_child: Amount
    annual_cap_income_threshold: Amount
    withholding_percent: Amount

    @field_validator("hourly_rate_caps", "state_average_fees", mode="after")
    @classmethod
    def _freeze_table(cls, table: dict) -> Mapping:
        """Nested lookup tables are read-only like the rest of the model."""
        return MappingProxyType({key: MappingProxyType(dict(row)) for key, row in table.items()})

    @field_serializer("hourly_rate_caps", "state_average_fees")
    def _serialize_table(self, table: Mapping, info: SerializationInfo) -> dict:
        as_json = info.mode == "json"
        return {key: {k: float(v) if as_json else v for k, v in row.items()} for key, row in table.items()}

    @model_validator(mode="after")
    def _check_taper(self) -> "RateConfig":
        if self.taper_step_amount <= 0:
            raise ValueError("taper_step_amount must be positive")
        if not self.min_subsidy_percent <= self.max_subsidy_percent:
            raise ValueError("min_subsidy_percent must not exceed max_subsidy_percent")
        return self


class TaxBracket(ValueModel):
    """A single income tax bracket."""

    threshold: Amount  # income above this is taxed at rate
    rate: Amount


class MedicareLevyParams(ValueModel):
    """Medicare levy with its low-income shade-in."""

    rate: Amount
    low_threshold: Amount
    shade_in_threshold: Amount

    @property
    def phase_in_rate(self) -> Decimal:
        """Rate per dollar above the low threshold.

        Chosen so the shaded levy meets the full levy at the shade-in
        threshold: 0.02 x 32,500 / 6,500 = 0.10 for 2025-26.
        """
        span = self.shade_in_threshold - self.low_threshold
        return self.rate * self.shade_in_threshold / span

    @model_validator(mode="after")
    def _check_thresholds(self) -> "MedicareLevyParams":
        if self.shade_in_threshold <= self.low_threshold:
            raise ValueError("shade_in_threshold must exceed low_threshold")
        return self


class LitoParams(ValueModel):
    """Low Income Tax Offset parameters."""

    max_offset: Amount
    phase1_threshold: Amount  # full offset up to here
    phase1_rate: Amount
    phase2_threshold: Amount  # shallower reduction from here
    phase2_rate: Amount

    @model_validator(mode="after")
    def _check_phases(self) -> "LitoParams":
        if self.phase2_threshold < self.phase1_threshold:
            raise ValueError("phase2_threshold must not be below phase1_threshold")
        return self


class TaxRates(ValueModel):
    """All income tax parameters for a single financial year."""

    fiscal_year: str
    source: str = ""
    brackets: tuple[TaxBracket, ...]
    medicare_levy: MedicareLevyParams
    lito: LitoParams

    @model_validator(mode="after")
    def _check_brackets(self) -> "TaxRates":
        if not self.brackets or self.brackets[0].threshold != 0:
            raise ValueError("brackets must start at a threshold of 0")
        thresholds = [b.threshold for b in self.brackets]
        if any(a >= b for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError("bracket thresholds must be strictly ascending")
        return self


def _year_table(filename: str, fiscal_year: str) -> dict:
    tables = load_yaml_config(filename)
    if fiscal_year not in tables:
        available = ", ".join(sorted(tables))
        raise UnknownLookup(f"Unknown financial year: {fiscal_year}. Available: {available}")
    return {"fiscal_year": fiscal_year, **tables[fiscal_year]}


@lru_cache
def load_rate_config(fiscal_year: str = DEFAULT_FISCAL_YEAR) -> RateConfig:
    """Load and validate the CCS rate table for a financial year."""
    config = RateConfig.model_validate(_year_table(CCS_RATES_FILE, fiscal_year))
    logger.info("Loaded CCS rates for %s", fiscal_year)
    return config


@lru_cache
def load_tax_rates(fiscal_year: str = DEFAULT_FISCAL_YEAR) -> TaxRates:
    """Load and validate the income tax table for a financial year."""
    rates = TaxRates.model_validate(_year_table(TAX_RATES_FILE, fiscal_year))
    logger.info("Loaded tax rates for %s", fiscal_year)
    return rates


def available_fiscal_years() -> list[str]:
    """Financial years that have both a CCS and a tax table."""
    ccs_years = set(load_yaml_config(CCS_RATES_FILE))
    tax_years = set(load_yaml_config(TAX_RATES_FILE))
    return sorted(ccs_years & tax_years)
