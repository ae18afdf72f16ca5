"""API routes for the CCS calculator."""

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ccs_engine.calculators.back_to_work import calculate_back_to_work
from ccs_engine.calculators.income_tax import calculate_income_tax
from ccs_engine.calculators.rate_data import RateConfig, TaxRates
from ccs_engine.calculators.sensitivity import (
    calculate_income_sensitivity,
    condensed_row_indices,
)
from ccs_engine.models import (
    Amount,
    BackToWorkParams,
    BackToWorkResult,
    IncomeSensitivityResult,
    IncomeTaxResult,
    SensitivityParams,
)
from ccs_engine.pipeline import CalculationOutput, run_calculations
from ccs_engine.resolve import CalculationRequest
from config.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()


class IncomeTaxRequest(BaseModel):
    """Request body for the /income-tax endpoint."""

    annual_income: Amount


class SensitivityResponse(BaseModel):
    """Sensitivity table plus the rows to show when collapsed."""

    table: IncomeSensitivityResult
    condensed_row_indices: list[int]


class RatesResponse(BaseModel):
    ccs: RateConfig
    tax: TaxRates


def _rates(request: Request) -> tuple[RateConfig, TaxRates]:
    return request.app.state.ccs_rates, request.app.state.tax_rates


@router.get("/health")
async def health(request: Request) -> dict:  # type: ignore[type-arg]
    """Health check endpoint with the loaded rates version."""
    config, _ = _rates(request)
    return {"status": "ok", "fiscal_year": config.fiscal_year}


@router.get("/rates", response_model=RatesResponse)
async def rates(request: Request) -> RatesResponse:
    """Return the loaded CCS and tax tables."""
    config, tax_rates = _rates(request)
    return RatesResponse(ccs=config, tax=tax_rates)


@router.post("/calculate", response_model=CalculationOutput)
async def calculate(body: CalculationRequest, request: Request) -> CalculationOutput:
    """Run the full calculation suite for a family."""
    config, tax_rates = _rates(request)
    return run_calculations(body, config, tax_rates)


@router.post("/income-tax", response_model=IncomeTaxResult)
async def income_tax(body: IncomeTaxRequest, request: Request) -> IncomeTaxResult:
    """Income tax, Medicare levy and LITO for an individual income."""
    _, tax_rates = _rates(request)
    return calculate_income_tax(body.annual_income, tax_rates)


@router.post("/sensitivity", response_model=SensitivityResponse)
async def sensitivity(body: SensitivityParams, request: Request) -> SensitivityResponse:
    """Income vs. cost table for a fixed care scenario."""
    config, _ = _rates(request)
    table = calculate_income_sensitivity(body, config)
    return SensitivityResponse(
        table=table,
        condensed_row_indices=condensed_row_indices(table, config, settings.condensed_context_rows),
    )


@router.post("/back-to-work", response_model=BackToWorkResult)
async def back_to_work(body: BackToWorkParams, request: Request) -> BackToWorkResult:
    """Compare 1-5 day return-to-work scenarios."""
    config, tax_rates = _rates(request)
    result = calculate_back_to_work(body, config, tax_rates)
    logger.info(
        "Back-to-work comparison: best scenario %s day(s)",
        result.best_scenario.days_working if result.best_scenario else None,
    )
    return result
