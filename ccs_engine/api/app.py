"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ccs_engine.api.routes import router
from ccs_engine.calculators.errors import InvalidInput, UnknownLookup
from ccs_engine.calculators.rate_data import load_rate_config, load_tax_rates
from config.settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: load the configured year's rate tables once."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up with %s rates...", settings.fiscal_year)

    app.state.ccs_rates = load_rate_config(settings.fiscal_year)
    app.state.tax_rates = load_tax_rates(settings.fiscal_year)

    yield

    logger.info("Shutting down...")


async def invalid_input_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=422)


async def unknown_lookup_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Rate table lookup failed: %s", exc)
    return JSONResponse({"error": str(exc)}, status_code=404)


def register_exception_handlers(app: FastAPI) -> None:
    """Map calculator errors to HTTP responses."""
    app.add_exception_handler(InvalidInput, invalid_input_handler)
    app.add_exception_handler(UnknownLookup, unknown_lookup_handler)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="CCS Calculator", lifespan=lifespan)
    register_exception_handlers(app)
    app.include_router(router)
    return app
