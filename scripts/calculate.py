"""Run the CCS calculation pipeline for a request file.

Usage:
    python scripts/calculate.py scripts/sample_request.yaml
    python scripts/calculate.py request.yaml --fiscal-year 2025-26 --condensed
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from ccs_engine.calculators.errors import CalculationError
from ccs_engine.calculators.rate_data import (
    available_fiscal_years,
    load_rate_config,
    load_tax_rates,
)
from ccs_engine.pipeline import run_calculations
from ccs_engine.resolve import CalculationRequest
from config.settings import settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main() -> None:
    """Load a YAML request, run every calculation and print JSON."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("request", type=Path, help="YAML file with the family's answers")
    parser.add_argument(
        "--fiscal-year",
        default=settings.fiscal_year,
        choices=available_fiscal_years(),
        help="Financial year of the rate tables",
    )
    parser.add_argument(
        "--condensed",
        action="store_true",
        help="Only print the condensed income sensitivity table",
    )
    args = parser.parse_args()

    request = CalculationRequest.model_validate(yaml.safe_load(args.request.read_text()))
    config = load_rate_config(args.fiscal_year)
    tax_rates = load_tax_rates(args.fiscal_year)

    try:
        output = run_calculations(request, config, tax_rates)
    except CalculationError as e:
        logger.error("Calculation failed: %s", e)
        sys.exit(1)

    if args.condensed:
        rows = output.sensitivity.rows
        condensed = [rows[i].model_dump(mode="json") for i in output.condensed_sensitivity_rows]
        print(json.dumps(condensed, indent=2))
        return

    print(output.model_dump_json(indent=2))


if __name__ == "__main__":
    main()
