"""Australian resident income tax: brackets, Medicare levy and LITO."""

from collections.abc import Sequence
from decimal import Decimal

from ccs_engine.calculators.rate_data import LitoParams, MedicareLevyParams, TaxBracket, TaxRates
from ccs_engine.models import BaseIncomeTax, BracketTax, IncomeTaxResult

_ZERO = Decimal("0")


def calculate_base_income_tax(income: Decimal, brackets: Sequence[TaxBracket]) -> BaseIncomeTax:
    """Calculate progressive income tax with a per-bracket breakdown.

    Each bracket taxes the slice of income between its threshold and the
    next one. FY2025-26: $50,000 -> $26,800 x 16% + $5,000 x 30% = $5,788.

    Args:
        income: Taxable income. Zero or negative returns no tax.
        brackets: Brackets in ascending threshold order.

    Returns:
        BaseIncomeTax with tax, marginal_rate and breakdown.
    """
    if income <= 0:
        return BaseIncomeTax(tax=_ZERO, marginal_rate=_ZERO, breakdown=[])

    breakdown: list[BracketTax] = []
    total_tax = _ZERO
    marginal_rate = _ZERO
    uppers: list[Decimal | None] = [b.threshold for b in brackets[1:]] + [None]

    for bracket, upper in zip(brackets, uppers):
        if income <= bracket.threshold:
            break

        taxable = (min(income, upper) if upper is not None else income) - bracket.threshold
        tax = taxable * bracket.rate
        breakdown.append(
            BracketTax(
                lower=bracket.threshold,
                upper=upper,
                rate=bracket.rate,
                taxable_amount=taxable,
                tax=tax,
            )
        )
        total_tax += tax
        marginal_rate = bracket.rate

    return BaseIncomeTax(tax=total_tax, marginal_rate=marginal_rate, breakdown=breakdown)


def calculate_medicare_levy(income: Decimal, params: MedicareLevyParams) -> Decimal:
    """Calculate the Medicare levy.

    Nil up to the low threshold, then shaded in at the phase-in rate until
    it meets the full levy at the shade-in threshold:

        $26,000 -> $0, $29,250 -> $325, $32,500 -> $650, $50,000 -> $1,000
    """
    if income <= params.low_threshold:
        return _ZERO
    if income <= params.shade_in_threshold:
        return params.phase_in_rate * (income - params.low_threshold)
    return income * params.rate


def calculate_lito(income: Decimal, params: LitoParams) -> Decimal:
    """Calculate the Low Income Tax Offset.

        up to $37,500        $700
        $37,500 - $45,000    $700 - 5c per $ above $37,500
        above $45,000        $325 - 1.5c per $ above $45,000, down to $0
    """
    if income <= params.phase1_threshold:
        return params.max_offset

    if income <= params.phase2_threshold:
        offset = params.max_offset - (income - params.phase1_threshold) * params.phase1_rate
        return max(_ZERO, offset)

    after_phase1 = params.max_offset - (params.phase2_threshold - params.phase1_threshold) * params.phase1_rate
    offset = after_phase1 - (income - params.phase2_threshold) * params.phase2_rate
    return max(_ZERO, offset)


def calculate_income_tax(income: Decimal, rates: TaxRates) -> IncomeTaxResult:
    """Calculate individual income tax including Medicare levy and LITO.

    LITO reduces income tax only (not the levy) and can never create a
    refund: total = max(0, base tax - LITO) + Medicare levy.

    Args:
        income: Individual taxable income. Zero or negative income has no tax.
        rates: Tax table for the financial year.

    Returns:
        IncomeTaxResult with net income, effective and marginal rates.
    """
    if income <= 0:
        return IncomeTaxResult(
            gross_income=income,
            income_tax=_ZERO,
            medicare_levy=_ZERO,
            lito_offset=_ZERO,
            tax_after_lito=_ZERO,
            total_tax=_ZERO,
            net_income=income,
            effective_rate=_ZERO,
            marginal_rate=_ZERO,
        )

    base = calculate_base_income_tax(income, rates.brackets)
    medicare_levy = calculate_medicare_levy(income, rates.medicare_levy)
    lito_offset = calculate_lito(income, rates.lito)

    tax_after_lito = max(_ZERO, base.tax - lito_offset)
    total_tax = tax_after_lito + medicare_levy

    return IncomeTaxResult(
        gross_income=income,
        income_tax=base.tax,
        medicare_levy=medicare_levy,
        lito_offset=lito_offset,
        tax_after_lito=tax_after_lito,
        total_tax=total_tax,
        net_income=income - total_tax,
        effective_rate=total_tax / income,
        marginal_rate=base.marginal_rate,
        breakdown=base.breakdown,
    )


def calculate_net_income(income: Decimal, rates: TaxRates) -> Decimal:
    """Net income after all tax."""
    return calculate_income_tax(income, rates).net_income
