"""Errors raised by the calculators.

Both kinds fail fast: the caller must fix the input or the rate tables
before calling again.
"""


class CalculationError(Exception):
    """Base class for calculator errors."""


class InvalidInput(CalculationError, ValueError):
    """A structural precondition on the inputs was violated."""


class UnknownLookup(CalculationError, LookupError):
    """A requested key has no entry in the rate tables."""
