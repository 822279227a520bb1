"""Exceptions raised by the calculator for bad input."""

from typing import Iterable


class CalculatorError(ValueError):
    """Base class for every error the calculator reports to its callers."""


class InvalidInputError(CalculatorError):
    """One or more loan inputs are outside their allowed domain.

    All violated constraints are collected so the caller can show them in a
    single message.
    """

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class UnknownFrequencyError(CalculatorError):
    def __init__(self, frequency: object) -> None:
        self.frequency = frequency
        super().__init__(
            f"Prepayment frequency must be 'once', 'monthly' or 'yearly'; got {frequency!r}"
        )
