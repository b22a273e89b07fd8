"""Payroll calculation engine."""

from paye.calculators.engine import PayrollEngine, UnknownCountryError
from paye.calculators.pension_calculator import PensionCalculator
from paye.calculators.piece_rate import aggregate
from paye.calculators.tax_calculator import TaxCalculator

__all__ = [
    "PayrollEngine",
    "UnknownCountryError",
    "PensionCalculator",
    "TaxCalculator",
    "aggregate",
]
