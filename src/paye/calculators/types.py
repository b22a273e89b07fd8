"""Type definitions for calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID


class ResolutionCase(str, Enum):
    """How piece-rate earnings were folded into basic salary and allowance."""

    NO_BASIC = "no_basic"
    SPLIT = "split"
    BONUS = "bonus"
    NONE = "none"


@dataclass(frozen=True)
class PieceRateItem:
    """A unit of piece-rate work recorded for an employee."""

    item: str
    rate: float
    quantity: float

    @property
    def earnings(self) -> float:
        return self.rate * self.quantity


@dataclass
class Employee:
    """An employee as handed over by intake. Read-only to the engine."""

    name: str
    basic_salary: float
    country_code: str
    piece_rate: list[PieceRateItem] = field(default_factory=list)


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for peak-bracket taxation."""

    threshold: float
    rate: float  # Percentage, e.g. 10 for 10%


@dataclass(frozen=True)
class Country:
    """Jurisdiction with a minimum wage and its tax brackets."""

    code: str
    name: str
    minimum_wage: float = 0.0
    tax_brackets: tuple[TaxBracket, ...] = ()


@dataclass(frozen=True)
class PensionTier:
    """Named share of the total mandatory pension contribution."""

    name: str
    percentage: float  # Fraction, e.g. 0.135 for 13.5%


@dataclass
class PensionBreakdown:
    """Pension contributions computed from a basic salary."""

    basic_salary: float
    employee_contribution: float
    employer_contribution: float
    total_mandatory: float
    tier_breakdown: dict[str, float] = field(default_factory=dict)

    def contribution_breakdown(self) -> dict[str, float]:
        """Return contributions keyed by their report labels."""
        return {
            "Basic Salary": self.basic_salary,
            "Employee Contribution": self.employee_contribution,
            "Employer Contribution": self.employer_contribution,
            "Total Mandatory": self.total_mandatory,
        }


@dataclass
class PayrollResult:
    """Snapshot of one employee's resolved pay."""

    employee_name: str
    country_code: str
    case: ResolutionCase
    original_basic: float
    basic_salary: float
    allowance: float
    piece_rate_total: float
    minimum_wage_adjustment: float
    gross: float
    tax: float
    pension: PensionBreakdown
    net: float
    calculation_id: UUID | None = None
    explanations: list[str] = field(default_factory=list)

    @property
    def pension_employee(self) -> float:
        return self.pension.employee_contribution

    @property
    def pension_employer(self) -> float:
        return self.pension.employer_contribution


@dataclass
class PayrollRunResult:
    """Result of resolving a batch of employees."""

    results: list[PayrollResult]
    total_gross: float = 0.0
    total_tax: float = 0.0
    total_pension_employee: float = 0.0
    total_pension_employer: float = 0.0
    total_net: float = 0.0
