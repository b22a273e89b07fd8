"""Pydantic schemas for payroll intake and API request/response models.

Intake validation lives here: every record handed to the engine has passed
through one of these models, so the engine can assume non-negative numbers,
known country codes and at least one source of income per employee.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from paye.calculators.pension_calculator import DEFAULT_TIERS
from paye.calculators.types import (
    Country,
    Employee,
    PayrollResult,
    PayrollRunResult,
    PensionBreakdown,
    PensionTier,
    PieceRateItem,
    TaxBracket,
)
from paye.config import SplitConfig


# ============================================================================
# Intake schemas
# ============================================================================


class PieceRateItemIn(BaseModel):
    """Schema for a piece-rate work item."""

    item: str = Field(min_length=1)
    rate: float = Field(ge=0)
    quantity: float = Field(ge=0)

    def to_domain(self) -> PieceRateItem:
        return PieceRateItem(item=self.item, rate=self.rate, quantity=self.quantity)


class TaxBracketIn(BaseModel):
    """Schema for a tax bracket; rate is a percentage."""

    threshold: float = Field(ge=0)
    rate: float = Field(ge=0, le=100)

    def to_domain(self) -> TaxBracket:
        return TaxBracket(threshold=self.threshold, rate=self.rate)


class CountryIn(BaseModel):
    """Schema for country setup."""

    code: str
    name: str = Field(min_length=1)
    minimum_wage: float = Field(default=0, ge=0)
    brackets: list[TaxBracketIn] = []

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("Country code must be exactly 3 letters")
        return code

    def to_domain(self) -> Country:
        return Country(
            code=self.code,
            name=self.name,
            minimum_wage=self.minimum_wage,
            tax_brackets=tuple(b.to_domain() for b in self.brackets),
        )


class PensionTierIn(BaseModel):
    """Schema for a pension tier; percentage is a fraction of the total."""

    name: str = Field(min_length=1)
    percentage: float = Field(ge=0)

    def to_domain(self) -> PensionTier:
        return PensionTier(name=self.name, percentage=self.percentage)


class EmployeeIn(BaseModel):
    """Schema for employee setup."""

    name: str = Field(min_length=1)
    basic_salary: float = Field(default=0, ge=0)
    country_code: str
    piece_rate: list[PieceRateItemIn] = []

    @field_validator("country_code")
    @classmethod
    def normalize_country_code(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def require_income(self) -> EmployeeIn:
        piece_total = sum(p.rate * p.quantity for p in self.piece_rate)
        if self.basic_salary == 0 and piece_total == 0:
            raise ValueError(
                f"Employee '{self.name}' needs a basic salary or piece-rate work"
            )
        return self

    def to_domain(self) -> Employee:
        return Employee(
            name=self.name,
            basic_salary=self.basic_salary,
            country_code=self.country_code,
            piece_rate=[p.to_domain() for p in self.piece_rate],
        )


class SplitConfigIn(BaseModel):
    """Schema for salary splitting configuration.

    An out-of-range ratio is not rejected; it falls back to the default.
    """

    enabled: bool = False
    basic_salary_ratio: float | None = None

    def to_domain(self) -> SplitConfig:
        return SplitConfig.from_ratio(self.enabled, self.basic_salary_ratio)


def _default_tiers() -> list[PensionTierIn]:
    return [PensionTierIn(name=t.name, percentage=t.percentage) for t in DEFAULT_TIERS]


class PayrollRunRequest(BaseModel):
    """Schema for a complete payroll run."""

    countries: list[CountryIn] = Field(min_length=1)
    employees: list[EmployeeIn] = Field(min_length=1)
    split: SplitConfigIn = Field(default_factory=SplitConfigIn)
    pension_tiers: list[PensionTierIn] = Field(default_factory=_default_tiers)

    @model_validator(mode="after")
    def check_country_codes(self) -> PayrollRunRequest:
        codes = [c.code for c in self.countries]
        duplicates = sorted({c for c in codes if codes.count(c) > 1})
        if duplicates:
            raise ValueError(f"Duplicate country codes: {', '.join(duplicates)}")

        known = set(codes)
        for employee in self.employees:
            if employee.country_code not in known:
                raise ValueError(
                    f"Invalid country code '{employee.country_code}' "
                    f"for employee '{employee.name}'"
                )
        return self

    def country_map(self) -> dict[str, Country]:
        return {c.code: c.to_domain() for c in self.countries}

    def tiers(self) -> list[PensionTier]:
        return [t.to_domain() for t in self.pension_tiers]


class TaxQuoteRequest(BaseModel):
    """Schema for a standalone tax quote."""

    salary: float = Field(ge=0)
    brackets: list[TaxBracketIn] = []


class PensionQuoteRequest(BaseModel):
    """Schema for a standalone pension quote."""

    basic_salary: float = Field(ge=0)
    tiers: list[PensionTierIn] = Field(default_factory=_default_tiers)


# ============================================================================
# Result schemas
# ============================================================================


class PensionOut(BaseModel):
    """Schema for pension contributions."""

    employee_contribution: float
    employer_contribution: float
    total_mandatory: float
    contributions: dict[str, float]
    tiers: dict[str, float]

    @classmethod
    def from_breakdown(cls, pension: PensionBreakdown) -> PensionOut:
        return cls(
            employee_contribution=pension.employee_contribution,
            employer_contribution=pension.employer_contribution,
            total_mandatory=pension.total_mandatory,
            contributions=pension.contribution_breakdown(),
            tiers=dict(pension.tier_breakdown),
        )


class PayrollResultOut(BaseModel):
    """Schema for one employee's payroll result."""

    employee_name: str
    country_code: str
    case: str
    original_basic: float
    basic_salary: float
    allowance: float
    piece_rate_total: float
    minimum_wage_adjustment: float
    gross: float
    tax: float
    pension: PensionOut
    net: float
    calculation_id: UUID | None = None
    explanations: list[str] = []

    @classmethod
    def from_result(cls, result: PayrollResult) -> PayrollResultOut:
        return cls(
            employee_name=result.employee_name,
            country_code=result.country_code,
            case=result.case.value,
            original_basic=result.original_basic,
            basic_salary=result.basic_salary,
            allowance=result.allowance,
            piece_rate_total=result.piece_rate_total,
            minimum_wage_adjustment=result.minimum_wage_adjustment,
            gross=result.gross,
            tax=result.tax,
            pension=PensionOut.from_breakdown(result.pension),
            net=result.net,
            calculation_id=result.calculation_id,
            explanations=list(result.explanations),
        )


class PayrollRunResponse(BaseModel):
    """Schema for a payroll run response."""

    results: list[PayrollResultOut]
    total_gross: float
    total_tax: float
    total_pension_employee: float
    total_pension_employer: float
    total_net: float

    @classmethod
    def from_run(cls, run: PayrollRunResult) -> PayrollRunResponse:
        return cls(
            results=[PayrollResultOut.from_result(r) for r in run.results],
            total_gross=run.total_gross,
            total_tax=run.total_tax,
            total_pension_employee=run.total_pension_employee,
            total_pension_employer=run.total_pension_employer,
            total_net=run.total_net,
        )


class TaxQuoteResponse(BaseModel):
    """Schema for a tax quote response."""

    salary: float
    tax: float
    applied_bracket: dict[str, float] | None = None


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
