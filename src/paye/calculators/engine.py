"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import hashlib
import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

from paye.calculators.pension_calculator import DEFAULT_TIERS, PensionCalculator
from paye.calculators.piece_rate import aggregate
from paye.calculators.tax_calculator import TaxCalculator
from paye.calculators.types import (
    Country,
    Employee,
    PayrollResult,
    PayrollRunResult,
    PensionTier,
    ResolutionCase,
)
from paye.config import SplitConfig, get_settings

logger = logging.getLogger(__name__)


class UnknownCountryError(Exception):
    """Raised when an employee references a country that was not supplied."""

    def __init__(self, employee_name: str, country_code: str):
        self.employee_name = employee_name
        self.country_code = country_code
        super().__init__(
            f"Employee '{employee_name}' references unknown country '{country_code}'"
        )


class PayrollEngine:
    """Main payroll calculation engine.

    Resolution pipeline (stable order per employee):
    1) Aggregate piece-rate earnings
    2) Piece-rate becomes basic salary when there is no basic salary
    3) Otherwise split piece-rate into basic + allowance when enabled and
       piece-rate reaches the basic salary
    4) Otherwise piece-rate is paid as an allowance bonus
    5) Raise basic salary to the country minimum wage
    6) Gross = basic + allowance
    7) Peak-bracket tax on gross
    8) Pension on final basic salary
    9) Net = gross - tax - employee pension

    The engine holds no per-employee state; SplitConfig, countries and
    tiers are read-only for the duration of a run.
    """

    def __init__(
        self,
        tax_calculator: TaxCalculator | None = None,
        pension_calculator: PensionCalculator | None = None,
    ):
        self.tax_calculator = tax_calculator or TaxCalculator()
        self.pension_calculator = pension_calculator or PensionCalculator()
        self.settings = get_settings()

    def resolve(
        self,
        employee: Employee,
        country: Country,
        split_config: SplitConfig,
        tiers: Sequence[PensionTier] = DEFAULT_TIERS,
    ) -> PayrollResult:
        """Resolve pay for a single employee.

        The employee is left untouched; final figures live on the result.
        """
        explanations: list[str] = []
        calculation_id = self._generate_calculation_id(
            employee, country, split_config, tiers
        )

        # 1) Aggregate piece-rate
        piece_total = aggregate(employee.piece_rate)
        original_basic = employee.basic_salary
        basic = original_basic
        allowance = 0.0

        # 2-5) Fold piece-rate into basic/allowance
        if original_basic == 0 and piece_total > 0:
            case = ResolutionCase.NO_BASIC
            basic = piece_total
            explanations.append(f"Piece-rate {piece_total:.2f} paid as basic salary")
            piece_total = 0.0
        elif (
            original_basic > 0
            and split_config.enabled
            and piece_total >= original_basic
        ):
            case = ResolutionCase.SPLIT
            basic = piece_total * split_config.basic_salary_ratio
            allowance = piece_total * split_config.allowance_ratio
            logger.info(
                "Split %.2f piece-rate for %s into basic %.2f and allowance %.2f",
                piece_total,
                employee.name,
                basic,
                allowance,
            )
            explanations.append(
                f"Split {piece_total:.2f} piece-rate into basic {basic:.2f} "
                f"and allowance {allowance:.2f}"
            )
            piece_total = 0.0
        elif original_basic > 0 and employee.piece_rate:
            case = ResolutionCase.BONUS
            allowance = piece_total
            explanations.append(f"Piece-rate {piece_total:.2f} paid as allowance")
        else:
            case = ResolutionCase.NONE
            piece_total = 0.0

        logger.debug("Resolved %s as %s", employee.name, case.value)

        # 6) Minimum wage floor
        adjustment = 0.0
        if basic < country.minimum_wage:
            adjustment = country.minimum_wage - basic
            basic = country.minimum_wage
            logger.info(
                "Adjusted basic salary for %s to minimum wage %.2f (+%.2f)",
                employee.name,
                basic,
                adjustment,
            )
            explanations.append(
                f"Basic salary raised to {country.name} minimum wage (+{adjustment:.2f})"
            )

        # 7) Gross; piece-rate only reaches gross through basic/allowance
        gross = basic + allowance

        # 8) Tax
        tax = self.tax_calculator.compute(gross, country.tax_brackets)

        # 9) Pension on final basic
        pension = self.pension_calculator.compute(basic, tiers)

        # 10) Net
        net = gross - tax - pension.employee_contribution

        return PayrollResult(
            employee_name=employee.name,
            country_code=country.code,
            case=case,
            original_basic=original_basic,
            basic_salary=basic,
            allowance=allowance,
            piece_rate_total=piece_total,
            minimum_wage_adjustment=adjustment,
            gross=gross,
            tax=tax,
            pension=pension,
            net=net,
            calculation_id=calculation_id,
            explanations=explanations,
        )

    def resolve_batch(
        self,
        employees: Sequence[Employee],
        countries: Mapping[str, Country],
        split_config: SplitConfig,
        tiers: Sequence[PensionTier] = DEFAULT_TIERS,
    ) -> PayrollRunResult:
        """Resolve every employee, in input order, and total the results."""
        # Fail before any employee is resolved
        for employee in employees:
            if employee.country_code not in countries:
                raise UnknownCountryError(employee.name, employee.country_code)

        run = PayrollRunResult(results=[])
        for employee in employees:
            result = self.resolve(
                employee, countries[employee.country_code], split_config, tiers
            )
            run.results.append(result)
            run.total_gross += result.gross
            run.total_tax += result.tax
            run.total_pension_employee += result.pension_employee
            run.total_pension_employer += result.pension_employer
            run.total_net += result.net

        logger.info(
            "Resolved payroll for %d employee(s), total net %.2f",
            len(run.results),
            run.total_net,
        )
        return run

    def _generate_calculation_id(
        self,
        employee: Employee,
        country: Country,
        split_config: SplitConfig,
        tiers: Sequence[PensionTier],
    ) -> UUID:
        """Generate deterministic calculation ID from the resolution inputs."""
        data: dict[str, Any] = {
            "employee": employee.name,
            "basic_salary": repr(employee.basic_salary),
            "piece_rate": [
                [p.item, repr(p.rate), repr(p.quantity)] for p in employee.piece_rate
            ],
            "country": country.code,
            "minimum_wage": repr(country.minimum_wage),
            "brackets": [
                [repr(b.threshold), repr(b.rate)] for b in country.tax_brackets
            ],
            "split_enabled": split_config.enabled,
            "basic_salary_ratio": repr(split_config.basic_salary_ratio),
            "tiers": [[t.name, repr(t.percentage)] for t in tiers],
            "engine_version": self.settings.engine_version,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])
