"""Statutory pension contribution calculation."""

from __future__ import annotations

from collections.abc import Sequence

from paye.calculators.types import PensionBreakdown, PensionTier

DEFAULT_TIERS: tuple[PensionTier, ...] = (
    PensionTier(name="Tier 1", percentage=0.135),
    PensionTier(name="Tier 2", percentage=0.55),
    PensionTier(name="Tier 3", percentage=0.315),
)


class PensionCalculator:
    """Calculates mandatory pension contributions on basic salary.

    The employee and employer shares are fixed statutory rates. The tier
    breakdown allocates the combined mandatory amount across named buckets
    and is independent of the employee/employer split. Tier percentages are
    expected to sum to 1.0 but this is not checked; whatever allocation the
    tiers describe is reported.
    """

    EMPLOYEE_RATE = 0.055  # 5.5%
    EMPLOYER_RATE = 0.13  # 13%

    def compute(
        self, basic_salary: float, tiers: Sequence[PensionTier]
    ) -> PensionBreakdown:
        employee = basic_salary * self.EMPLOYEE_RATE
        employer = basic_salary * self.EMPLOYER_RATE
        total = employee + employer

        tier_breakdown: dict[str, float] = {}
        for tier in tiers:
            tier_breakdown[tier.name] = total * tier.percentage

        return PensionBreakdown(
            basic_salary=basic_salary,
            employee_contribution=employee,
            employer_contribution=employer,
            total_mandatory=total,
            tier_breakdown=tier_breakdown,
        )
