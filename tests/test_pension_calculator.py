"""Unit tests for PensionCalculator."""

import pytest
from hypothesis import given, strategies as st

from paye.calculators.pension_calculator import DEFAULT_TIERS, PensionCalculator
from paye.calculators.types import PensionTier


class TestPensionContributions:
    """Test statutory contribution rates."""

    def test_contributions_on_basic(self, tiers):
        """Employee 5.5%, employer 13%, total 18.5%."""
        pension = PensionCalculator().compute(1000, tiers)

        assert pension.employee_contribution == pytest.approx(55)
        assert pension.employer_contribution == pytest.approx(130)
        assert pension.total_mandatory == pytest.approx(185)

    def test_tier_allocation(self, tiers):
        pension = PensionCalculator().compute(1000, tiers)

        assert pension.tier_breakdown["Tier 1"] == pytest.approx(24.975)
        assert pension.tier_breakdown["Tier 2"] == pytest.approx(101.75)
        assert pension.tier_breakdown["Tier 3"] == pytest.approx(58.275)
        assert sum(pension.tier_breakdown.values()) == pytest.approx(185)

    def test_tier_sum_not_enforced(self):
        """Tiers that do not sum to 1 are reported as given."""
        tiers = [PensionTier(name="Only", percentage=0.5)]
        pension = PensionCalculator().compute(1000, tiers)

        assert pension.tier_breakdown == {"Only": pytest.approx(92.5)}

    def test_no_tiers(self):
        pension = PensionCalculator().compute(1000, [])
        assert pension.tier_breakdown == {}
        assert pension.total_mandatory == pytest.approx(185)

    def test_zero_basic(self, tiers):
        pension = PensionCalculator().compute(0, tiers)
        assert pension.total_mandatory == 0
        assert all(v == 0 for v in pension.tier_breakdown.values())

    def test_contribution_breakdown_labels(self, tiers):
        breakdown = PensionCalculator().compute(1000, tiers).contribution_breakdown()

        assert set(breakdown) == {
            "Basic Salary",
            "Employee Contribution",
            "Employer Contribution",
            "Total Mandatory",
        }
        assert breakdown["Basic Salary"] == 1000

    def test_default_tiers_sum_to_one(self):
        assert sum(t.percentage for t in DEFAULT_TIERS) == pytest.approx(1.0)


class TestPensionProperties:
    """Property-based checks."""

    @given(st.floats(min_value=0, max_value=1e7, allow_nan=False))
    def test_total_is_employee_plus_employer(self, basic):
        pension = PensionCalculator().compute(basic, DEFAULT_TIERS)
        assert pension.total_mandatory == pytest.approx(
            pension.employee_contribution + pension.employer_contribution
        )
        assert sum(pension.tier_breakdown.values()) == pytest.approx(
            pension.total_mandatory
        )
