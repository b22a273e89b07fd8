"""Tax calculation using peak-bracket rules."""

from __future__ import annotations

from collections.abc import Sequence

from paye.calculators.types import TaxBracket


class TaxCalculator:
    """Calculates tax using the peak-bracket model.

    Brackets are ordered by threshold and the highest threshold the salary
    meets or exceeds selects a single rate. That rate is applied to the
    entire salary, not only to the portion above the threshold:

        brackets = [(500, 5), (1000, 10)]
        400  -> 0      (below every threshold)
        500  -> 25     (5% of 500)
        1200 -> 120    (10% of 1200)

    Thresholds are assumed unique. When they are not, the bracket listed
    last among equal thresholds wins.
    """

    def compute(self, salary: float, brackets: Sequence[TaxBracket]) -> float:
        """Return the tax owed on salary; 0.0 when no bracket applies."""
        bracket = self.peak_bracket(salary, brackets)
        if bracket is None:
            return 0.0
        return salary * (bracket.rate / 100)

    @staticmethod
    def peak_bracket(
        salary: float, brackets: Sequence[TaxBracket]
    ) -> TaxBracket | None:
        """Find the bracket with the highest threshold not above salary."""
        # sorted() is stable and leaves the caller's sequence untouched
        ordered = sorted(brackets, key=lambda b: b.threshold)
        for bracket in reversed(ordered):
            if salary >= bracket.threshold:
                return bracket
        return None
