"""Pytest fixtures for PayE engine tests."""

from __future__ import annotations

import pytest

from paye.calculators.engine import PayrollEngine
from paye.calculators.types import Country, Employee, PensionTier, PieceRateItem, TaxBracket
from paye.config import SplitConfig, get_settings


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate tests from the caller's environment and the settings cache."""
    for name in (
        "PAYE_SPLIT_ENABLED",
        "PAYE_BASIC_SALARY_RATIO",
        "ENGINE_VERSION",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine(clean_settings) -> PayrollEngine:
    return PayrollEngine()


@pytest.fixture
def brackets() -> list[TaxBracket]:
    """Brackets deliberately out of order."""
    return [
        TaxBracket(threshold=1000, rate=10),
        TaxBracket(threshold=500, rate=5),
    ]


@pytest.fixture
def country(brackets: list[TaxBracket]) -> Country:
    """Country with no minimum wage so resolution cases are not topped up."""
    return Country(code="GHA", name="Ghana", minimum_wage=0, tax_brackets=tuple(brackets))


@pytest.fixture
def tiers() -> list[PensionTier]:
    return [
        PensionTier(name="Tier 1", percentage=0.135),
        PensionTier(name="Tier 2", percentage=0.55),
        PensionTier(name="Tier 3", percentage=0.315),
    ]


@pytest.fixture
def split_enabled() -> SplitConfig:
    return SplitConfig(enabled=True, basic_salary_ratio=0.7)


@pytest.fixture
def split_disabled() -> SplitConfig:
    return SplitConfig(enabled=False)


@pytest.fixture
def make_employee():
    """Factory building an employee from (rate, quantity) pairs."""

    def _make(
        basic: float = 0,
        pieces: list[tuple[float, float]] | None = None,
        code: str = "GHA",
    ) -> Employee:
        return Employee(
            name="Ama",
            basic_salary=basic,
            country_code=code,
            piece_rate=[
                PieceRateItem(item=f"item-{i}", rate=rate, quantity=qty)
                for i, (rate, qty) in enumerate(pieces or [])
            ],
        )

    return _make
