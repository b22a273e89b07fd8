"""Tests for intake validation schemas."""

import pytest
from pydantic import ValidationError

from paye.api.schemas import (
    CountryIn,
    EmployeeIn,
    PayrollResultOut,
    PayrollRunRequest,
    PieceRateItemIn,
    SplitConfigIn,
    TaxBracketIn,
)
from paye.calculators.types import ResolutionCase


def run_request(**overrides):
    payload = {
        "countries": [
            {"code": "gha", "name": "Ghana", "minimum_wage": 60, "brackets": [{"threshold": 500, "rate": 5}]}
        ],
        "employees": [
            {"name": "Ama", "basic_salary": 100, "country_code": "gha", "piece_rate": [{"item": "bags", "rate": 10, "quantity": 5}]}
        ],
    }
    payload.update(overrides)
    return payload


class TestCountryIn:
    """Test country intake."""

    def test_code_normalized(self):
        country = CountryIn(code=" gha ", name="Ghana")
        assert country.code == "GHA"

    @pytest.mark.parametrize("code", ["GH", "GHAN", "G1A", ""])
    def test_code_must_be_three_letters(self, code):
        with pytest.raises(ValidationError, match="3 letters"):
            CountryIn(code=code, name="Ghana")

    def test_negative_minimum_wage_rejected(self):
        with pytest.raises(ValidationError):
            CountryIn(code="GHA", name="Ghana", minimum_wage=-1)

    def test_to_domain(self):
        country = CountryIn(
            code="GHA",
            name="Ghana",
            minimum_wage=60,
            brackets=[TaxBracketIn(threshold=500, rate=5)],
        ).to_domain()

        assert country.minimum_wage == 60
        assert country.tax_brackets[0].threshold == 500


class TestTaxBracketIn:
    @pytest.mark.parametrize("rate", [-1, 100.5])
    def test_rate_is_a_percentage(self, rate):
        with pytest.raises(ValidationError):
            TaxBracketIn(threshold=0, rate=rate)


class TestEmployeeIn:
    """Test employee intake."""

    def test_requires_basic_or_piece_rate(self):
        with pytest.raises(ValidationError, match="basic salary or piece-rate"):
            EmployeeIn(name="Ama", basic_salary=0, country_code="GHA")

    @pytest.mark.parametrize("rate, quantity", [(0, 5), (10, 0)])
    def test_zero_valued_piece_rate_is_no_income(self, rate, quantity):
        with pytest.raises(ValidationError, match="basic salary or piece-rate"):
            EmployeeIn(
                name="Ama",
                basic_salary=0,
                country_code="GHA",
                piece_rate=[PieceRateItemIn(item="bags", rate=rate, quantity=quantity)],
            )

    def test_piece_rate_only_accepted(self):
        employee = EmployeeIn(
            name="Ama",
            country_code="gha",
            piece_rate=[PieceRateItemIn(item="bags", rate=10, quantity=5)],
        )
        assert employee.country_code == "GHA"
        assert employee.to_domain().piece_rate[0].earnings == 50

    def test_non_numeric_salary_rejected(self):
        with pytest.raises(ValidationError):
            EmployeeIn(name="Ama", basic_salary="lots", country_code="GHA")

    @pytest.mark.parametrize("field", ["rate", "quantity"])
    def test_negative_piece_rate_rejected(self, field):
        values = {"item": "bags", "rate": 1, "quantity": 1, field: -1}
        with pytest.raises(ValidationError):
            PieceRateItemIn(**values)


class TestSplitConfigIn:
    def test_out_of_range_ratio_falls_back(self):
        config = SplitConfigIn(enabled=True, basic_salary_ratio=5).to_domain()
        assert config.basic_salary_ratio == 0.7

    def test_disabled_by_default(self):
        assert SplitConfigIn().to_domain().enabled is False


class TestPayrollRunRequest:
    """Test full run intake."""

    def test_valid_request(self):
        request = PayrollRunRequest.model_validate(run_request())

        assert list(request.country_map()) == ["GHA"]
        assert [t.name for t in request.tiers()] == ["Tier 1", "Tier 2", "Tier 3"]

    def test_unknown_country_code_rejected(self):
        payload = run_request(
            employees=[{"name": "Kofi", "basic_salary": 100, "country_code": "NGA"}]
        )
        with pytest.raises(ValidationError, match="Invalid country code 'NGA'"):
            PayrollRunRequest.model_validate(payload)

    def test_duplicate_country_codes_rejected(self):
        payload = run_request(
            countries=[
                {"code": "GHA", "name": "Ghana"},
                {"code": "gha", "name": "Ghana again"},
            ]
        )
        with pytest.raises(ValidationError, match="Duplicate country codes: GHA"):
            PayrollRunRequest.model_validate(payload)

    def test_requires_employees(self):
        with pytest.raises(ValidationError):
            PayrollRunRequest.model_validate(run_request(employees=[]))


class TestPayrollResultOut:
    def test_from_result(self, engine):
        request = PayrollRunRequest.model_validate(run_request())
        run = engine.resolve_batch(
            [e.to_domain() for e in request.employees],
            request.country_map(),
            request.split.to_domain(),
            request.tiers(),
        )

        out = PayrollResultOut.from_result(run.results[0])

        assert out.case == ResolutionCase.BONUS.value
        assert out.gross == pytest.approx(150)
        assert out.pension.contributions["Basic Salary"] == 100
        assert set(out.pension.tiers) == {"Tier 1", "Tier 2", "Tier 3"}
