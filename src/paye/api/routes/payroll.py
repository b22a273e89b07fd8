"""Payroll resolution API endpoints."""

from fastapi import APIRouter, status

from paye.api.dependencies import Engine
from paye.api.schemas import (
    ErrorResponse,
    PayrollRunRequest,
    PayrollRunResponse,
    PensionOut,
    PensionQuoteRequest,
    TaxQuoteRequest,
    TaxQuoteResponse,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.post(
    "/resolve",
    response_model=PayrollRunResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def resolve_payroll(
    engine: Engine,
    payload: PayrollRunRequest,
) -> PayrollRunResponse:
    """Resolve gross, tax, pension and net pay for every employee."""
    run = engine.resolve_batch(
        [e.to_domain() for e in payload.employees],
        payload.country_map(),
        payload.split.to_domain(),
        payload.tiers(),
    )
    return PayrollRunResponse.from_run(run)


@router.post(
    "/tax",
    response_model=TaxQuoteResponse,
    status_code=status.HTTP_200_OK,
)
async def quote_tax(engine: Engine, payload: TaxQuoteRequest) -> TaxQuoteResponse:
    """Quote peak-bracket tax on a salary."""
    brackets = [b.to_domain() for b in payload.brackets]
    bracket = engine.tax_calculator.peak_bracket(payload.salary, brackets)
    return TaxQuoteResponse(
        salary=payload.salary,
        tax=engine.tax_calculator.compute(payload.salary, brackets),
        applied_bracket=(
            {"threshold": bracket.threshold, "rate": bracket.rate} if bracket else None
        ),
    )


@router.post(
    "/pension",
    response_model=PensionOut,
    status_code=status.HTTP_200_OK,
)
async def quote_pension(engine: Engine, payload: PensionQuoteRequest) -> PensionOut:
    """Quote pension contributions on a basic salary."""
    pension = engine.pension_calculator.compute(
        payload.basic_salary, [t.to_domain() for t in payload.tiers]
    )
    return PensionOut.from_breakdown(pension)
