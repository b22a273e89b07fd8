#!/usr/bin/env python
"""Payroll Run Example - Library-first demonstration.

Shows how to use the engine without the HTTP service or the CLI:
1. Validate a request file through the intake schemas
2. Build an explicit SplitConfig (no environment lookups)
3. Resolve the batch and print a payslip summary

Usage:
    python main.py [request.json] [--no-split]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from paye.api.schemas import PayrollRunRequest
from paye.calculators import PayrollEngine
from paye.config import SplitConfig


def print_payslips(run) -> None:
    for result in run.results:
        print(f"{result.employee_name} ({result.country_code}) [{result.case.value}]")
        print(f"  Basic:      {result.basic_salary:>12,.2f}")
        print(f"  Allowance:  {result.allowance:>12,.2f}")
        print(f"  Gross:      {result.gross:>12,.2f}")
        print(f"  Tax:        {result.tax:>12,.2f}")
        print(f"  Pension:    {result.pension_employee:>12,.2f}")
        print(f"  Net:        {result.net:>12,.2f}")
        for line in result.explanations:
            print(f"    - {line}")
        print()

    print(f"Total net: {run.total_net:,.2f}")


def main() -> int:
    parser = argparse.ArgumentParser(description="PayE library example")
    parser.add_argument(
        "request",
        nargs="?",
        default=str(Path(__file__).with_name("request.json")),
    )
    parser.add_argument("--no-split", action="store_true")
    args = parser.parse_args()

    request = PayrollRunRequest.model_validate(
        json.loads(Path(args.request).read_text(encoding="utf-8"))
    )
    split_config = (
        SplitConfig(enabled=False) if args.no_split else request.split.to_domain()
    )

    engine = PayrollEngine()
    run = engine.resolve_batch(
        [e.to_domain() for e in request.employees],
        request.country_map(),
        split_config,
        request.tiers(),
    )
    print_payslips(run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
