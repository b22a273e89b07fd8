"""PayE Command Line Interface.

Provides batch tools for:
- Resolving a payroll run from a JSON request file
- Quoting peak-bracket tax on a salary
- Quoting pension contributions on a basic salary

Usage:
    paye resolve --input run.json [--output results.json] [--split | --no-split] [--ratio 0.7]
    paye tax --salary 1200 --bracket 500:5 --bracket 1000:10
    paye pension --basic 1000 [--tier "Tier 1:0.135" ...]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from paye.api.schemas import (
    PayrollRunRequest,
    PayrollRunResponse,
    PensionOut,
    TaxQuoteResponse,
)
from paye.calculators.engine import PayrollEngine, UnknownCountryError
from paye.calculators.pension_calculator import DEFAULT_TIERS
from paye.calculators.types import PensionTier, TaxBracket
from paye.config import SplitConfig, configure_logging, get_settings

logger = logging.getLogger(__name__)


def parse_bracket(s: str) -> TaxBracket:
    """Parse THRESHOLD:RATE into a tax bracket."""
    threshold, sep, rate = s.partition(":")
    try:
        if not sep:
            raise ValueError(s)
        return TaxBracket(threshold=float(threshold), rate=float(rate))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid bracket '{s}', expected THRESHOLD:RATE"
        ) from None


def parse_tier(s: str) -> PensionTier:
    """Parse NAME:PERCENTAGE into a pension tier."""
    name, sep, percentage = s.rpartition(":")
    try:
        if not sep or not name:
            raise ValueError(s)
        return PensionTier(name=name, percentage=float(percentage))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid tier '{s}', expected NAME:PERCENTAGE"
        ) from None


class PayECli:
    """PayE Command Line Interface."""

    def __init__(self, engine: PayrollEngine | None = None) -> None:
        self.parser = self._build_parser()
        self.engine = engine or PayrollEngine()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="paye",
            description="Payroll resolution tools",
        )
        parser.add_argument(
            "--log-level",
            type=str,
            default=None,
            help="Log level (default: $LOG_LEVEL or INFO)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # resolve command
        resolve = subparsers.add_parser(
            "resolve",
            help="Resolve a payroll run from a JSON request",
        )
        resolve.add_argument(
            "--input",
            type=str,
            required=True,
            help="Request file path, or '-' for stdin",
        )
        resolve.add_argument(
            "--output",
            type=str,
            help="Write results to this file instead of stdout",
        )
        resolve.add_argument(
            "--split",
            dest="split",
            action="store_true",
            default=None,
            help="Enable salary splitting",
        )
        resolve.add_argument(
            "--no-split",
            dest="split",
            action="store_false",
            help="Disable salary splitting",
        )
        resolve.add_argument(
            "--ratio",
            type=float,
            help="Basic salary ratio when splitting (default: 0.7)",
        )

        # tax command
        tax = subparsers.add_parser(
            "tax",
            help="Quote peak-bracket tax on a salary",
        )
        tax.add_argument(
            "--salary",
            type=float,
            required=True,
            help="Salary to tax",
        )
        tax.add_argument(
            "--bracket",
            type=parse_bracket,
            action="append",
            default=[],
            help="Tax bracket as THRESHOLD:RATE (repeatable)",
        )

        # pension command
        pension = subparsers.add_parser(
            "pension",
            help="Quote pension contributions on a basic salary",
        )
        pension.add_argument(
            "--basic",
            type=float,
            required=True,
            help="Basic salary",
        )
        pension.add_argument(
            "--tier",
            type=parse_tier,
            action="append",
            help="Pension tier as NAME:PERCENTAGE (repeatable, default: three-tier scheme)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)
        configure_logging(parsed.log_level or get_settings().log_level)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "resolve": self._cmd_resolve,
            "tax": self._cmd_tax,
            "pension": self._cmd_pension,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_resolve(self, args: argparse.Namespace) -> int:
        """Resolve every employee in a request file."""
        try:
            payload = self._load_request(args.input)
            request = PayrollRunRequest.model_validate(payload)
        except (OSError, json.JSONDecodeError) as e:
            print(f"ERROR: cannot read {args.input}: {e}", file=sys.stderr)
            return 1
        except ValidationError as e:
            print(f"ERROR: invalid payroll request\n{e}", file=sys.stderr)
            return 1

        split_config = self._split_config(payload, request, args)

        try:
            run = self.engine.resolve_batch(
                [e.to_domain() for e in request.employees],
                request.country_map(),
                split_config,
                request.tiers(),
            )
        except UnknownCountryError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

        self._emit(PayrollRunResponse.from_run(run).model_dump(mode="json"), args.output)
        return 0

    def _cmd_tax(self, args: argparse.Namespace) -> int:
        """Quote tax on a salary."""
        calculator = self.engine.tax_calculator
        bracket = calculator.peak_bracket(args.salary, args.bracket)
        quote = TaxQuoteResponse(
            salary=args.salary,
            tax=calculator.compute(args.salary, args.bracket),
            applied_bracket=(
                {"threshold": bracket.threshold, "rate": bracket.rate}
                if bracket
                else None
            ),
        )
        self._emit(quote.model_dump(mode="json"))
        return 0

    def _cmd_pension(self, args: argparse.Namespace) -> int:
        """Quote pension contributions."""
        tiers = args.tier or list(DEFAULT_TIERS)
        pension = self.engine.pension_calculator.compute(args.basic, tiers)
        self._emit(PensionOut.from_breakdown(pension).model_dump(mode="json"))
        return 0

    @staticmethod
    def _load_request(source: str) -> Any:
        if source == "-":
            return json.load(sys.stdin)
        with open(source, encoding="utf-8") as f:
            return json.load(f)

    @staticmethod
    def _split_config(
        payload: Any, request: PayrollRunRequest, args: argparse.Namespace
    ) -> SplitConfig:
        """Pick the split config: command line, then request, then environment."""
        if isinstance(payload, dict) and "split" in payload:
            config = request.split.to_domain()
        else:
            config = get_settings().split_config()

        if args.split is None and args.ratio is None:
            return config

        enabled = config.enabled if args.split is None else args.split
        ratio = config.basic_salary_ratio if args.ratio is None else args.ratio
        return SplitConfig.from_ratio(enabled, ratio)

    @staticmethod
    def _emit(data: dict[str, Any], output: str | None = None) -> None:
        text = json.dumps(data, indent=2)
        if output:
            Path(output).write_text(text + "\n", encoding="utf-8")
            logger.info("Wrote results to %s", output)
        else:
            print(text)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    cli = PayECli()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
