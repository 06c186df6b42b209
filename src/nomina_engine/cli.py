"""Nomina Command Line Interface.

Runs the engine over a JSON snapshot without a database:
- Monthly payroll calculation
- Tenure (worked_days_total) recomputation

Usage:
    python -m nomina_engine.cli calculate --input snapshot.json --month 2024-03
    python -m nomina_engine.cli calculate --input snapshot.json --month 2024-03 --as-of 2024-03-31 --output run.json
    python -m nomina_engine.cli tenure --input snapshot.json --now 2024-03-15T12:00:00Z

The snapshot is an object with ``employees``, ``novelties``, ``advances`` and
an optional ``rates`` object, each row in the shape ``to_dict`` produces.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

from pydantic import BaseModel, ValidationError

from nomina_engine.api.schemas import (
    AdvanceCreate,
    EmployeeCreate,
    NoveltyCreate,
    RatesSchema,
)
from nomina_engine.calculators.dates import InvalidMonthError, compute_tenure_days
from nomina_engine.calculators.engine import PayrollEngine
from nomina_engine.calculators.types import (
    AdvancePayment,
    DeductionRates,
    Employee,
    Novelty,
)
from nomina_engine.config import get_settings

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read as payroll inputs."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def parse_datetime(s: str) -> datetime:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def parse_date(s: str) -> date:
    return date.fromisoformat(s)


def load_snapshot(
    path: str,
) -> tuple[list[Employee], list[Novelty], list[AdvancePayment], DeductionRates]:
    """Read employees, novelties, advances and rates from a JSON file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SnapshotError(path, str(e)) from e
    if not isinstance(data, dict):
        raise SnapshotError(path, "top level must be an object")

    employee_rows = _checked_rows(path, data, "employees", EmployeeCreate)
    novelty_rows = _checked_rows(path, data, "novelties", NoveltyCreate)
    advance_rows = _checked_rows(path, data, "advances", AdvanceCreate)
    rates_row = data.get("rates") or {}
    try:
        RatesSchema.model_validate(rates_row)
    except ValidationError as e:
        raise SnapshotError(path, f"rates: {_first_error(e)}") from e

    try:
        employees = [Employee.from_dict(row) for row in employee_rows]
        novelties = [Novelty.from_dict(row) for row in novelty_rows]
        advances = [AdvancePayment.from_dict(row) for row in advance_rows]
    except KeyError as e:
        raise SnapshotError(path, f"row without {e}") from e
    return employees, novelties, advances, DeductionRates.from_dict(rates_row)


def _checked_rows(
    path: str, data: dict[str, Any], key: str, schema: type[BaseModel]
) -> list[dict[str, Any]]:
    """Rows under ``key``, each validated against the API input schema."""
    rows = data.get(key) or []
    if not isinstance(rows, list):
        raise SnapshotError(path, f"{key} must be a list")
    for index, row in enumerate(rows):
        try:
            schema.model_validate(row)
        except ValidationError as e:
            raise SnapshotError(path, f"{key}[{index}]: {_first_error(e)}") from e
    return rows


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


class NominaCli:
    """Nomina Command Line Interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m nomina_engine.cli",
            description="Colombian payroll tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # calculate command
        calculate = subparsers.add_parser(
            "calculate",
            help="Calculate one month's payroll from a snapshot",
        )
        calculate.add_argument(
            "--input",
            type=str,
            required=True,
            help="Snapshot file path (.json)",
        )
        calculate.add_argument(
            "--month",
            type=str,
            required=True,
            help="Target month (YYYY-MM)",
        )
        calculate.add_argument(
            "--as-of",
            type=parse_date,
            help="Calculation date used in calculation ids (default: month end)",
        )
        calculate.add_argument(
            "--output",
            type=str,
            help="Write the run to this file instead of stdout",
        )

        # tenure command
        tenure = subparsers.add_parser(
            "tenure",
            help="Recompute worked_days_total for every employee",
        )
        tenure.add_argument(
            "--input",
            type=str,
            required=True,
            help="Snapshot file path (.json)",
        )
        tenure.add_argument(
            "--now",
            type=parse_datetime,
            help="Reference instant (ISO format, default: current time)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        handlers: dict[str, Callable[..., int]] = {
            "calculate": self._cmd_calculate,
            "tenure": self._cmd_tenure,
        }

        try:
            return handlers[parsed.command](parsed)
        except (SnapshotError, InvalidMonthError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Calculate a month and emit the run as JSON."""
        employees, novelties, advances, rates = load_snapshot(args.input)
        engine = PayrollEngine(rates, engine_version=get_settings().engine_version)
        run = engine.calculate_run(employees, novelties, advances, args.month, args.as_of)
        self._emit(run.to_dict(), args.output)

        if args.output:
            print(
                f"Wrote payroll for {run.month}: {run.employee_count} employees, "
                f"net total {run.total_net}",
                file=sys.stderr,
            )
        return 0

    def _cmd_tenure(self, args: argparse.Namespace) -> int:
        """Emit each employee with a recomputed worked_days_total."""
        employees, _, _, _ = load_snapshot(args.input)
        refreshed = [
            replace(e, worked_days_total=compute_tenure_days(e.created_date, args.now))
            if e.created_date is not None
            else e
            for e in employees
        ]
        self._emit(
            {
                "employees": [
                    {"id": e.id, "name": e.name, "worked_days_total": e.worked_days_total}
                    for e in refreshed
                ]
            },
            None,
        )
        return 0

    @staticmethod
    def _emit(payload: dict[str, Any], output: str | None) -> None:
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        if output:
            Path(output).write_text(text + "\n", encoding="utf-8")
        else:
            print(text)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    cli = NominaCli()
    return cli.run(argv)


if __name__ == "__main__":
    sys.exit(main())
