"""CLI script for running monthly payroll over a file of employees.

Usage:
    # Employees as a JSON list (or {"employees": [...]})
    python scripts/run_payroll.py employees.json

    # A specific tax year, JSON output
    python scripts/run_payroll.py employees.json --tax-year 2024-25 --json

    # Show the tax years available in config/tax_tables.yaml
    python scripts/run_payroll.py --list-years
"""

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from config.settings import settings
from src.api.models import EmployeeIn
from src.calculators.payroll import Employee, PayrollBatch, PayrollEngine
from src.calculators.tax_data import available_tax_years, load_tax_table

logger = logging.getLogger(__name__)

_EMPLOYEES = TypeAdapter(list[EmployeeIn])


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute monthly payroll for a set of employees")
    parser.add_argument("employees", nargs="?", type=Path, help="JSON file of employees")
    parser.add_argument("--tax-year", help="Tax year key, e.g. 2025-26")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--list-years", action="store_true", help="List available tax years")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser.parse_args()


def load_employees(path: Path) -> list[Employee]:
    """Read employees from JSON, keeping numbers as Decimal."""
    data = json.loads(path.read_text(), parse_float=Decimal)
    if isinstance(data, dict):
        data = data.get("employees", [])
    return [
        Employee(
            payment_type=e.payment_type,
            hours_worked=e.hours_worked,
            hourly_rate=e.hourly_rate,
            base_salary=e.base_salary,
            employee_id=e.employee_id,
        )
        for e in _EMPLOYEES.validate_python(data)
    ]


def print_report(batch: PayrollBatch, tax_year: str) -> None:
    print(f"Payroll — tax year {tax_year}")
    print(f"{'Employee':<16}{'Gross':>14}{'PAYE':>12}{'UIF':>10}{'Net':>14}")
    for r in batch.results:
        print(
            f"{r.employee_id or '-':<16}{r.gross_salary:>14}{r.paye:>12}"
            f"{r.uif:>10}{r.net_salary:>14}"
        )
    for f in batch.failures:
        print(f"{f.employee_id or f'#{f.index}':<16}REJECTED {f.field}: {f.message}")

    s = batch.summary
    print(
        f"\n{s.employee_count} employees  gross {s.total_gross}  "
        f"deductions {s.total_deductions}  net {s.total_net}  "
        f"employer SDL {s.total_employer_sdl}"
    )


def main() -> None:
    args = parse_args()

    log_level = logging.DEBUG if args.verbose else settings.log_level
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.list_years:
        print("\n".join(available_tax_years()))
        return

    if args.employees is None:
        sys.exit("employees file is required")

    table = load_tax_table(args.tax_year)
    engine = PayrollEngine.from_table(table)

    try:
        employees = load_employees(args.employees)
    except (OSError, json.JSONDecodeError, SchemaError) as exc:
        logger.error("Cannot read employees from %s: %s", args.employees, exc)
        sys.exit(2)

    batch = engine.compute_batch(employees)

    if args.json:
        payload = {
            "tax_year": table.tax_year,
            "results": [r._asdict() for r in batch.results],
            "failures": [f._asdict() for f in batch.failures],
            "summary": batch.summary._asdict(),
        }
        print(json.dumps(payload, indent=2, default=str))
    else:
        print_report(batch, table.tax_year)

    if batch.failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
