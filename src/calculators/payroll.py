"""Payroll calculator — composites gross pay, PAYE, UIF and SDL."""

import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from src.calculators.errors import ValidationError
from src.calculators.income_tax import MONTHS_PER_YEAR, ProgressiveTaxCalculator
from src.calculators.money import ZERO, non_negative, round2
from src.calculators.statutory import StatutoryDeductionCalculator
from src.calculators.tax_data import TaxTable

logger = logging.getLogger(__name__)


class PaymentType(str, Enum):
    """How an employee's gross pay is derived."""

    SALARY = "salary"
    HOURLY = "hourly"


class Employee(NamedTuple):
    """Employment terms consumed by the payroll engine.

    ``base_salary`` is the annual salary and is only read for salaried
    employees.
    """

    payment_type: PaymentType | str
    hours_worked: Decimal
    hourly_rate: Decimal
    base_salary: Decimal | None = None
    employee_id: str | None = None


class TimeEntry(NamedTuple):
    """A logged block of hours awaiting or holding approval."""

    hours_worked: Decimal
    approved: bool = False


class PayrollResult(NamedTuple):
    """Monthly payroll figures for one employee."""

    gross_salary: Decimal
    paye: Decimal
    uif: Decimal
    sdl: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    employer_sdl: Decimal = ZERO  # employer cost, not deducted
    employee_id: str | None = None


class PayrollFailure(NamedTuple):
    """A batch entry that failed validation."""

    index: int
    employee_id: str | None
    field: str
    message: str


class PayrollSummary(NamedTuple):
    """Totals across a set of payroll results."""

    employee_count: int
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
    total_employer_sdl: Decimal


class PayrollBatch(NamedTuple):
    """Outcome of running payroll for many employees."""

    results: list[PayrollResult]
    failures: list[PayrollFailure]

    @property
    def summary(self) -> PayrollSummary:
        return summarize(self.results)


def approved_hours(entries: Iterable[TimeEntry]) -> Decimal:
    """Sum the hours of approved time entries."""
    total = ZERO
    for entry in entries:
        hours = non_negative(entry.hours_worked, "hours_worked")
        if entry.approved:
            total += hours
    return total


def summarize(results: Iterable[PayrollResult]) -> PayrollSummary:
    """Aggregate payroll results into dashboard totals."""
    count = 0
    gross = deductions = net = employer_sdl = round2(ZERO)
    for result in results:
        count += 1
        gross += result.gross_salary
        deductions += result.total_deductions
        net += result.net_salary
        employer_sdl += result.employer_sdl
    return PayrollSummary(
        employee_count=count,
        total_gross=gross,
        total_deductions=deductions,
        total_net=net,
        total_employer_sdl=employer_sdl,
    )


class PayrollEngine:
    """Monthly payroll for a single tax year.

    Pipeline per employee:
    1) Derive monthly gross from the payment type
    2) Annualise and compute PAYE
    3) Compute UIF and SDL on monthly gross
    4) Net = gross - (PAYE + UIF + SDL)

    Net pay is never clamped: when deductions exceed gross the negative
    figure is returned for the caller to surface.
    """

    def __init__(
        self,
        tax: ProgressiveTaxCalculator,
        deductions: StatutoryDeductionCalculator,
    ) -> None:
        self.tax = tax
        self.deductions = deductions

    @classmethod
    def from_table(cls, table: TaxTable) -> "PayrollEngine":
        return cls(ProgressiveTaxCalculator(table), StatutoryDeductionCalculator(table.statutory))

    def gross_salary(self, employee: Employee) -> Decimal:
        """Monthly gross pay, rounded to cents."""
        try:
            payment_type = PaymentType(employee.payment_type)
        except ValueError:
            raise ValidationError(
                "payment_type", f"unknown payment type {employee.payment_type!r}"
            ) from None

        hours = non_negative(employee.hours_worked, "hours_worked")
        rate = non_negative(employee.hourly_rate, "hourly_rate")

        if payment_type is PaymentType.SALARY:
            if employee.base_salary is None:
                raise ValidationError("base_salary", "required for salaried employees")
            base_salary = non_negative(employee.base_salary, "base_salary")
            return round2(base_salary / MONTHS_PER_YEAR)

        return round2(hours * rate)

    def compute(self, employee: Employee) -> PayrollResult:
        gross = self.gross_salary(employee)
        annual_salary = gross * MONTHS_PER_YEAR

        paye = self.tax.monthly_paye(annual_salary)
        uif = self.deductions.uif(gross)
        sdl = self.deductions.sdl(gross)

        total_deductions = paye + uif + sdl
        result = PayrollResult(
            gross_salary=gross,
            paye=paye,
            uif=uif,
            sdl=sdl,
            total_deductions=total_deductions,
            net_salary=gross - total_deductions,
            employer_sdl=self.deductions.employer_sdl(gross),
            employee_id=employee.employee_id,
        )
        logger.debug(
            "Payroll employee=%s gross=%s net=%s",
            employee.employee_id,
            result.gross_salary,
            result.net_salary,
        )
        return result

    def compute_batch(self, employees: Sequence[Employee]) -> PayrollBatch:
        """Compute payroll for each employee independently.

        A validation failure is recorded against its index and does not stop
        the remaining employees. Results keep input order.
        """
        results: list[PayrollResult] = []
        failures: list[PayrollFailure] = []

        for index, employee in enumerate(employees):
            try:
                results.append(self.compute(employee))
            except ValidationError as exc:
                logger.warning(
                    "Rejected employee %s (index %d): %s", employee.employee_id, index, exc
                )
                failures.append(
                    PayrollFailure(index, employee.employee_id, exc.field, exc.message)
                )

        logger.info("Payroll batch: %d computed, %d rejected", len(results), len(failures))
        return PayrollBatch(results=results, failures=failures)
