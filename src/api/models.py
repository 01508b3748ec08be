"""Pydantic models for API request and response bodies."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

# --- Requests ---


class EmployeeIn(BaseModel):
    """Employment terms as captured by the employee form."""

    employee_id: str | None = None
    payment_type: Literal["salary", "hourly"]
    base_salary: Decimal | None = None
    hours_worked: Decimal = Decimal("0")
    hourly_rate: Decimal = Decimal("0")


class PayrollBatchRequest(BaseModel):
    """Request body for /payroll/batch."""

    employees: list[EmployeeIn]


class IncomeTaxRequest(BaseModel):
    """Request body for /tax/income."""

    annual_income: Decimal
    age: int | None = None


class LineItemIn(BaseModel):
    """One document line. Tax rate is a ratio, e.g. 0.15."""

    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("0")


class DocumentTotalsRequest(BaseModel):
    """Request body for /documents/totals."""

    lines: list[LineItemIn] = Field(default_factory=list)
    require_lines: bool = False


# --- Responses ---


class PayrollOut(BaseModel):
    """Monthly payroll figures for one employee."""

    employee_id: str | None = None
    gross_salary: Decimal
    paye: Decimal
    uif: Decimal
    sdl: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    employer_sdl: Decimal


class PayrollFailureOut(BaseModel):
    index: int
    employee_id: str | None = None
    field: str
    message: str


class PayrollSummaryOut(BaseModel):
    employee_count: int
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
    total_employer_sdl: Decimal


class PayrollBatchOut(BaseModel):
    """Per-employee results, rejected entries, and totals."""

    results: list[PayrollOut]
    failures: list[PayrollFailureOut]
    summary: PayrollSummaryOut


class BracketOut(BaseModel):
    lower: Decimal
    upper: Decimal | None = None
    rate: Decimal


class BracketTaxOut(BracketOut):
    taxable_amount: Decimal
    tax: Decimal


class IncomeTaxOut(BaseModel):
    """Annual tax, monthly PAYE and per-bracket breakdown."""

    tax_year: str
    annual_income: Decimal
    tax_before_rebate: Decimal
    rebate: Decimal
    annual_tax: Decimal
    monthly_paye: Decimal
    effective_rate: Decimal
    breakdown: list[BracketTaxOut]


class TaxTableOut(BaseModel):
    tax_year: str
    brackets: list[BracketOut]
    rebates: dict[str, Decimal]
    statutory: dict[str, Decimal]


class DocumentTotalsOut(BaseModel):
    """Document totals plus the legacy per-line figures."""

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal
    line_totals: list[Decimal]
    rounding_difference: Decimal


class ErrorOut(BaseModel):
    error: str
    field: str | None = None
