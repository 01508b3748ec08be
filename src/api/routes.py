"""API routes for the monetary calculators."""

import logging

from fastapi import APIRouter, Request

from src.api.models import (
    BracketOut,
    BracketTaxOut,
    DocumentTotalsOut,
    DocumentTotalsRequest,
    EmployeeIn,
    IncomeTaxOut,
    IncomeTaxRequest,
    PayrollBatchOut,
    PayrollBatchRequest,
    PayrollFailureOut,
    PayrollOut,
    PayrollSummaryOut,
    TaxTableOut,
)
from src.calculators.documents import DocumentAggregator
from src.calculators.line_items import LineItem
from src.calculators.payroll import Employee, PayrollEngine, PayrollResult
from src.calculators.tax_data import TaxTable

logger = logging.getLogger(__name__)

router = APIRouter()


def _employee(body: EmployeeIn) -> Employee:
    return Employee(
        payment_type=body.payment_type,
        hours_worked=body.hours_worked,
        hourly_rate=body.hourly_rate,
        base_salary=body.base_salary,
        employee_id=body.employee_id,
    )


def _payroll_out(result: PayrollResult) -> PayrollOut:
    return PayrollOut(**result._asdict())


@router.get("/health")
async def health(request: Request) -> dict:  # type: ignore[type-arg]
    """Health check endpoint with the active tax year."""
    result: dict[str, object] = {"status": "ok"}
    table = getattr(request.app.state, "tax_table", None)
    if table is not None:
        result["tax_year"] = table.tax_year
    return result


@router.get("/tax-table", response_model=TaxTableOut)
async def tax_table(request: Request) -> TaxTableOut:
    """Return the brackets, rebates and levy rates in force."""
    table: TaxTable = request.app.state.tax_table
    return TaxTableOut(
        tax_year=table.tax_year,
        brackets=[BracketOut(**b._asdict()) for b in table.brackets],
        rebates=table.rebates._asdict(),
        statutory=table.statutory._asdict(),
    )


@router.post("/tax/income", response_model=IncomeTaxOut)
async def income_tax(body: IncomeTaxRequest, request: Request) -> IncomeTaxOut:
    """Annual income tax with a bracket-by-bracket breakdown."""
    engine: PayrollEngine = request.app.state.payroll_engine
    calculator = engine.tax
    rows = calculator.breakdown(body.annual_income)
    return IncomeTaxOut(
        tax_year=calculator.table.tax_year,
        annual_income=body.annual_income,
        tax_before_rebate=calculator.tax_before_rebate(body.annual_income),
        rebate=calculator.table.rebates.for_age(body.age),
        annual_tax=calculator.annual_tax(body.annual_income, body.age),
        monthly_paye=calculator.monthly_paye(body.annual_income, body.age),
        effective_rate=calculator.effective_rate(body.annual_income, body.age),
        breakdown=[
            BracketTaxOut(
                **row.bracket._asdict(), taxable_amount=row.taxable_amount, tax=row.tax
            )
            for row in rows
        ],
    )


@router.post("/payroll", response_model=PayrollOut)
async def payroll(body: EmployeeIn, request: Request) -> PayrollOut:
    """Monthly payroll for a single employee."""
    engine: PayrollEngine = request.app.state.payroll_engine
    return _payroll_out(engine.compute(_employee(body)))


@router.post("/payroll/batch", response_model=PayrollBatchOut)
async def payroll_batch(body: PayrollBatchRequest, request: Request) -> PayrollBatchOut:
    """Monthly payroll for many employees; invalid entries are reported, not fatal."""
    engine: PayrollEngine = request.app.state.payroll_engine
    batch = engine.compute_batch([_employee(e) for e in body.employees])
    return PayrollBatchOut(
        results=[_payroll_out(r) for r in batch.results],
        failures=[PayrollFailureOut(**f._asdict()) for f in batch.failures],
        summary=PayrollSummaryOut(**batch.summary._asdict()),
    )


@router.post("/documents/totals", response_model=DocumentTotalsOut)
async def document_totals(body: DocumentTotalsRequest, request: Request) -> DocumentTotalsOut:
    """Subtotal, tax and total for an invoice, quotation or purchase order."""
    aggregator: DocumentAggregator = request.app.state.document_aggregator
    lines = [LineItem(line.quantity, line.unit_price, line.tax_rate) for line in body.lines]
    totals = aggregator.aggregate(lines, require_lines=body.require_lines)
    return DocumentTotalsOut(
        **totals._asdict(),
        line_totals=aggregator.line_totals(lines),
        rounding_difference=aggregator.rounding_difference(lines, totals),
    )
