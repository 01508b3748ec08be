"""Shared test fixtures."""

import pytest

from src.calculators.documents import DocumentAggregator
from src.calculators.income_tax import ProgressiveTaxCalculator
from src.calculators.payroll import PayrollEngine
from src.calculators.statutory import StatutoryDeductionCalculator
from src.calculators.tax_data import TaxTable, load_tax_table


def _make_table_data(**overrides: object) -> dict:  # type: ignore[type-arg]
    """A minimal valid tax table mapping, as it would appear in YAML."""
    data: dict[str, object] = {
        "brackets": [
            {"lower": "0", "upper": "10000", "rate": "0.10"},
            {"lower": "10000", "upper": "50000", "rate": "0.20"},
            {"lower": "50000", "upper": None, "rate": "0.40"},
        ],
        "rebates": {"primary": "500", "secondary": "200", "tertiary": "100"},
        "statutory": {"uif_rate": "0.01", "uif_monthly_cap": "177.12", "sdl_rate": "0.01"},
    }
    data.update(overrides)
    return data


@pytest.fixture
def table_data() -> dict:  # type: ignore[type-arg]
    return _make_table_data()


@pytest.fixture(scope="session")
def tax_table() -> TaxTable:
    """The shipped 2025-26 table from config/tax_tables.yaml."""
    return load_tax_table("2025-26")


@pytest.fixture
def tax_calculator(tax_table: TaxTable) -> ProgressiveTaxCalculator:
    return ProgressiveTaxCalculator(tax_table)


@pytest.fixture
def deductions(tax_table: TaxTable) -> StatutoryDeductionCalculator:
    return StatutoryDeductionCalculator(tax_table.statutory)


@pytest.fixture
def engine(tax_table: TaxTable) -> PayrollEngine:
    return PayrollEngine.from_table(tax_table)


@pytest.fixture
def aggregator() -> DocumentAggregator:
    return DocumentAggregator()
