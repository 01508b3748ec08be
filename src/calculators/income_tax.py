"""Income tax calculator — progressive brackets less age rebate."""

import logging
from decimal import Decimal
from typing import NamedTuple

from src.calculators.money import ZERO, non_negative, round2
from src.calculators.tax_data import TaxBracket, TaxTable

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


class BracketTax(NamedTuple):
    """Tax attributed to one bracket, before rebates."""

    bracket: TaxBracket
    taxable_amount: Decimal
    tax: Decimal


class ProgressiveTaxCalculator:
    """Annual income tax and monthly PAYE from a validated tax table."""

    def __init__(self, table: TaxTable) -> None:
        self.table = table

    def breakdown(self, income: Decimal) -> list[BracketTax]:
        """Walk the brackets and return the tax attributed to each.

        Income exactly on a boundary belongs to the lower bracket: the walk
        stops once ``income <= bracket.upper``.
        """
        income = non_negative(income, "annual_income")
        rows: list[BracketTax] = []

        for bracket in self.table.brackets:
            if income > bracket.lower:
                upper = bracket.upper if bracket.upper is not None else income
                taxable = min(income - bracket.lower, upper - bracket.lower)
                rows.append(BracketTax(bracket, taxable, taxable * bracket.rate))
            if bracket.upper is None or income <= bracket.upper:
                break

        return rows

    def tax_before_rebate(self, income: Decimal) -> Decimal:
        return sum((row.tax for row in self.breakdown(income)), ZERO)

    def annual_tax(self, income: Decimal, age: int | None = None) -> Decimal:
        """Annual tax after rebate, floored at zero.

        The result is not rounded; ``monthly_paye`` rounds once.

        Args:
            income: Gross annual income (must be >= 0).
            age: Taxpayer age for the rebate band. None uses the primary rebate.
        """
        rebate = self.table.rebates.for_age(age)
        tax = self.tax_before_rebate(income)
        return max(ZERO, tax - rebate)

    def monthly_paye(self, annual_income: Decimal, age: int | None = None) -> Decimal:
        """Monthly PAYE: annual tax / 12, rounded half-up to cents."""
        paye = round2(self.annual_tax(annual_income, age) / MONTHS_PER_YEAR)
        logger.debug("PAYE on annual income %s: %s", annual_income, paye)
        return paye

    def effective_rate(self, income: Decimal, age: int | None = None) -> Decimal:
        """Annual tax as a percentage of income, to two places."""
        income = non_negative(income, "annual_income")
        if income == 0:
            return ZERO
        return round2(self.annual_tax(income, age) / income * 100)
