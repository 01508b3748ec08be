"""UIF and SDL levy calculator."""

from decimal import Decimal

from src.calculators.money import ZERO, non_negative, round2
from src.calculators.tax_data import StatutoryRates


class StatutoryDeductionCalculator:
    """Capped proportional payroll levies.

    UIF is charged on monthly salary up to a monthly contribution cap. SDL is
    an employer levy: the employee-side figure is always zero, and the
    employer cost is reported separately by ``employer_sdl``.
    """

    def __init__(self, rates: StatutoryRates) -> None:
        self.rates = rates

    def uif(self, monthly_salary: Decimal) -> Decimal:
        salary = non_negative(monthly_salary, "monthly_salary")
        contribution = min(salary * self.rates.uif_rate, self.rates.uif_monthly_cap)
        return round2(contribution)

    def sdl(self, monthly_salary: Decimal) -> Decimal:
        non_negative(monthly_salary, "monthly_salary")
        return round2(ZERO)

    def employer_sdl(self, monthly_salary: Decimal) -> Decimal:
        salary = non_negative(monthly_salary, "monthly_salary")
        return round2(salary * self.rates.sdl_rate)
