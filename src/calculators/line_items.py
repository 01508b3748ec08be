"""Commercial line item totals for invoices, quotations and purchase orders."""

from dataclasses import dataclass
from decimal import Decimal

from src.calculators.money import ONE, non_negative, ratio, round2


def line_total(quantity: Decimal, unit_price: Decimal, tax_rate: Decimal) -> Decimal:
    """Tax-inclusive line total: ``round2(quantity * unit_price * (1 + tax_rate))``.

    Args:
        quantity: Units on the line (must be >= 0).
        unit_price: Price or cost per unit, excluding tax (must be >= 0).
        tax_rate: Decimal ratio in [0, 1], e.g. ``Decimal("0.15")`` for 15% VAT.

    Raises:
        ValidationError: if any input is out of range or not a Decimal/int.
    """
    quantity = non_negative(quantity, "quantity")
    unit_price = non_negative(unit_price, "unit_price")
    tax_rate = ratio(tax_rate, "tax_rate")
    return round2(quantity * unit_price * (ONE + tax_rate))


@dataclass(frozen=True)
class LineItem:
    """One document line. ``line_total`` is derived, never stored."""

    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal

    def __post_init__(self) -> None:
        # Normalise ints to Decimal on the frozen instance.
        object.__setattr__(self, "quantity", non_negative(self.quantity, "quantity"))
        object.__setattr__(self, "unit_price", non_negative(self.unit_price, "unit_price"))
        object.__setattr__(self, "tax_rate", ratio(self.tax_rate, "tax_rate"))

    @property
    def net_amount(self) -> Decimal:
        """Unrounded quantity * unit_price."""
        return self.quantity * self.unit_price

    @property
    def tax_portion(self) -> Decimal:
        """Unrounded tax on the line."""
        return self.net_amount * self.tax_rate

    @property
    def line_total(self) -> Decimal:
        return line_total(self.quantity, self.unit_price, self.tax_rate)


class LineItemCalculator:
    """Stateless wrapper over ``line_total`` for callers that inject calculators."""

    def line_total(self, quantity: Decimal, unit_price: Decimal, tax_rate: Decimal) -> Decimal:
        return line_total(quantity, unit_price, tax_rate)

    def build(self, quantity: Decimal, unit_price: Decimal, tax_rate: Decimal) -> LineItem:
        return LineItem(quantity, unit_price, tax_rate)
