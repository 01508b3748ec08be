"""Document totals — subtotal, tax and grand total over line items.

Subtotal and tax are summed from unrounded line products and rounded once
at document level. Summing already-rounded line totals can drift by a cent
or more on long documents; ``rounding_difference`` reports that gap for
callers reconciling against totals stored the old way.
"""

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import NamedTuple

from src.calculators.errors import EmptyDocumentError
from src.calculators.line_items import LineItem, LineItemCalculator
from src.calculators.money import ZERO, round2

logger = logging.getLogger(__name__)


class DocumentTotals(NamedTuple):
    """Derived totals for one invoice, quotation or purchase order."""

    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


class DocumentAggregator:
    """Aggregate line items into document totals."""

    def __init__(self, line_calculator: LineItemCalculator | None = None) -> None:
        self.line_calculator = line_calculator or LineItemCalculator()

    def aggregate(
        self,
        lines: Sequence[LineItem],
        require_lines: bool = False,
    ) -> DocumentTotals:
        """Compute totals for ``lines``.

        Args:
            lines: Validated line items, in document order.
            require_lines: Raise EmptyDocumentError when ``lines`` is empty.
                Otherwise an empty document totals to zero.
        """
        if not lines and require_lines:
            raise EmptyDocumentError()

        net = sum((line.net_amount for line in lines), ZERO)
        tax = sum((line.tax_portion for line in lines), ZERO)

        subtotal = round2(net, "subtotal")
        tax_amount = round2(tax, "tax_amount")
        totals = DocumentTotals(
            subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount
        )
        logger.debug("Aggregated %d lines: %s", len(lines), totals)
        return totals

    def line_totals(self, lines: Sequence[LineItem]) -> list[Decimal]:
        return [
            self.line_calculator.line_total(line.quantity, line.unit_price, line.tax_rate)
            for line in lines
        ]

    def rounding_difference(self, lines: Sequence[LineItem], totals: DocumentTotals) -> Decimal:
        """``totals.total`` minus the sum of per-line rounded totals."""
        return totals.total - sum(self.line_totals(lines), round2(ZERO))
