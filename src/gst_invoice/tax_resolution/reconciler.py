"""Back-calculation of pre-tax rate and tax from a tax-inclusive price."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .catalog import NO_TAX, TaxCatalog
from .line_item import LineItem


@dataclass(frozen=True)
class PriceBreakdown:
    """Unrounded amounts for one line."""

    pre_tax_unit_rate: float
    unit_tax_amount: float
    line_tax_amount: float
    line_subtotal: float

    @property
    def line_total(self) -> float:
        """Tax-inclusive total for the line."""
        return self.line_subtotal + self.line_tax_amount


def back_calculate(final_unit_price: float, tax_percent: float, quantity: float) -> PriceBreakdown:
    """
    Split a tax-inclusive unit price into pre-tax rate and tax.

    pre_tax = final / (1 + R/100), tax = final - pre_tax. Nothing is rounded
    here; rounding to currency happens only when amounts are shown or sent.

    Args:
        final_unit_price: Tax-inclusive price of one unit
        tax_percent: Tax rate in percent (18 for 18%)
        quantity: Number of units

    Returns:
        PriceBreakdown for the line
    """
    if tax_percent:
        pre_tax = final_unit_price / (1.0 + tax_percent / 100.0)
    else:
        pre_tax = final_unit_price
    unit_tax = final_unit_price - pre_tax
    return PriceBreakdown(
        pre_tax_unit_rate=pre_tax,
        unit_tax_amount=unit_tax,
        line_tax_amount=unit_tax * quantity,
        line_subtotal=pre_tax * quantity,
    )


class PriceReconciler:
    """Derives a line's amounts from its final price, quantity and tax."""

    def __init__(self, catalog: TaxCatalog) -> None:
        self.catalog = catalog

    def tax_percent_for(self, line: LineItem) -> float:
        if not line.tax_id or line.tax_id == NO_TAX:
            return 0.0
        return self.catalog.percentage_of(line.tax_id)

    def reconcile(self, line: LineItem) -> PriceBreakdown:
        return back_calculate(
            final_unit_price=line.final_price or 0.0,
            tax_percent=self.tax_percent_for(line),
            quantity=line.quantity,
        )

    def apply(self, line: LineItem) -> LineItem:
        """Line with ``price``, ``tax_amount`` and ``item_total`` recomputed."""
        breakdown = self.reconcile(line)
        return replace(
            line,
            price=breakdown.pre_tax_unit_rate,
            tax_amount=breakdown.line_tax_amount,
            item_total=breakdown.line_subtotal,
        )
