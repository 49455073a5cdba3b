"""Invoice payload for the billing provider and order totals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .catalog import NO_TAX, TaxCatalog
from .line_item import LineItem
from .reconciler import PriceReconciler


def money(value: float) -> float:
    """Round to currency precision."""
    return round(float(value), 2)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    total_tax: float
    discount: float = 0.0
    adjustment: float = 0.0

    @property
    def grand_total(self) -> float:
        return self.subtotal + self.total_tax - self.discount + self.adjustment

    def to_dict(self) -> Dict[str, float]:
        return {
            "subtotal": money(self.subtotal),
            "total_tax": money(self.total_tax),
            "discount": money(self.discount),
            "adjustment": money(self.adjustment),
            "grand_total": money(self.grand_total),
        }


def compute_totals(
    lines: Iterable[LineItem], catalog: TaxCatalog, discount: float = 0.0, adjustment: float = 0.0
) -> InvoiceTotals:
    """Sum freshly reconciled amounts; cached line fields are not trusted."""
    reconciler = PriceReconciler(catalog)
    subtotal = total_tax = 0.0
    for line in lines:
        breakdown = reconciler.reconcile(line)
        subtotal += breakdown.line_subtotal
        total_tax += breakdown.line_tax_amount
    return InvoiceTotals(
        subtotal=subtotal,
        total_tax=total_tax,
        discount=float(discount or 0),
        adjustment=float(adjustment or 0),
    )


def to_invoice_item(line: LineItem, catalog: TaxCatalog) -> Dict[str, Any]:
    """One ``invoice_items`` entry, amounts rounded only here."""
    breakdown = PriceReconciler(catalog).reconcile(line)
    item: Dict[str, Any] = {
        "name": line.name,
        "quantity": line.quantity,
        "price": money(breakdown.pre_tax_unit_rate),
    }
    if line.zoho_item_id and not line.is_system_charge:
        item["product_id"] = line.zoho_item_id
    if line.description:
        item["description"] = line.description
    if line.tax_id and line.tax_id != NO_TAX:
        item["tax_id"] = line.tax_id
    if line.hsn_or_sac:
        item["hsn_or_sac"] = line.hsn_or_sac
    if line.unit:
        item["unit"] = line.unit
    return item


def build_invoice_payload(
    customer_id: str,
    date: str,
    lines: List[LineItem],
    catalog: TaxCatalog,
    place_of_supply: Optional[str] = None,
    **optional: Any,
) -> Dict[str, Any]:
    """Create-invoice request body; falsy optional fields are dropped."""
    if not customer_id:
        raise ValueError("customer_id is required")
    if not date:
        raise ValueError("Invoice date is required")
    if not lines:
        raise ValueError("At least one invoice item is required")

    payload: Dict[str, Any] = {
        "customer_id": customer_id,
        "date": date,
        "invoice_items": [to_invoice_item(line, catalog) for line in lines],
    }
    if place_of_supply:
        payload["place_of_supply"] = place_of_supply
    for key, value in optional.items():
        if value:
            payload[key] = value
    return payload
