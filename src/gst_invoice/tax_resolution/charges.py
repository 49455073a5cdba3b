"""Delivery and cash-on-delivery charge lines."""

from __future__ import annotations

from typing import Optional

from .catalog import NO_TAX, TaxCatalog, TaxFamily
from .classification import CHARGE_TAX_IDS, CHARGE_TAX_RATE, HsnTaxIds
from .context import OrderTaxContext
from .line_item import SYSTEM_OWNER, LineItem
from .reconciler import PriceReconciler

DELIVERY_CHARGE_NAME = "Delivery Charges"
COD_CHARGE_NAME = "COD Charges"


def charge_tax_id(
    context: OrderTaxContext,
    catalog: TaxCatalog,
    tax_ids: HsnTaxIds = CHARGE_TAX_IDS,
    rate: float = CHARGE_TAX_RATE,
) -> str:
    """Tax id for a charge line in the order's family, or "no tax"."""
    family = TaxFamily.for_order(context.is_interstate)
    explicit = tax_ids.for_family(family)
    if catalog.get(explicit) is not None:
        return explicit
    record = catalog.find(rate, family)
    return record.tax_id if record is not None else NO_TAX


def build_charge_line(
    name: str,
    final_price: float,
    description: Optional[str],
    context: OrderTaxContext,
    catalog: TaxCatalog,
) -> LineItem:
    line = LineItem(
        name=name,
        description=description,
        quantity=1.0,
        final_price=float(final_price),
        tax_id=charge_tax_id(context, catalog),
        zoho_item_id=SYSTEM_OWNER,
    )
    return PriceReconciler(catalog).apply(line)


def delivery_charge_line(amount: float, context: OrderTaxContext, catalog: TaxCatalog) -> LineItem:
    return build_charge_line(DELIVERY_CHARGE_NAME, amount, "Delivery and handling", context, catalog)


def cod_charge_line(amount: float, context: OrderTaxContext, catalog: TaxCatalog) -> LineItem:
    return build_charge_line(COD_CHARGE_NAME, amount, "Cash on Delivery fee", context, catalog)
