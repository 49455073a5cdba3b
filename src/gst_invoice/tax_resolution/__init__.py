"""Tax resolution module entry point."""

from .catalog import NO_TAX, TaxCatalog, TaxFamily, TaxRecord, find_matching_tax
from .classification import ClassificationTable, HsnTaxIds
from .context import HomeState, OrderTaxContext, is_interstate_order
from .line_item import SYSTEM_OWNER, LineItem
from .reconciler import PriceBreakdown, PriceReconciler, back_calculate
from .resolver import TaxDecision, TaxResolver, apply_decision
from .session import ItemsSession
from .validator import TaxValidationIssue, check_line_fields, validate_taxes_for_order
from .repository import OrderRepository

__all__ = [
    "NO_TAX",
    "SYSTEM_OWNER",
    "TaxCatalog",
    "TaxFamily",
    "TaxRecord",
    "find_matching_tax",
    "ClassificationTable",
    "HsnTaxIds",
    "HomeState",
    "OrderTaxContext",
    "is_interstate_order",
    "LineItem",
    "PriceBreakdown",
    "PriceReconciler",
    "back_calculate",
    "TaxDecision",
    "TaxResolver",
    "apply_decision",
    "ItemsSession",
    "TaxValidationIssue",
    "check_line_fields",
    "validate_taxes_for_order",
    "OrderRepository",
]
