"""MongoDB repository for accepted orders."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import MongoClient

from ..utils.config import Config
from ..utils.logging import get_logger
from .catalog import NO_TAX, TaxCatalog
from .line_item import LineItem
from .reconciler import PriceReconciler

logger = get_logger(__name__)

PENDING_SHIPPING = "PENDING_SHIPPING"


def build_order_document(
    invoice_id: str,
    invoice_number: str,
    customer_details: Dict[str, Any],
    lines: List[LineItem],
    catalog: TaxCatalog,
    salesperson_name: str = "",
) -> Dict[str, Any]:
    """Order snapshot written once the invoice has been accepted."""
    reconciler = PriceReconciler(catalog)
    items = []
    for line in lines:
        breakdown = reconciler.reconcile(line)
        items.append({
            "item_id": line.zoho_item_id,
            "name": line.name,
            "description": line.description,
            "quantity": line.quantity,
            "rate": breakdown.pre_tax_unit_rate,
            "final_price": line.final_price,
            "item_total": breakdown.line_subtotal,
            "tax_id": line.tax_id or NO_TAX,
            "tax_percentage": reconciler.tax_percent_for(line),
            "hsn_or_sac": line.hsn_or_sac,
            "carat_size": line.carat_size,
        })
    return {
        "zohoInvoiceId": invoice_id,
        "orderId": invoice_number,
        "customerDetails": dict(customer_details),
        "invoiceItems": items,
        "salespersonName": salesperson_name or "",
        "status": PENDING_SHIPPING,
        "createdAt": datetime.now(timezone.utc),
    }


def lines_from_order(order: Dict[str, Any]) -> List[LineItem]:
    """Line items rebuilt from a stored ``invoiceItems`` snapshot."""
    lines = []
    for item in order.get("invoiceItems", []):
        final_price = item.get("final_price")
        if final_price is None:
            rate = float(item.get("rate", 0) or 0)
            final_price = rate * (1 + float(item.get("tax_percentage", 0) or 0) / 100.0)
        lines.append(LineItem.from_dict({
            "name": item.get("name") or "",
            "quantity": item.get("quantity", 0),
            "final_price": final_price,
            "tax_id": item.get("tax_id"),
            "hsn_or_sac": item.get("hsn_or_sac"),
            "zoho_item_id": item.get("item_id"),
            "description": item.get("description"),
        }))
    return lines


class OrderRepository:
    def __init__(self, url: Optional[str] = None, db_name: Optional[str] = None, collection: Optional[str] = None, config: Optional[Config] = None) -> None:
        config = config or Config(".env")
        self._url = url or config.get("mongo_url")
        self._db = db_name or config.get("mongo_db")
        self._collection = collection or config.get("mongo_collection")
        if not self._url:
            raise ValueError("DB_CONNECTION_URL is required")
        self._client: Optional[MongoClient] = None

    def __enter__(self) -> "OrderRepository":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()

    def connect(self) -> None:
        if self._client is None:
            self._client = MongoClient(self._url, serverSelectionTimeoutMS=5000)

    def disconnect(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _orders(self):
        if self._client is None:
            self.connect()
        return self._client[self._db][self._collection]

    def save_order(self, order: Dict[str, Any]) -> Any:
        try:
            result = self._orders().insert_one(order)
        except Exception as e:
            logger.error(f"Failed to save order {order.get('orderId')}: {e}")
            raise
        logger.info(f"Saved order {order.get('orderId')} (invoice {order.get('zohoInvoiceId')})")
        return result.inserted_id

    def get_order_by_order_id(self, order_id: str) -> Optional[Dict[str, Any]]:
        return self._orders().find_one({"orderId": order_id})

    def get_order_by_invoice_id(self, invoice_id: str) -> Optional[Dict[str, Any]]:
        return self._orders().find_one({"zohoInvoiceId": invoice_id})
