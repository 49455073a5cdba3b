"""Invoice line item record."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

# Catalog linkage of generated charge lines (delivery, COD)
SYSTEM_OWNER = "__system__"


@dataclass(frozen=True)
class LineItem:
    """One invoice line as edited in the items step.

    ``price``, ``tax_amount`` and ``item_total`` are derived from
    ``quantity``, ``final_price`` and the selected tax; they are only
    written by the reconciler. ``resolved_hsn`` is the classification code
    the tax selection was last resolved for.
    """

    name: str = ""
    quantity: float = 0.0
    final_price: Optional[float] = None
    tax_id: Optional[str] = None
    hsn_or_sac: Optional[str] = None
    zoho_item_id: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    carat_size: Optional[float] = None

    price: Optional[float] = None
    tax_amount: Optional[float] = None
    item_total: Optional[float] = None

    tax_auto_corrected: bool = False
    tax_correction_note: Optional[str] = None
    resolved_hsn: Optional[str] = None

    @property
    def is_system_charge(self) -> bool:
        return self.zoho_item_id == SYSTEM_OWNER

    @property
    def is_new_product(self) -> bool:
        """Not linked to any catalog product yet."""
        return not self.zoho_item_id

    def with_updates(self, **changes: Any) -> "LineItem":
        """New line with ``changes`` applied; the original is untouched."""
        if "quantity" in changes:
            changes["quantity"] = _to_float("quantity", changes["quantity"], minimum=0)
        if "final_price" in changes and changes["final_price"] is not None:
            changes["final_price"] = _to_float("final_price", changes["final_price"], minimum=0)
        if "hsn_or_sac" in changes:
            changes["hsn_or_sac"] = _clean_code(changes["hsn_or_sac"])
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "LineItem":
        """Build a line from its JSON shape; unknown keys are ignored.

        Raises:
            ValueError: for negative or non-numeric quantity/final price
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in raw.items() if key in known}
        values["quantity"] = _to_float("quantity", values.get("quantity", 0) or 0, minimum=0)
        if values.get("final_price") is not None:
            values["final_price"] = _to_float("final_price", values["final_price"], minimum=0)
        values["hsn_or_sac"] = _clean_code(values.get("hsn_or_sac"))
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


def _to_float(field_name: str, value: Any, minimum: Optional[float] = None) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    if minimum is not None and number < minimum:
        raise ValueError(f"{field_name} must be >= {minimum}, got {number}")
    return number


def _clean_code(value: Any) -> Optional[str]:
    if value is None:
        return None
    # A numeric code has already lost its leading zeros
    if not isinstance(value, str):
        raise ValueError(f"hsn_or_sac must be a string, got {value!r}")
    return value.strip() or None
