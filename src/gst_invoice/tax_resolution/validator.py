"""Pre-submission checks over the whole line set."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..utils.logging import get_logger
from .catalog import NO_TAX, TaxCatalog, TaxFamily
from .line_item import LineItem

logger = get_logger(__name__)

IGST_IN_INTRASTATE = "IGST cannot be applied as this is an intrastate transaction."
GST_IN_INTERSTATE = "For interstate orders, IGST should be applied instead of CGST/SGST for this rate."


@dataclass(frozen=True)
class TaxValidationIssue:
    index: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"index": self.index, "message": self.message}


def validate_taxes_for_order(
    lines: Sequence[LineItem], catalog: TaxCatalog, is_interstate: bool
) -> List[TaxValidationIssue]:
    """Flag lines whose tax family does not fit the order.

    IGST on an intrastate order is always an error. CGST/SGST on an
    interstate order is only an error when the catalog offers an IGST
    record at the same rate; otherwise there is nothing to switch to.
    """
    issues: List[TaxValidationIssue] = []
    for index, line in enumerate(lines):
        if not line.tax_id or line.tax_id == NO_TAX:
            continue
        record = catalog.get(line.tax_id)
        if record is None or record.tax_percentage <= 0:
            continue

        if not is_interstate and record.is_igst:
            issues.append(TaxValidationIssue(index, IGST_IN_INTRASTATE))
        elif (
            is_interstate
            and not record.is_igst
            and catalog.has_equivalent(record.tax_percentage, TaxFamily.INTERSTATE)
        ):
            issues.append(TaxValidationIssue(index, GST_IN_INTERSTATE))

    for issue in issues:
        logger.warning(f"Line {issue.index + 1}: {issue.message}")
    return issues


def check_line_fields(lines: Sequence[LineItem]) -> List[TaxValidationIssue]:
    """Required-field checks for the items step."""
    issues: List[TaxValidationIssue] = []
    if not lines:
        issues.append(TaxValidationIssue(-1, "Add at least one item to the invoice"))
    for index, line in enumerate(lines):
        if not line.name.strip():
            issues.append(TaxValidationIssue(index, "Item name is required"))
        if line.quantity < 0.01:
            issues.append(TaxValidationIssue(index, "Quantity must be greater than 0"))
        if line.final_price is None or line.final_price < 0:
            issues.append(TaxValidationIssue(index, "Final price must be 0 or more"))
        if not line.tax_id:
            issues.append(TaxValidationIssue(index, 'Tax is required; choose a rate or "No Tax"'))
        # Products already in the billing catalog carry their own HSN
        if line.is_new_product and not line.hsn_or_sac:
            issues.append(TaxValidationIssue(index, "HSN/SAC is required for new products"))
    return issues
