"""Tax selection for a line item given its HSN/SAC code and the order context."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..utils.logging import get_logger
from .catalog import NO_TAX, TaxCatalog, TaxFamily, TaxRecord, same_rate
from .classification import ClassificationTable
from .context import OrderTaxContext
from .line_item import LineItem

logger = get_logger(__name__)

ZERO_RATE_NOTE = "Converted to 0% tax for this HSN."
TO_INTRASTATE_NOTE = "Switched from IGST to CGST/SGST because this is an intrastate transaction."
TO_INTERSTATE_NOTE = "Switched from CGST/SGST to IGST because this is an interstate transaction."


@dataclass(frozen=True)
class TaxDecision:
    """Outcome of resolving one line.

    ``resolved_hsn`` is the code the decision was made for; it is None when
    resolution was skipped, so the line keeps its previous value.
    """

    tax_id: Optional[str]
    auto_corrected: bool = False
    note: Optional[str] = None
    resolved_hsn: Optional[str] = None


class TaxResolver:
    """Picks the tax record a line should carry.

    The resolver never raises for a mismatch and never invents a tax id:
    when it cannot decide, the line's current selection is returned as-is.
    """

    def __init__(self, table: Optional[ClassificationTable] = None) -> None:
        self.table = table or ClassificationTable()

    def resolve(self, line: LineItem, context: OrderTaxContext, catalog: TaxCatalog) -> TaxDecision:
        if not catalog or line.is_system_charge:
            return TaxDecision(tax_id=line.tax_id, resolved_hsn=line.resolved_hsn)

        hsn = line.hsn_or_sac
        code_rate = self.table.rate_for(hsn)
        # Lines without a known code keep whatever tax they carry
        if code_rate is None:
            logger.debug(f"No known rate for HSN/SAC {hsn!r}; leaving tax {line.tax_id!r}")
            return TaxDecision(tax_id=line.tax_id, resolved_hsn=hsn)

        code_changed = hsn != line.resolved_hsn
        current = catalog.get(line.tax_id)

        # A new code makes the current selection stale; otherwise the rate
        # the user picked wins over the code's canonical rate.
        if code_changed:
            rate = code_rate
            is_zero = rate == 0
        else:
            current_rate = 0.0 if line.tax_id == NO_TAX else (current.tax_percentage if current else None)
            rate = current_rate if current_rate is not None else code_rate
            is_zero = code_rate == 0 or current_rate == 0

        if is_zero:
            corrected = line.tax_id != NO_TAX and not self._is_blank_fill(line)
            return TaxDecision(
                tax_id=NO_TAX,
                auto_corrected=corrected,
                note=ZERO_RATE_NOTE if corrected else None,
                resolved_hsn=hsn,
            )

        family = TaxFamily.for_order(context.is_interstate)
        preferred = self._preferred_record(hsn, rate, code_rate, family, catalog)
        if preferred is None:
            logger.debug(f"No {family.label} tax at {rate}% in catalog; leaving tax {line.tax_id!r}")
            return TaxDecision(tax_id=line.tax_id, resolved_hsn=hsn)

        if line.tax_id == preferred.tax_id:
            return TaxDecision(tax_id=preferred.tax_id, resolved_hsn=hsn)

        if self._is_blank_fill(line):
            return TaxDecision(tax_id=preferred.tax_id, resolved_hsn=hsn)

        needs_switch = (
            not line.tax_id
            or code_changed
            or current is None
            or not same_rate(current.tax_percentage, preferred.tax_percentage)
            or current.family is not preferred.family
        )
        if not needs_switch:
            return TaxDecision(tax_id=line.tax_id, resolved_hsn=hsn)

        note = None
        if current is not None and current.family is not preferred.family:
            note = TO_INTERSTATE_NOTE if preferred.is_igst else TO_INTRASTATE_NOTE
        logger.info(f"Tax for {line.name or 'line'} switched {line.tax_id!r} -> {preferred.tax_id!r}")
        return TaxDecision(tax_id=preferred.tax_id, auto_corrected=True, note=note, resolved_hsn=hsn)

    def _preferred_record(
        self,
        hsn: Optional[str],
        rate: float,
        code_rate: float,
        family: TaxFamily,
        catalog: TaxCatalog,
    ) -> Optional[TaxRecord]:
        # Explicit ids only describe the code's own rate
        explicit = self.table.tax_ids_for(hsn)
        if explicit is not None and same_rate(rate, code_rate):
            record = catalog.get(explicit.for_family(family))
            if record is not None:
                return record
        return catalog.find(rate, family)

    @staticmethod
    def _is_blank_fill(line: LineItem) -> bool:
        return not line.tax_id and line.is_new_product and bool(line.hsn_or_sac)


def apply_decision(line: LineItem, decision: TaxDecision) -> LineItem:
    """Line carrying the decision's tax selection and correction flags."""
    return replace(
        line,
        tax_id=decision.tax_id,
        tax_auto_corrected=decision.auto_corrected,
        tax_correction_note=decision.note,
        resolved_hsn=decision.resolved_hsn,
    )
