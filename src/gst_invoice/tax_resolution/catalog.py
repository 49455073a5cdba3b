"""Tax records from the billing provider and the tax family matcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

# Selection value meaning "no tax on this line"; never present in the live catalog
NO_TAX = "NO_TAX"

# Two percentages closer than this are the same rate
RATE_TOLERANCE = 0.01


class TaxFamily(Enum):
    """GST family of a tax record."""

    INTERSTATE = "interstate"  # IGST
    INTRASTATE = "intrastate"  # CGST + SGST group

    @classmethod
    def for_order(cls, is_interstate: bool) -> "TaxFamily":
        return cls.INTERSTATE if is_interstate else cls.INTRASTATE

    @property
    def label(self) -> str:
        return "IGST" if self is TaxFamily.INTERSTATE else "CGST/SGST"


def classify_family(tax_name: str) -> TaxFamily:
    """Derive the family from the provider's display name."""
    if "IGST" in (tax_name or "").upper():
        return TaxFamily.INTERSTATE
    return TaxFamily.INTRASTATE


def same_rate(a: float, b: float) -> bool:
    return abs(float(a) - float(b)) < RATE_TOLERANCE


@dataclass(frozen=True)
class TaxRecord:
    """One tax option offered by the billing provider."""

    tax_id: str
    tax_name: str
    tax_percentage: float
    tax_type: str = ""
    family: TaxFamily = TaxFamily.INTRASTATE

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "TaxRecord":
        """Build a record from the provider's ``/settings/taxes`` entry.

        Raises:
            ValueError: if the entry has no id or a non-numeric percentage
        """
        tax_id = raw.get("tax_id")
        if not tax_id:
            raise ValueError(f"Tax entry without tax_id: {raw!r}")
        try:
            percentage = float(raw.get("tax_percentage", 0) or 0)
        except (TypeError, ValueError):
            raise ValueError(
                f"Tax {tax_id} has non-numeric tax_percentage: {raw.get('tax_percentage')!r}"
            )
        name = str(raw.get("tax_name", "") or "")
        return cls(
            tax_id=str(tax_id),
            tax_name=name,
            tax_percentage=percentage,
            tax_type=str(raw.get("tax_type", "") or ""),
            family=classify_family(name),
        )

    @property
    def is_igst(self) -> bool:
        return self.family is TaxFamily.INTERSTATE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tax_id": self.tax_id,
            "tax_name": self.tax_name,
            "tax_percentage": self.tax_percentage,
            "tax_type": self.tax_type,
        }


# Stand-in record for the "no tax" selection
NO_TAX_RECORD = TaxRecord(tax_id=NO_TAX, tax_name="No Tax", tax_percentage=0.0)


def find_matching_tax(
    records: Iterable[TaxRecord], percentage: float, family: TaxFamily
) -> Optional[TaxRecord]:
    """Return the first record at ``percentage`` in ``family``.

    A zero percentage ignores the family: the first zero-rate record wins,
    and when the catalog has none the "no tax" record is returned. Any other
    percentage returns None when nothing in the right family matches.
    """
    if percentage == 0:
        for record in records:
            if same_rate(record.tax_percentage, 0):
                return record
        return NO_TAX_RECORD

    for record in records:
        if record.family is family and same_rate(record.tax_percentage, percentage):
            return record
    return None


class TaxCatalog:
    """Ordered, read-only view of the provider's tax records."""

    def __init__(self, records: Sequence[TaxRecord] = ()) -> None:
        self._records: Tuple[TaxRecord, ...] = tuple(records)
        self._by_id: Dict[str, TaxRecord] = {}
        for record in self._records:
            # First occurrence wins, matching the matcher's ordering
            self._by_id.setdefault(record.tax_id, record)

    @classmethod
    def from_provider(cls, payload: Any) -> "TaxCatalog":
        """Build a catalog from a tax list or a ``{"taxes": [...]}`` response."""
        if isinstance(payload, dict):
            payload = payload.get("taxes") or []
        return cls([TaxRecord.from_dict(raw) for raw in payload])

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TaxRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def get(self, tax_id: Optional[str]) -> Optional[TaxRecord]:
        if not tax_id:
            return None
        return self._by_id.get(tax_id)

    def percentage_of(self, tax_id: Optional[str]) -> float:
        """Percentage for a selection; "no tax" and unknown ids count as 0."""
        record = self.get(tax_id)
        return record.tax_percentage if record else 0.0

    def find(self, percentage: float, family: TaxFamily) -> Optional[TaxRecord]:
        return find_matching_tax(self._records, percentage, family)

    def has_equivalent(self, percentage: float, family: TaxFamily) -> bool:
        """True when a record of ``family`` exists at ``percentage``."""
        return any(
            r.family is family and same_rate(r.tax_percentage, percentage)
            for r in self._records
        )

    def to_list(self) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in self._records]
