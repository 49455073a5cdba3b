"""HSN/SAC classification table: code -> canonical rate and billing tax ids."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..utils.logging import get_logger
from .catalog import TaxFamily

logger = get_logger(__name__)


@dataclass(frozen=True)
class HsnTaxIds:
    """Explicit billing tax ids for one classification code."""

    inter: str  # IGST
    intra: str  # CGST + SGST group

    def for_family(self, family: TaxFamily) -> str:
        return self.inter if family is TaxFamily.INTERSTATE else self.intra


# Rates observed in the product catalog
DEFAULT_HSN_RATES: Dict[str, float] = {
    "14049070": 0,     # Rudrakshas
    "05080010": 0.25,  # Gemstones and raw crystals
    "71179090": 3,     # Bracelets, malas and decorative items
    "83062990": 18,    # Vastu metal
    "74198090": 18,    # Vastu copper/brass
    "44209090": 3,     # Vastu wooden
    "39269090": 3,     # Miscellaneous goods
    "999591": 0,       # Poojas and services
    "999799": 0,       # Miscellaneous services
}

DEFAULT_HSN_TAX_IDS: Dict[str, HsnTaxIds] = {
    "05080010": HsnTaxIds(inter="3355221000000032572", intra="3355221000000044472"),
    "71179090": HsnTaxIds(inter="3355221000000032756", intra="3355221000000044134"),
    "83062990": HsnTaxIds(inter="3355221000000032375", intra="3355221000000032451"),
    "74198090": HsnTaxIds(inter="3355221000000032375", intra="3355221000000032451"),
    "44209090": HsnTaxIds(inter="3355221000000032756", intra="3355221000000044134"),
    "39269090": HsnTaxIds(inter="3355221000000032756", intra="3355221000000044134"),
}

# 18% ids used for delivery and COD charge lines
CHARGE_TAX_IDS = HsnTaxIds(inter="3355221000000032375", intra="3355221000000032451")
CHARGE_TAX_RATE = 18.0


class ClassificationTable:
    """Static lookup from classification code to rate and explicit tax ids."""

    def __init__(
        self,
        rates: Optional[Mapping[str, float]] = None,
        tax_ids: Optional[Mapping[str, HsnTaxIds]] = None,
    ) -> None:
        self._rates: Dict[str, float] = {}
        for code, rate in (DEFAULT_HSN_RATES if rates is None else rates).items():
            rate = float(rate)
            if rate < 0:
                raise ValueError(f"Negative tax rate {rate} for HSN/SAC {code}")
            self._rates[_normalize_code(code)] = rate
        self._tax_ids: Dict[str, HsnTaxIds] = {
            _normalize_code(code): ids
            for code, ids in (DEFAULT_HSN_TAX_IDS if tax_ids is None else tax_ids).items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassificationTable":
        """Build a table from ``{"<code>": {"rate": 18, "inter": "...", "intra": "..."}}``.

        ``inter``/``intra`` are optional; a code without them is resolved
        through the live catalog only.
        """
        rates: Dict[str, float] = {}
        tax_ids: Dict[str, HsnTaxIds] = {}
        for code, entry in data.items():
            if not isinstance(entry, Mapping):
                raise ValueError(f"HSN/SAC {code} must map to an object, got {entry!r}")
            if "rate" not in entry:
                raise ValueError(f"HSN/SAC {code} has no rate")
            try:
                rates[code] = float(entry["rate"])
            except (TypeError, ValueError):
                raise ValueError(f"HSN/SAC {code} has non-numeric rate: {entry['rate']!r}")
            if entry.get("inter") and entry.get("intra"):
                tax_ids[code] = HsnTaxIds(inter=str(entry["inter"]), intra=str(entry["intra"]))
        return cls(rates=rates, tax_ids=tax_ids)

    @classmethod
    def from_file(cls, path: str) -> "ClassificationTable":
        table_path = Path(path)
        with table_path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        table = cls.from_dict(data)
        logger.info(f"Loaded {len(table)} HSN/SAC codes from {table_path}")
        return table

    def __len__(self) -> int:
        return len(self._rates)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and _normalize_code(code) in self._rates

    def rate_for(self, code: Optional[str]) -> Optional[float]:
        """Canonical percentage for ``code``, or None when the code is unknown."""
        if not code:
            return None
        return self._rates.get(_normalize_code(code))

    def tax_ids_for(self, code: Optional[str]) -> Optional[HsnTaxIds]:
        if not code:
            return None
        return self._tax_ids.get(_normalize_code(code))


def _normalize_code(code: str) -> str:
    return str(code).strip()


def load_classification_table(config) -> ClassificationTable:
    """Table from ``hsn_table_file`` when configured, else the built-in one."""
    table_file = config.get("hsn_table_file") if config is not None else None
    if table_file:
        return ClassificationTable.from_file(table_file)
    return ClassificationTable()
