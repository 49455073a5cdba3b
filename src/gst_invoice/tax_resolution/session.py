"""Line items of one invoice being prepared, kept resolved and reconciled."""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from ..utils.logging import get_logger
from .catalog import TaxCatalog
from .charges import cod_charge_line, delivery_charge_line
from .classification import ClassificationTable, load_classification_table
from .context import HomeState, OrderTaxContext
from .line_item import LineItem
from .reconciler import PriceReconciler
from .resolver import TaxResolver, apply_decision
from .validator import TaxValidationIssue, check_line_fields, validate_taxes_for_order

logger = get_logger(__name__)


class ItemsSession:
    """In-memory state of the items step.

    Every edit produces a new ``LineItem`` that has been through the
    resolver and then the reconciler, so derived amounts always match the
    current quantity, final price and tax. Loading the catalog or a flip
    between interstate and intrastate re-runs the whole list.
    """

    def __init__(
        self,
        table: Optional[ClassificationTable] = None,
        home_state: Optional[HomeState] = None,
        catalog: Optional[TaxCatalog] = None,
        destination_state: Optional[str] = None,
        shipping_charge: float = 100.0,
        cod_charge: float = 50.0,
    ) -> None:
        self.resolver = TaxResolver(table)
        self.home_state = home_state or HomeState()
        self.catalog = catalog or TaxCatalog()
        self.context = OrderTaxContext.for_destination(destination_state, self.home_state)
        self.shipping_charge = shipping_charge
        self.cod_charge = cod_charge
        self._lines: Tuple[LineItem, ...] = ()

    @classmethod
    def from_config(cls, config, catalog: Optional[TaxCatalog] = None, destination_state: Optional[str] = None) -> "ItemsSession":
        return cls(
            table=load_classification_table(config),
            home_state=HomeState.from_config(config),
            catalog=catalog,
            destination_state=destination_state,
            shipping_charge=config.get("shipping_charge", 100.0),
            cod_charge=config.get("cod_charge", 50.0),
        )

    @property
    def lines(self) -> Tuple[LineItem, ...]:
        return self._lines

    @property
    def is_interstate(self) -> bool:
        return self.context.is_interstate

    def _recalculate(self, line: LineItem) -> LineItem:
        decision = self.resolver.resolve(line, self.context, self.catalog)
        line = apply_decision(line, decision)
        return PriceReconciler(self.catalog).apply(line)

    def recalculate_all(self) -> None:
        logger.debug(f"Recalculating {len(self._lines)} line(s), interstate={self.is_interstate}")
        self._lines = tuple(self._recalculate(line) for line in self._lines)

    def load_catalog(self, catalog: TaxCatalog) -> None:
        self.catalog = catalog
        logger.info(f"Loaded tax catalog with {len(catalog)} record(s)")
        self.recalculate_all()

    def set_destination_state(self, state_or_code: Optional[str]) -> bool:
        """Update the destination; returns True when the tax family flipped."""
        context = OrderTaxContext.for_destination(state_or_code, self.home_state)
        flipped = context.is_interstate != self.context.is_interstate
        self.context = context
        if flipped:
            logger.info(f"Destination {state_or_code!r} makes the order {'interstate' if context.is_interstate else 'intrastate'}")
            self.recalculate_all()
        return flipped

    def add_line(self, line: Optional[LineItem] = None, **fields: Any) -> int:
        """Append a line (a ``LineItem`` or its fields) and return its index."""
        if line is None:
            line = LineItem().with_updates(**fields)
        elif fields:
            line = line.with_updates(**fields)
        self._lines = self._lines + (self._recalculate(line),)
        return len(self._lines) - 1

    def update_line(self, index: int, **changes: Any) -> LineItem:
        updated = self._recalculate(self._lines[index].with_updates(**changes))
        lines = list(self._lines)
        lines[index] = updated
        self._lines = tuple(lines)
        return updated

    def remove_line(self, index: int) -> LineItem:
        lines = list(self._lines)
        removed = lines.pop(index)
        self._lines = tuple(lines)
        return removed

    def charge_lines(self, include_shipping: bool = False, include_cod: bool = False) -> List[LineItem]:
        charges = []
        if include_shipping and self.shipping_charge > 0:
            charges.append(delivery_charge_line(self.shipping_charge, self.context, self.catalog))
        if include_cod and self.cod_charge > 0:
            charges.append(cod_charge_line(self.cod_charge, self.context, self.catalog))
        return charges

    def final_lines(self, include_shipping: bool = False, include_cod: bool = False) -> List[LineItem]:
        return list(self._lines) + self.charge_lines(include_shipping, include_cod)

    def validate(self, include_shipping: bool = False, include_cod: bool = False) -> List[TaxValidationIssue]:
        """Field and tax-family issues that block submission."""
        issues = check_line_fields(self._lines)
        issues.extend(
            validate_taxes_for_order(
                self.final_lines(include_shipping, include_cod), self.catalog, self.is_interstate
            )
        )
        return issues
