"""Interstate/intrastate context of an order."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


def _normalize_state(value: Optional[str]) -> str:
    return (value or "").strip().upper()


@dataclass(frozen=True)
class HomeState:
    """The state the business is registered in for GST."""

    name: str = "Haryana"
    codes: Tuple[str, ...] = ("HR", "06")

    @classmethod
    def from_config(cls, config) -> "HomeState":
        return cls(
            name=config.get("home_state_name", "Haryana"),
            codes=tuple(config.get("home_state_codes", ["HR", "06"])),
        )

    def matches(self, state_or_code: Optional[str]) -> bool:
        """True when a state name or code names this state."""
        norm = _normalize_state(state_or_code)
        if not norm:
            return False
        if norm == _normalize_state(self.name):
            return True
        return norm in {_normalize_state(code) for code in self.codes}


@dataclass(frozen=True)
class OrderTaxContext:
    is_interstate: bool = True
    destination_state: Optional[str] = None
    home_state: HomeState = field(default_factory=HomeState)

    @classmethod
    def for_destination(
        cls, state_or_code: Optional[str], home_state: Optional[HomeState] = None
    ) -> "OrderTaxContext":
        """Context for shipping to ``state_or_code``.

        An empty or unknown destination is interstate, the case that
        requires IGST.
        """
        home = home_state or HomeState()
        return cls(
            is_interstate=not home.matches(state_or_code),
            destination_state=state_or_code,
            home_state=home,
        )


def is_interstate_order(state_or_code: Optional[str], home_state: Optional[HomeState] = None) -> bool:
    return OrderTaxContext.for_destination(state_or_code, home_state).is_interstate
