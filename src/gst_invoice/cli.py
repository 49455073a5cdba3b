"""
Command-line interface for the GST invoice tools.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from . import __version__
from .utils.config import Config
from .utils.logging import setup_logging
from .tax_resolution.catalog import NO_TAX, TaxCatalog
from .tax_resolution.context import HomeState, OrderTaxContext
from .tax_resolution.invoice import compute_totals, money
from .tax_resolution.line_item import LineItem
from .tax_resolution.repository import OrderRepository, lines_from_order
from .tax_resolution.session import ItemsSession
from .tax_resolution.validator import TaxValidationIssue, validate_taxes_for_order


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="GST Invoice - tax resolution and price reconciliation for invoice lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  gst-invoice --version
  gst-invoice resolve-items --items items.json --taxes taxes.json --state Haryana
  gst-invoice resolve-items --items items.json --taxes taxes.json --state MH --shipping --cod --json
  gst-invoice verify-order --order-id INV-000123 --taxes taxes.json
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"GST Invoice {__version__}",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-file",
        help="Log file path",
    )

    parser.add_argument(
        "--env-file",
        help="Load configuration from this .env file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        help="Available commands",
    )

    resolve_parser = subparsers.add_parser(
        "resolve-items",
        help="Resolve taxes and back-calculate prices for invoice lines",
    )
    resolve_parser.add_argument(
        "--items",
        required=True,
        help="JSON file with a list of line items (or {\"invoice_items\": [...]})",
    )
    resolve_parser.add_argument(
        "--taxes",
        required=True,
        help="JSON file with the billing provider's tax list",
    )
    resolve_parser.add_argument(
        "--state",
        default="",
        help="Destination state name or code (empty means interstate)",
    )
    resolve_parser.add_argument(
        "--shipping",
        action="store_true",
        help="Add the delivery charge line",
    )
    resolve_parser.add_argument(
        "--cod",
        action="store_true",
        help="Add the cash-on-delivery charge line",
    )
    resolve_parser.add_argument(
        "--json",
        action="store_true",
        dest="as_json",
        help="Print the result as JSON",
    )

    verify_parser = subparsers.add_parser(
        "verify-order",
        help="Re-validate the taxes of a stored order",
    )
    verify_parser.add_argument(
        "--order-id",
        required=True,
        help="Order id (invoice number) of the stored order",
    )
    verify_parser.add_argument(
        "--taxes",
        required=True,
        help="JSON file with the billing provider's tax list",
    )

    return parser


def _load_json(path: str) -> Any:
    with Path(path).open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _print_issues(issues: List[TaxValidationIssue]) -> None:
    print("\nVALIDATION:")
    print("=" * 60)
    if not issues:
        print("   ✅ All lines pass")
        return
    for issue in issues:
        where = f"Line {issue.index + 1}" if issue.index >= 0 else "Invoice"
        print(f"   ❌ {where}: {issue.message}")


def resolve_items(
    items_file: str,
    taxes_file: str,
    state: str,
    config: Config,
    include_shipping: bool = False,
    include_cod: bool = False,
    as_json: bool = False,
) -> int:
    """
    Resolve and reconcile the lines in ``items_file`` and report the result.

    Returns:
        0 when the lines could be submitted, 1 when issues block submission
    """
    catalog = TaxCatalog.from_provider(_load_json(taxes_file))
    raw = _load_json(items_file)
    discount = adjustment = 0.0
    if isinstance(raw, dict):
        discount = float(raw.get("discount") or 0)
        adjustment = float(raw.get("adjustment") or 0)
        raw = raw.get("invoice_items") or []

    session = ItemsSession.from_config(config, catalog=catalog, destination_state=state)
    for entry in raw:
        session.add_line(LineItem.from_dict(entry))

    lines = session.final_lines(include_shipping, include_cod)
    issues = session.validate(include_shipping, include_cod)
    totals = compute_totals(lines, catalog, discount=discount, adjustment=adjustment)

    if as_json:
        print(json.dumps({
            "is_interstate": session.is_interstate,
            "invoice_items": [line.to_dict() for line in lines],
            "totals": totals.to_dict(),
            "issues": [issue.to_dict() for issue in issues],
        }, indent=2))
        return 1 if issues else 0

    print(f"Destination : {state or '(unknown)'}")
    print(f"Supply      : {'INTERSTATE (IGST)' if session.is_interstate else 'INTRASTATE (CGST/SGST)'}")

    print("\nLINE ITEMS:")
    print("=" * 60)
    header = f"{'#':>3} {'Item':<24}{'Qty':>6}{'Final':>11}{'Rate':>11}{'Tax':>11}  Tax ID"
    print(header)
    print("-" * len(header))
    for index, line in enumerate(lines, start=1):
        tax_id = line.tax_id or "-"
        print(
            f"{index:>3} {line.name[:23]:<24}{line.quantity:>6g}"
            f"{money(line.final_price or 0):>11.2f}{money(line.price or 0):>11.2f}"
            f"{money(line.tax_amount or 0):>11.2f}  {tax_id}"
        )
        if line.tax_correction_note:
            print(f"      ⚠️  {line.tax_correction_note}")
        elif line.tax_auto_corrected:
            print(f"      ⚠️  Tax updated to {tax_id if tax_id != NO_TAX else 'No Tax'}")

    print("\nTOTALS:")
    print("=" * 60)
    for label, value in totals.to_dict().items():
        print(f"   {label.replace('_', ' ').title():<14}: {value:>12.2f}")

    _print_issues(issues)
    return 1 if issues else 0


def verify_order(order_id: str, taxes_file: str, config: Config) -> int:
    """Re-run the tax family checks on a stored order."""
    catalog = TaxCatalog.from_provider(_load_json(taxes_file))
    with OrderRepository(config=config) as repo:
        order = repo.get_order_by_order_id(order_id)
    if not order:
        raise ValueError(f"Order with ID {order_id} not found")

    state = (order.get("customerDetails") or {}).get("state")
    context = OrderTaxContext.for_destination(state, HomeState.from_config(config))
    issues = validate_taxes_for_order(lines_from_order(order), catalog, context.is_interstate)

    print(f"Order ID    : {order_id}")
    print(f"Destination : {state or '(unknown)'}")
    print(f"Supply      : {'INTERSTATE (IGST)' if context.is_interstate else 'INTRASTATE (CGST/SGST)'}")
    _print_issues(issues)
    return 1 if issues else 0


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    config = Config(parsed_args.env_file)
    log_level = "DEBUG" if parsed_args.verbose else config.get("log_level", "INFO")
    # Keep JSON output parseable
    if getattr(parsed_args, "as_json", False) and not parsed_args.verbose:
        log_level = "ERROR"
    logger = setup_logging(level=log_level, log_file=parsed_args.log_file)

    try:
        if parsed_args.command == "resolve-items":
            return resolve_items(
                items_file=parsed_args.items,
                taxes_file=parsed_args.taxes,
                state=parsed_args.state,
                config=config,
                include_shipping=parsed_args.shipping,
                include_cod=parsed_args.cod,
                as_json=parsed_args.as_json,
            )

        elif parsed_args.command == "verify-order":
            return verify_order(
                order_id=parsed_args.order_id,
                taxes_file=parsed_args.taxes,
                config=config if parsed_args.env_file else Config(".env"),
            )

        elif not parsed_args.command:
            parser.print_help()
            return 1

    except Exception as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
