"""Command line entry point for importing, billing, and reconciling orders."""
import argparse
import logging
import sys
from pathlib import Path

from orderflow.core.config import Settings, load_settings
from orderflow.core.errors import OrderflowError
from orderflow.core.logging import configure_logging
from orderflow.ingestion.loader import load_rows, load_text
from orderflow.ingestion.quality import apply_row_checks
from orderflow.payments.reconciliation import ReconciliationPolicy, confirm_payments, reconcile_orders
from orderflow.payments.vietqr import BankDirectory, PaymentPayloadEncoder, payload_for_order
from orderflow.processing.importer import process_import
from orderflow.processing.structuring import TextStructurer
from orderflow.reporting.sinks import push_to_google_sheets, write_csv, write_excel
from orderflow.reporting.templates import orders_to_rows
from orderflow.storage.json_store import JsonFileStore

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".pdf"}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one sub-command per workflow."""

    parser = argparse.ArgumentParser(description="Import, bill, and reconcile orders")
    parser.add_argument(
        "--store",
        type=Path,
        help="JSON store file (defaults to ORDERFLOW_STORE or data/store.json)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    import_cmd = commands.add_parser("import", help="Import a batch of raw order rows")
    import_cmd.add_argument("source", type=Path, help="Rows file (.json, .csv, .xlsx) or text (.txt, .pdf)")
    import_cmd.add_argument("--batch", required=True, help="Label grouping the imported orders")
    import_cmd.add_argument(
        "--structure",
        action="store_true",
        help="Send text sources through the AI structuring service first",
    )

    qr_cmd = commands.add_parser("qr", help="Print the payment payload for an order")
    qr_cmd.add_argument("order_id", help="8-character order code")

    reconcile_cmd = commands.add_parser("reconcile", help="Match a bank statement against pending orders")
    reconcile_cmd.add_argument("statement", type=Path, help="Statement text (.txt) or PDF")
    reconcile_cmd.add_argument(
        "--confirm",
        action="store_true",
        help="Mark matched orders as paid",
    )

    export_cmd = commands.add_parser("export", help="Export stored orders")
    export_cmd.add_argument("output", type=Path, help="Output file path")
    export_cmd.add_argument("--sink", choices=["csv", "excel", "sheets"], default="csv")
    export_cmd.add_argument("--batch", help="Only export orders from this batch")
    export_cmd.add_argument("--spreadsheet-id", help="Google Sheets spreadsheet ID for the sheets sink")
    export_cmd.add_argument("--worksheet", default="Sheet1", help="Worksheet title for the sheets sink")
    export_cmd.add_argument(
        "--service-account",
        type=Path,
        help="Path to a Google service account JSON key used for Sheets pushes",
    )
    return parser


def _run_import(args: argparse.Namespace, store: JsonFileStore, settings: Settings) -> None:
    if args.source.suffix.lower() in TEXT_SUFFIXES:
        if not args.structure:
            raise OrderflowError(f"{args.source.name} is free text; pass --structure to import it")
        known = [product.name for product in store.list_products()]
        rows = TextStructurer(settings).structure(load_text(args.source), known_products=known)
    else:
        rows = load_rows(args.source)
    summary = process_import(store, apply_row_checks(rows), args.batch)
    print(summary.message)


def _run_qr(args: argparse.Namespace, store: JsonFileStore, settings: Settings) -> None:
    order = store.get_order(args.order_id.upper())
    if order is None:
        raise OrderflowError(f"Order {args.order_id} not found")
    if not settings.account_no:
        raise OrderflowError("ORDERFLOW_ACCOUNT_NO is not configured")
    encoder = PaymentPayloadEncoder(BankDirectory())
    print(payload_for_order(order, settings.bank_config(), encoder=encoder))


def _run_reconcile(args: argparse.Namespace, store: JsonFileStore, settings: Settings) -> None:
    policy = ReconciliationPolicy(settings.reconcile_methods)
    result = reconcile_orders(load_text(args.statement), store.list_orders(), policy)
    for order in result.matched_orders:
        print(f"{order.id}\t{order.customer_name}\t{order.total_price}")
    print(f"Matched {len(result.matched_orders)} orders, total {result.total_matched_amount}")
    if args.confirm and result.matched_orders:
        confirmed = confirm_payments(store, result.matched_orders)
        print(f"Confirmed {confirmed} payments")


def _run_export(args: argparse.Namespace, store: JsonFileStore, settings: Settings) -> None:
    orders = store.list_orders()
    if args.batch:
        orders = [order for order in orders if order.batch_id == args.batch]
    rows = orders_to_rows(orders)
    if args.sink == "excel":
        write_excel(rows, args.output)
    elif args.sink == "sheets":
        if not args.spreadsheet_id:
            raise OrderflowError("--spreadsheet-id is required when --sink=sheets")
        push_to_google_sheets(
            rows,
            spreadsheet_id=args.spreadsheet_id,
            worksheet_title=args.worksheet,
            service_account_path=args.service_account,
        )
    else:
        write_csv(rows, args.output)
    print(f"Exported {len(rows)} orders")


COMMANDS = {
    "import": _run_import,
    "qr": _run_qr,
    "reconcile": _run_reconcile,
    "export": _run_export,
}


def main() -> None:
    """Entrypoint for running orderflow from the command line."""

    configure_logging()
    args = build_parser().parse_args()
    settings = load_settings()
    store = JsonFileStore(args.store or settings.store_path)
    try:
        COMMANDS[args.command](args, store, settings)
    except OrderflowError as exc:
        logger.error("%s failed: %s", args.command, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
