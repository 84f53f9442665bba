# scripts/csv_to_invoices.py

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from loguru import logger

# Ensure project root (the folder containing 'gst_invoice') is on sys.path
CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from gst_invoice.core.logging_config import setup_logging
from gst_invoice.domain.services.csv_parser import CSVParseError
from gst_invoice.domain.services.field_mapper import MappingContext
from gst_invoice.domain.services.invoice_import import ImportValidationError, import_csv
from gst_invoice.domain.services.invoice_numbering import (
    InMemoryInvoiceSettingsProvider,
    InvoiceNumbering,
    InvoiceSettings,
)
from gst_invoice.infrastructure.repositories.invoice_repository import InMemoryInvoiceRepository


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert an order export CSV into GST invoices (JSON).")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("--prefix", help="Invoice number prefix (default from settings)")
    parser.add_argument("--start", type=int, help="Next invoice number in counter mode")
    parser.add_argument("--order-anchor", type=int, help="Order number that maps to --invoice-anchor")
    parser.add_argument("--invoice-anchor", type=int, help="Invoice number for --order-anchor")
    parser.add_argument("--log-level", default=None)
    return parser


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    invoice_settings = InvoiceSettings.from_app_settings()
    overrides = {
        "prefix": args.prefix,
        "starting_number": args.start,
        "starting_order_number": args.order_anchor,
        "starting_invoice_number": args.invoice_anchor,
    }
    invoice_settings = invoice_settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    store = InMemoryInvoiceRepository()
    numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(invoice_settings), store=store)

    try:
        report = await import_csv(args.csv_path.read_bytes(), store, MappingContext(numbering=numbering))
    except (CSVParseError, ImportValidationError) as exc:
        logger.error(str(exc))
        return 1

    for skipped in report.skipped:
        logger.warning(f"Skipped {skipped.invoice_no} (order {skipped.order_no}): {skipped.reason}")

    print(json.dumps([invoice.to_payload() for invoice in report.created], indent=2, ensure_ascii=False))
    logger.success(f"✅ {len(report.created)} invoice(s) generated from {args.csv_path.name}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
