# gst_invoice/domain/services/invoice_import.py
"""
CSV import: parse -> validate -> map -> store.

Invoices are checked and stored one at a time, in file order.  An invoice
is skipped (never renumbered) when its order already has an invoice or its
number is taken; skipped invoices are reported with the reason.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import IO, Optional, Union

from gst_invoice.domain.models.csv_data import ParsedCSVData
from gst_invoice.domain.models.invoice import InvoiceData
from gst_invoice.domain.services.column_resolver import get_value
from gst_invoice.domain.services.csv_parser import parse_csv
from gst_invoice.domain.services.field_mapper import MappingContext, map_row
from gst_invoice.domain.services.invoice_formatter import amount_in_words
from gst_invoice.domain.services.invoice_numbering import InvoiceNumbering
from gst_invoice.domain.services.order_aggregator import map_orders
from gst_invoice.infrastructure.repositories.invoice_repository import (
    DuplicateInvoiceError,
    InvoiceStore,
)

logger = logging.getLogger("invoice_import")


class ImportValidationError(Exception):
    """The parsed export does not look like an order export."""


@dataclass
class SkippedInvoice:
    invoice_no: str
    order_no: str
    reason: str


@dataclass
class ImportReport:
    created: list[InvoiceData] = field(default_factory=list)
    skipped: list[SkippedInvoice] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.created) + len(self.skipped)


# (pattern, message) for columns an order export must have
REQUIRED_COLUMNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"(lineitem\s*name|product\s*name|item\s*name)", re.IGNORECASE),
     "Missing required field: Line Item Name (Product Name)"),
    (re.compile(r"(lineitem\s*price|price|unit\s*price)", re.IGNORECASE),
     "Missing required field: Price"),
    (re.compile(r"(lineitem\s*quantity|quantity|qty)", re.IGNORECASE),
     "Missing required field: Quantity"),
)
ORDER_NUMBER_RE = re.compile(r"order\s*(number|no|id)", re.IGNORECASE)
CUSTOMER_NAME_RE = re.compile(r"(billing\s*name|customer\s*name|name)", re.IGNORECASE)


def _first_header(headers: list[str], pattern: re.Pattern) -> Optional[str]:
    return next((h for h in headers if pattern.search(h)), None)


def validate_parsed_data(data: ParsedCSVData) -> None:
    """
    Reject exports missing the columns an invoice needs, or whose first row
    has neither a customer name nor an order number.
    """
    errors: list[str] = []
    order_col = _first_header(data.headers, ORDER_NUMBER_RE)
    name_col = _first_header(data.headers, CUSTOMER_NAME_RE)

    if not order_col and not name_col:
        errors.append("Missing required field: Order Number or Customer Name")
    for pattern, message in REQUIRED_COLUMNS:
        if not _first_header(data.headers, pattern):
            errors.append(message)

    if not data.rows:
        errors.append("CSV file contains no data rows")
    elif not (get_value(data.rows[0], name_col) or get_value(data.rows[0], order_col)):
        errors.append("CSV file does not contain valid customer or order data")

    if errors:
        raise ImportValidationError(f"Validation failed: {'; '.join(errors)}")


def map_csv(data: ParsedCSVData, context: Optional[MappingContext] = None) -> list[InvoiceData]:
    """A single-row export maps directly; anything larger is grouped by order."""
    if len(data.rows) == 1:
        return [map_row(data, 0, context=context)]
    return map_orders(data, context)


def _incomplete_reason(invoice: InvoiceData) -> Optional[str]:
    if not invoice.metadata.invoice_no:
        return "Invoice data is incomplete. Missing invoice number."
    if not invoice.metadata.invoice_date:
        return "Invoice data is incomplete. Missing invoiceDate in metadata."
    if not invoice.bill_to_party.name:
        return "Invoice data is incomplete. Missing customer/billing name."
    return None


async def import_invoices(invoices: list[InvoiceData], store: InvoiceStore) -> ImportReport:
    report = ImportReport()

    for invoice in invoices:
        invoice_no = invoice.metadata.invoice_no
        order_no = invoice.metadata.order_no

        def skip(reason: str) -> None:
            logger.warning("invoice_import: skipping %s (order %s): %s", invoice_no, order_no, reason)
            report.skipped.append(SkippedInvoice(invoice_no=invoice_no, order_no=order_no, reason=reason))

        existing = await store.find_by_order(order_no)
        if existing is not None:
            skip(f"Order {order_no} already has invoice {existing.invoice_no}. Cannot regenerate invoices.")
            continue

        existing = await store.find_by_invoice_no(invoice_no)
        if existing is not None:
            skip(
                f"Invoice {invoice_no} already exists for order {existing.order_no}. "
                "Cannot use duplicate invoice number."
            )
            continue

        reason = _incomplete_reason(invoice)
        if reason:
            skip(reason)
            continue

        final = invoice.model_copy(
            update={"amount_in_words": amount_in_words(invoice.tax_summary.total_amount_after_tax)}
        )
        try:
            await store.create(final)
        except DuplicateInvoiceError as exc:
            skip(str(exc))
            continue
        report.created.append(final)

    logger.info(
        "invoice_import: %d created, %d skipped",
        len(report.created),
        len(report.skipped),
    )
    return report


async def import_csv(
    source: Union[str, bytes, IO[str]],
    store: InvoiceStore,
    context: Optional[MappingContext] = None,
) -> ImportReport:
    data = parse_csv(source)
    validate_parsed_data(data)
    if context is None:
        context = MappingContext(numbering=InvoiceNumbering(store=store))
    return await import_invoices(map_csv(data, context), store)
