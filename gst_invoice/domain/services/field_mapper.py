# gst_invoice/domain/services/field_mapper.py
"""
Single-row mapping: one CSV record -> one ``InvoiceData``.

Amounts are copied from the export as-is.  Nothing is recomputed or
cross-checked against line items; the export's own subtotal / tax / total
are what end up on the invoice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser

from gst_invoice.core.config import settings
from gst_invoice.domain.models.csv_data import CSVRow, ParsedCSVData
from gst_invoice.domain.models.invoice import (
    BusinessDetails,
    FinancialStatus,
    InvoiceData,
    InvoiceLineItem,
    InvoiceMetadata,
    PartyDetails,
    TaxSummary,
)
from gst_invoice.domain.services.column_resolver import (
    ResolvedColumns,
    get_numeric_value,
    get_value,
    resolve_columns,
)
from gst_invoice.domain.services.gst_state_codes import get_state_code, state_code_from_gstin
from gst_invoice.domain.services.invoice_numbering import InvoiceNumbering
from gst_invoice.domain.services.tax_reconciler import reconcile_taxes

logger = logging.getLogger("field_mapper")

# Checked in this order: "paid" is a substring of "unpaid" / "partially paid"
FINANCIAL_STATUS_KEYWORDS: tuple[tuple[str, FinancialStatus], ...] = (
    ("unpaid", FinancialStatus.UNPAID),
    ("partially", FinancialStatus.PARTIALLY_PAID),
    ("paid", FinancialStatus.PAID),
    ("pending", FinancialStatus.PENDING),
    ("refund", FinancialStatus.REFUNDED),
    ("void", FinancialStatus.VOIDED),
)

# Two fill-ins that differ in every date part: a part missing from the input
# shows up as a difference between the two parses
_DATE_FILL_INS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def default_business() -> BusinessDetails:
    return BusinessDetails(
        name=settings.BUSINESS_NAME,
        legal_name=settings.BUSINESS_LEGAL_NAME,
        address=settings.BUSINESS_ADDRESS,
        city=settings.BUSINESS_CITY,
        state=settings.BUSINESS_STATE,
        pincode=settings.BUSINESS_PINCODE,
        email=settings.BUSINESS_EMAIL,
        phone=settings.BUSINESS_PHONE,
        gstin=settings.BUSINESS_GSTIN,
        cin=settings.BUSINESS_CIN,
        pan=settings.BUSINESS_PAN,
    )


@dataclass
class MappingContext:
    """
    Collaborators for a mapping run.

    ``numbering`` is only consulted when no explicit invoice number is
    given; without one the invoice number is left empty for the caller to
    assign.  ``invoice_date`` defaults to today.
    """

    business: BusinessDetails = field(default_factory=default_business)
    numbering: Optional[InvoiceNumbering] = None
    invoice_date: Optional[date] = None
    default_hsn: str = field(default_factory=lambda: settings.DEFAULT_HSN)
    default_country: str = field(default_factory=lambda: settings.DEFAULT_COUNTRY)
    default_payment_method: str = field(default_factory=lambda: settings.DEFAULT_PAYMENT_METHOD)

    def resolve_invoice_no(self, order_no: str) -> str:
        if self.numbering is None:
            return ""
        if order_no:
            return self.numbering.invoice_number_for_order(order_no)
        return self.numbering.next_invoice_number()

    def today(self) -> date:
        return self.invoice_date or date.today()


def format_date(value: str, today: Optional[date] = None) -> str:
    """
    Normalise a date string to ``DD-MM-YYYY``.

    Empty input gives *today*.  Anything unparseable, or missing its day,
    month or year (``"Mon"``, ``"10:30"``), is returned unchanged.
    """
    if not value:
        return (today or date.today()).strftime("%d-%m-%Y")
    try:
        first, second = (date_parser.parse(value, default=fill_in) for fill_in in _DATE_FILL_INS)
    except (ValueError, OverflowError):
        return value
    if first.date() != second.date():
        return value
    return first.strftime("%d-%m-%Y")


def normalize_financial_status(raw: str) -> Optional[FinancialStatus]:
    text = (raw or "").lower()
    for keyword, status in FINANCIAL_STATUS_KEYWORDS:
        if keyword in text:
            return status
    return None


def order_number_for(row: CSVRow, columns: ResolvedColumns, row_index: int) -> str:
    """Order number of a row, or the synthetic ``ORDER-{n}`` (1-based)."""
    return get_value(row, columns["order_no"]) or f"ORDER-{row_index + 1}"


def build_bill_to(row: CSVRow, columns: ResolvedColumns, default_country: str) -> PartyDetails:
    state = get_value(row, columns["billing_state"])
    return PartyDetails(
        name=get_value(row, columns["billing_name"]),
        address=get_value(row, columns["billing_street"]),
        city=get_value(row, columns["billing_city"]),
        state=state,
        state_code=get_state_code(state),
        pincode=get_value(row, columns["billing_zip"]),
        country=get_value(row, columns["billing_country"]) or default_country,
        phone=get_value(row, columns["billing_phone"]),
        email=get_value(row, columns["email"]) or None,
        gstin=get_value(row, columns["gstin"]).upper() or None,
    )


def build_ship_to(row: CSVRow, columns: ResolvedColumns, bill_to: PartyDetails) -> PartyDetails:
    """Shipping party; each empty field falls back to the billing value."""
    state = get_value(row, columns["shipping_state"]) or bill_to.state
    return PartyDetails(
        name=get_value(row, columns["shipping_name"]) or bill_to.name,
        address=get_value(row, columns["shipping_street"]) or bill_to.address,
        city=get_value(row, columns["shipping_city"]) or bill_to.city,
        state=state,
        state_code=get_state_code(state),
        pincode=get_value(row, columns["shipping_zip"]) or bill_to.pincode,
        country=get_value(row, columns["shipping_country"]) or bill_to.country,
        phone=get_value(row, columns["shipping_phone"]) or bill_to.phone,
        email=bill_to.email,
        gstin=bill_to.gstin,
    )


def _single_line_item(row: CSVRow, columns: ResolvedColumns, default_hsn: str) -> InvoiceLineItem:
    item_name = get_value(row, columns["item_name"])
    quantity = get_numeric_value(row, columns["item_quantity"]) or 1

    # Line discount if present, else the order-level discount, spread per unit
    line_discount = get_numeric_value(row, columns["item_discount"])
    order_discount = get_numeric_value(row, columns["order_discount"])
    discount = line_discount if line_discount > 0 else order_discount
    discount_per_item = discount / quantity if quantity > 0 else 0

    line_total = get_numeric_value(row, columns["item_total"])
    order_total = get_numeric_value(row, columns["order_total"])
    taxable = get_numeric_value(row, columns["item_taxable"]) or get_numeric_value(row, columns["order_subtotal"])

    taxes = reconcile_taxes(row, columns)
    return InvoiceLineItem(
        sno=1,
        item_name=item_name,
        sku=get_value(row, columns["item_sku"]) or item_name,
        quantity=quantity,
        rate_per_item=get_numeric_value(row, columns["item_price"]),
        discount_per_item=discount_per_item,
        taxable_amount=taxable,
        hsn=get_value(row, columns["hsn"]) or default_hsn,
        gst_rate=taxes.gst_rate,
        cgst=taxes.cgst,
        sgst=taxes.sgst,
        igst=taxes.igst,
        total=line_total if line_total > 0 else order_total,
    )


def collect_metafields(data: ParsedCSVData, row: CSVRow) -> Optional[dict]:
    """Non-empty cells of *row*: metafield columns first, then the rest."""
    collected: dict = {}
    for header in list(data.metafields) + list(data.headers):
        if header in collected:
            continue
        value = row.get(header)
        if value is None or value == "":
            continue
        collected[header] = value
    return collected or None


def build_tax_summary(row: CSVRow, columns: ResolvedColumns) -> TaxSummary:
    subtotal = get_numeric_value(row, columns["order_subtotal"])
    return TaxSummary(
        subtotal=subtotal,
        discount_percent=get_numeric_value(row, columns["discount_percent"]) or None,
        discount_amount=get_numeric_value(row, columns["order_discount"]),
        total_taxable_amount=subtotal,
        total_cgst=get_numeric_value(row, columns["total_cgst"]) or None,
        total_sgst=get_numeric_value(row, columns["total_sgst"]) or None,
        total_igst=get_numeric_value(row, columns["total_igst"]) or None,
        total_tax_amount=get_numeric_value(row, columns["order_tax"]),
        total_amount_after_tax=get_numeric_value(row, columns["order_total"]),
    )


def map_row(
    data: ParsedCSVData,
    row_index: int = 0,
    invoice_no: Optional[str] = None,
    context: Optional[MappingContext] = None,
    columns: Optional[ResolvedColumns] = None,
) -> InvoiceData:
    """
    Map ``data.rows[row_index]`` to an invoice with at most one line item.

    *columns* may be passed in when the caller has already resolved the
    headers (the order aggregator does, once per file).
    """
    context = context or MappingContext()
    columns = columns if columns is not None else resolve_columns(data.headers)
    row = data.rows[row_index]
    today = context.today()
    business = context.business

    order_no = order_number_for(row, columns, row_index)
    bill_to = build_bill_to(row, columns, context.default_country)
    ship_to = build_ship_to(row, columns, bill_to)

    line_items: list[InvoiceLineItem] = []
    if columns["item_name"]:
        line_items.append(_single_line_item(row, columns, context.default_hsn))

    if not invoice_no:
        invoice_no = context.resolve_invoice_no(order_no)

    metadata = InvoiceMetadata(
        invoice_no=invoice_no,
        order_no=order_no,
        invoice_date=today.strftime("%d-%m-%Y"),
        order_date=format_date(get_value(row, columns["order_date"]), today),
        place_of_supply=ship_to.city or ship_to.state or "N/A",
        transport_mode=get_value(row, columns["transport_mode"]),
        payment_method=get_value(row, columns["payment_method"]) or context.default_payment_method,
        state=ship_to.state or business.state,
        state_code=ship_to.state_code or state_code_from_gstin(business.gstin),
        financial_status=normalize_financial_status(get_value(row, columns["financial_status"])),
        cancelled_at=get_value(row, columns["cancelled_at"]) or None,
    )

    logger.debug("field_mapper: row %d -> order %s, %d line item(s)", row_index, order_no, len(line_items))

    return InvoiceData(
        business=business.model_copy(),
        metadata=metadata,
        bill_to_party=bill_to,
        ship_to_party=ship_to,
        line_items=line_items,
        tax_summary=build_tax_summary(row, columns),
        amount_in_words="",
        metafields=collect_metafields(data, row),
    )
