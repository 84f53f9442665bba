# gst_invoice/domain/services/order_aggregator.py
"""
Multi-row mapping: exports list one row per line item, repeating (or
leaving blank) the order-level columns.  Rows are grouped by order number
and each group becomes a single invoice.

Rules:
- rows without an order number get ``ORDER-{n}`` (1-based row position)
  and form their own group;
- the *primary* row is the first one with a billing name (else the first
  row); it supplies every order-level field;
- each row with a non-empty item name becomes a line item, numbered from 1;
- an explicit order total (> 0) on the primary row is kept as-is, otherwise
  totals are summed from the line items.
"""

from __future__ import annotations

import logging
from typing import Optional

from gst_invoice.domain.models.csv_data import CSVRow, ParsedCSVData
from gst_invoice.domain.models.invoice import InvoiceData, InvoiceLineItem, TaxSummary
from gst_invoice.domain.services.column_resolver import (
    ResolvedColumns,
    get_numeric_value,
    get_value,
    resolve_columns,
)
from gst_invoice.domain.services.field_mapper import MappingContext, map_row, order_number_for
from gst_invoice.domain.services.tax_reconciler import reconcile_taxes, resolve_gst_rate

logger = logging.getLogger("order_aggregator")


def group_rows_by_order(data: ParsedCSVData, columns: ResolvedColumns) -> dict[str, list[int]]:
    """Order number -> row indices, in first-seen order."""
    groups: dict[str, list[int]] = {}
    for index, row in enumerate(data.rows):
        groups.setdefault(order_number_for(row, columns, index), []).append(index)
    return groups


def select_primary_row(data: ParsedCSVData, row_indices: list[int], columns: ResolvedColumns) -> int:
    for index in row_indices:
        if get_value(data.rows[index], columns["billing_name"]):
            return index
    return row_indices[0]


def _line_taxable_amount(
    row: CSVRow,
    columns: ResolvedColumns,
    has_tax_amounts: bool,
    total: float,
    quantity: float,
    rate_per_item: float,
) -> float:
    line_discount = get_numeric_value(row, columns["item_discount"])
    tax1_value = get_numeric_value(row, columns["tax1_value"])

    if has_tax_amounts and total > 0:
        # Tax-inclusive export: the stated total is the taxable base
        return total
    if has_tax_amounts:
        return get_numeric_value(row, columns["item_taxable"]) or (rate_per_item * quantity - line_discount)
    if columns["tax1_value"] and tax1_value > 0:
        # Unit price includes tax: back the per-unit tax out of the price
        return (rate_per_item - tax1_value / quantity) * quantity - line_discount
    return get_numeric_value(row, columns["item_taxable"]) or (rate_per_item * quantity - line_discount)


def build_line_item(
    row: CSVRow,
    columns: ResolvedColumns,
    sno: int,
    order_gst_rate: float,
    default_hsn: str,
) -> InvoiceLineItem:
    item_name = get_value(row, columns["item_name"])
    quantity = get_numeric_value(row, columns["item_quantity"]) or 1
    rate_per_item = get_numeric_value(row, columns["item_price"])
    line_discount = get_numeric_value(row, columns["item_discount"])

    taxes = reconcile_taxes(row, columns, fallback_rate=order_gst_rate)

    # Order total first (only the order's first row usually carries it)
    order_total = get_numeric_value(row, columns["order_total"])
    line_total = get_numeric_value(row, columns["item_total"])
    total = order_total if order_total > 0 else (line_total if line_total > 0 else 0.0)

    return InvoiceLineItem(
        sno=sno,
        item_name=item_name,
        sku=get_value(row, columns["item_sku"]) or item_name,
        quantity=quantity,
        rate_per_item=rate_per_item,
        discount_per_item=line_discount / quantity if quantity > 0 else 0,
        taxable_amount=_line_taxable_amount(row, columns, taxes.has_amounts, total, quantity, rate_per_item),
        hsn=get_value(row, columns["hsn"]) or default_hsn,
        gst_rate=taxes.gst_rate,
        cgst=taxes.cgst,
        sgst=taxes.sgst,
        igst=taxes.igst,
        total=total,
    )


def _explicit_or_sum(explicit: Optional[float], summed: float) -> Optional[float]:
    if explicit:
        return explicit
    return summed if summed > 0 else None


def combine_tax_summary(
    base: TaxSummary,
    line_items: list[InvoiceLineItem],
    explicit_order_total: float,
) -> TaxSummary:
    """Order-level totals: explicit values from the primary row, else sums."""
    subtotal = sum(item.taxable_amount for item in line_items)
    discount = sum(item.discount_per_item * item.quantity for item in line_items)
    cgst = sum(item.cgst or 0 for item in line_items)
    sgst = sum(item.sgst or 0 for item in line_items)
    igst = sum(item.igst or 0 for item in line_items)
    grand_total = sum(item.total for item in line_items)

    trust_order_total = explicit_order_total > 0
    return base.model_copy(
        update={
            "subtotal": base.subtotal if trust_order_total else subtotal,
            "discount_amount": base.discount_amount or discount,
            "total_taxable_amount": base.total_taxable_amount if trust_order_total else subtotal - discount,
            "total_cgst": _explicit_or_sum(base.total_cgst, cgst),
            "total_sgst": _explicit_or_sum(base.total_sgst, sgst),
            "total_igst": _explicit_or_sum(base.total_igst, igst),
            "total_tax_amount": base.total_tax_amount or (cgst + sgst + igst),
            "total_amount_after_tax": explicit_order_total if trust_order_total else grand_total,
        }
    )


def map_order_group(
    data: ParsedCSVData,
    row_indices: list[int],
    columns: ResolvedColumns,
    context: MappingContext,
) -> InvoiceData:
    primary_index = select_primary_row(data, row_indices, columns)
    primary_row = data.rows[primary_index]
    base = map_row(data, primary_index, context=context, columns=columns)

    order_gst_rate = resolve_gst_rate(primary_row, columns)

    line_items: list[InvoiceLineItem] = []
    if columns["item_name"]:
        for index in row_indices:
            row = data.rows[index]
            if not get_value(row, columns["item_name"]):
                continue
            line_items.append(
                build_line_item(row, columns, len(line_items) + 1, order_gst_rate, context.default_hsn)
            )

    if not line_items:
        return base

    explicit_total = get_numeric_value(primary_row, columns["order_total"])
    return base.model_copy(
        update={
            "line_items": line_items,
            "tax_summary": combine_tax_summary(base.tax_summary, line_items, explicit_total),
        }
    )


def map_orders(data: ParsedCSVData, context: Optional[MappingContext] = None) -> list[InvoiceData]:
    """One invoice per distinct order number, in first-seen order."""
    context = context or MappingContext()
    columns = resolve_columns(data.headers)
    groups = group_rows_by_order(data, columns)
    logger.debug("order_aggregator: %d row(s) -> %d order(s)", len(data.rows), len(groups))
    return [map_order_group(data, indices, columns, context) for indices in groups.values()]
