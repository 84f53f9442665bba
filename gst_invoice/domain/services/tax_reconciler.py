# gst_invoice/domain/services/tax_reconciler.py
"""
GST rate and CGST/SGST/IGST amounts for one CSV line.

Exports describe tax in several ways: dedicated rate / amount columns, or
"Tax N Name" + "Tax N Value" pairs (e.g. ``"IGST 3%"`` / ``30.00``).
Name and rate columns carry percentages or labels; value and amount
columns carry currency.  The two are never read interchangeably.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from gst_invoice.domain.models.csv_data import CSVRow
from gst_invoice.domain.services.column_resolver import (
    ResolvedColumns,
    get_numeric_value,
    get_value,
)

GST_RATE_IN_NAME_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%", re.IGNORECASE)

TAX_KINDS = ("cgst", "sgst", "igst")


@dataclass(frozen=True)
class TaxBreakdown:
    gst_rate: float = 0.0
    cgst: Optional[float] = None
    sgst: Optional[float] = None
    igst: Optional[float] = None

    @property
    def has_amounts(self) -> bool:
        return bool(self.cgst or self.sgst or self.igst)

    @property
    def total(self) -> float:
        return (self.cgst or 0.0) + (self.sgst or 0.0) + (self.igst or 0.0)


def extract_gst_rate_from_name(tax_name: str) -> float:
    """``"IGST 3%"`` -> 3.0, ``"CGST 2.5 %"`` -> 2.5, no percentage -> 0."""
    if not tax_name:
        return 0.0
    m = GST_RATE_IN_NAME_RE.search(tax_name)
    return float(m.group(1)) if m else 0.0


def resolve_gst_rate(row: CSVRow, columns: ResolvedColumns, fallback_rate: float = 0.0) -> float:
    """
    GST percentage for a row, in order of preference:

    1. percentage inside the "Tax 1 Name" label;
    2. the dedicated rate column, only if it lies in (0, 100] (larger values
       are almost certainly a tax amount in a mislabelled column);
    3. *fallback_rate* (the order-level rate during aggregation).
    """
    rate = 0.0
    if columns.get("tax1_name"):
        rate = extract_gst_rate_from_name(get_value(row, columns["tax1_name"]))

    if rate == 0 and columns.get("gst_rate"):
        candidate = get_numeric_value(row, columns["gst_rate"])
        if 0 < candidate <= 100:
            rate = candidate

    if rate == 0 and fallback_rate > 0:
        rate = fallback_rate
    return rate


def _assign_from_pair(amounts: dict[str, float], name: str, value: float) -> None:
    label = name.upper()
    if value <= 0:
        return
    for kind in TAX_KINDS:
        if kind.upper() in label:
            amounts[kind] = value
            return


def resolve_tax_amounts(row: CSVRow, columns: ResolvedColumns) -> dict[str, float]:
    """
    CGST/SGST/IGST currency amounts for a row (0 where absent).

    Dedicated amount columns win.  Only when all three are zero are the
    Tax 1 / Tax 2 name-value pairs consulted; the pair's *name* picks the
    bucket and its *value* fills it, Tax 2 after Tax 1.
    """
    amounts = {kind: get_numeric_value(row, columns.get(kind)) for kind in TAX_KINDS}
    if any(amounts.values()):
        return amounts

    if not (columns.get("tax1_name") and columns.get("tax1_value")):
        return amounts

    _assign_from_pair(
        amounts,
        get_value(row, columns["tax1_name"]),
        get_numeric_value(row, columns["tax1_value"]),
    )
    if columns.get("tax2_name") and columns.get("tax2_value"):
        _assign_from_pair(
            amounts,
            get_value(row, columns["tax2_name"]),
            get_numeric_value(row, columns["tax2_value"]),
        )
    return amounts


def reconcile_taxes(row: CSVRow, columns: ResolvedColumns, fallback_rate: float = 0.0) -> TaxBreakdown:
    """Rate plus amounts for one line; zero amounts come back as ``None``."""
    amounts = resolve_tax_amounts(row, columns)
    return TaxBreakdown(
        gst_rate=resolve_gst_rate(row, columns, fallback_rate),
        cgst=amounts["cgst"] or None,
        sgst=amounts["sgst"] or None,
        igst=amounts["igst"] or None,
    )
