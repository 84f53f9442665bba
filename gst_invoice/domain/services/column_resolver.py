# gst_invoice/domain/services/column_resolver.py
"""
Header lookup and cell extraction for loosely structured CSV exports.

Nothing here raises on missing data: an unresolved column is ``None`` and
reads from it give ``""`` / ``0``.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping, Optional, Sequence

from gst_invoice.domain.models.csv_data import CSVRow
from gst_invoice.domain.services.field_aliases import FIELD_ALIASES

logger = logging.getLogger("column_resolver")

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")

# field name -> resolved header (or None)
ResolvedColumns = dict[str, Optional[str]]


def find_column(headers: Sequence[str], patterns: Iterable[str]) -> Optional[str]:
    """
    Return the first header containing any of *patterns* (case-insensitive).

    Patterns are tried in order; for the first pattern that matches at all,
    the earliest matching header in document order wins.
    """
    headers_lower = [h.lower() for h in headers]
    for pattern in patterns:
        needle = pattern.lower()
        for idx, header in enumerate(headers_lower):
            if needle in header:
                return headers[idx]
    return None


def resolve_columns(
    headers: Sequence[str],
    aliases: Mapping[str, Sequence[str]] = FIELD_ALIASES,
) -> ResolvedColumns:
    """Resolve every alias table against *headers* once."""
    resolved = {field: find_column(headers, patterns) for field, patterns in aliases.items()}
    logger.debug(
        "column_resolver: resolved %d/%d fields",
        sum(1 for col in resolved.values() if col),
        len(resolved),
    )
    return resolved


def get_value(row: CSVRow, column: Optional[str]) -> str:
    if not column:
        return ""
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def get_numeric_value(row: CSVRow, column: Optional[str]) -> float:
    """
    Best-effort number from a cell: ``"₹1,234.50"`` -> ``1234.5``.

    Every character other than digits, ``.`` and ``-`` is dropped before
    parsing, so separate numbers in one cell run together
    (``"abc 12 def 34"`` -> ``1234``).  Existing exports rely on this
    behaviour; do not narrow it to the first numeric token.
    """
    cleaned = _NON_NUMERIC_RE.sub("", get_value(row, column))
    if not cleaned:
        return 0.0
    try:
        return float(cleaned)
    except ValueError:
        return _parse_float_prefix(cleaned)


def _parse_float_prefix(text: str) -> float:
    # Longest leading number: "12.5.3" -> 12.5, "1-2" -> 1, "-" -> 0
    m = re.match(r"-?(?:\d+\.?\d*|\.\d+)", text)
    if not m:
        return 0.0
    return float(m.group(0))
