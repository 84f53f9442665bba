# gst_invoice/domain/services/csv_parser.py
"""
CSV export -> ``ParsedCSVData``.

The first row is the header row.  Headers and cells are trimmed and blank
lines are skipped.  Every other row must have exactly one cell per header;
mismatched rows are collected and rejected together, as is a file without
any data rows.
"""

from __future__ import annotations

import csv
import io
import logging
from typing import IO, Union

from gst_invoice.domain.models.csv_data import CSVRow, ParsedCSVData
from gst_invoice.domain.services.field_aliases import STANDARD_FIELDS

logger = logging.getLogger("csv_parser")


class CSVParseError(Exception):
    """The export could not be read as a header + rows CSV file."""


def detect_metafields(headers: list[str]) -> list[str]:
    """Headers that contain none of the standard order column names."""
    return [
        header
        for header in headers
        if not any(field in header.lower() for field in STANDARD_FIELDS)
    ]


def _to_text(source: Union[str, bytes, IO[str]]) -> str:
    if isinstance(source, bytes):
        try:
            return source.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise CSVParseError("Could not read the file. Please upload a valid UTF-8 CSV.") from exc
    if isinstance(source, str):
        return source
    return source.read()


def parse_csv(source: Union[str, bytes, IO[str]]) -> ParsedCSVData:
    text = _to_text(source).lstrip("\ufeff")
    reader = csv.reader(io.StringIO(text))
    try:
        raw_headers = next(reader, [])
        headers = [h.strip() for h in raw_headers]
        rows: list[CSVRow] = []
        errors: list[str] = []

        for cells in reader:
            if all(not cell.strip() for cell in cells):
                continue
            if len(cells) != len(headers):
                problem = "Too many fields" if len(cells) > len(headers) else "Too few fields"
                errors.append(
                    f"{problem}: expected {len(headers)} fields but parsed "
                    f"{len(cells)} at row {reader.line_num}"
                )
                continue
            rows.append(dict(zip(headers, (cell.strip() for cell in cells))))
    except csv.Error as exc:
        raise CSVParseError(f"Failed to parse CSV: {exc}") from exc

    if errors:
        raise CSVParseError(f"CSV parsing errors: {', '.join(errors)}")

    if not rows:
        raise CSVParseError("CSV file is empty or has no valid data")

    metafields = detect_metafields(headers)
    logger.info(
        "csv_parser: parsed %d row(s), %d column(s), %d metafield(s)",
        len(rows),
        len(headers),
        len(metafields),
    )
    return ParsedCSVData(headers=headers, rows=rows, metafields=metafields)
