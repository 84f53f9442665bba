# gst_invoice/domain/models/csv_data.py

from typing import Optional, Union

from pydantic import BaseModel, Field

# One CSV record: header name -> cell value (absent cells may be None)
CSVValue = Optional[Union[str, int, float]]
CSVRow = dict[str, CSVValue]


class ParsedCSVData(BaseModel):
    headers: list[str] = Field(default_factory=list, description="Trimmed header names, in file order")
    rows: list[CSVRow] = Field(default_factory=list)
    metafields: list[str] = Field(
        default_factory=list,
        description="Headers not recognised as a standard order/invoice column",
    )
