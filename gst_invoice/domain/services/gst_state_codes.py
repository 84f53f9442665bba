# gst_invoice/domain/services/gst_state_codes.py
"""GST state codes for the 36 Indian states and union territories."""

from __future__ import annotations

STATE_CODES: dict[str, str] = {
    "jammu and kashmir": "01", "himachal pradesh": "02", "punjab": "03",
    "chandigarh": "04", "uttarakhand": "05", "haryana": "06",
    "delhi": "07", "rajasthan": "08", "uttar pradesh": "09",
    "bihar": "10", "sikkim": "11", "arunachal pradesh": "12",
    "nagaland": "13", "manipur": "14", "mizoram": "15",
    "tripura": "16", "meghalaya": "17", "assam": "18",
    "west bengal": "19", "jharkhand": "20", "odisha": "21",
    "chhattisgarh": "22", "madhya pradesh": "23", "gujarat": "24",
    "andaman and nicobar islands": "25",
    "dadra and nagar haveli and daman and diu": "26",
    "maharashtra": "27", "karnataka": "29", "goa": "30",
    "lakshadweep": "31", "kerala": "32", "tamil nadu": "33",
    "puducherry": "34", "telangana": "36", "andhra pradesh": "37",
    "ladakh": "38",
}


def get_state_code(state: str | None) -> str:
    """Map a state name to its 2-digit code; '' when unknown."""
    if not state:
        return ""
    return STATE_CODES.get(state.strip().lower(), "")


def state_code_from_gstin(gstin: str | None) -> str:
    """First two characters of a GSTIN are the registering state's code."""
    if not gstin:
        return ""
    return gstin.strip()[:2]
