"""Shared test fixtures for the GST invoice test suite."""

import asyncio
from datetime import date

import pytest

from gst_invoice.domain.models.csv_data import ParsedCSVData
from gst_invoice.domain.services.csv_parser import detect_metafields
from gst_invoice.domain.services.field_mapper import MappingContext
from gst_invoice.domain.services.invoice_numbering import (
    InMemoryInvoiceSettingsProvider,
    InvoiceNumbering,
    InvoiceSettings,
)
from gst_invoice.infrastructure.repositories.invoice_repository import InMemoryInvoiceRepository


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


def make_data(headers: list[str], *rows: list) -> ParsedCSVData:
    """Build ``ParsedCSVData`` from a header list and positional rows."""
    return ParsedCSVData(
        headers=headers,
        rows=[dict(zip(headers, row)) for row in rows],
        metafields=detect_metafields(headers),
    )


@pytest.fixture
def fixed_today() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def context(fixed_today) -> MappingContext:
    """Mapping context without numbering and with a pinned invoice date."""
    return MappingContext(invoice_date=fixed_today)


@pytest.fixture
def store() -> InMemoryInvoiceRepository:
    return InMemoryInvoiceRepository()


@pytest.fixture
def numbering(store) -> InvoiceNumbering:
    """Counter-mode numbering starting at O-/3340."""
    provider = InMemoryInvoiceSettingsProvider(InvoiceSettings(prefix="O-/", starting_number=3340))
    return InvoiceNumbering(provider, store=store)


@pytest.fixture
def single_row_data() -> ParsedCSVData:
    """The minimal one-order export: IGST carried in a Tax 1 pair."""
    return make_data(
        [
            "Order Number", "Billing Name", "Billing State", "Lineitem Name",
            "Lineitem Quantity", "Lineitem Price", "Tax 1 Name", "Tax 1 Value", "Total",
        ],
        ["5001", "Jane Doe", "Telangana", "Earrings", "2", "500", "IGST 3%", "30", "1030"],
    )


SHOPIFY_HEADERS = [
    "Name", "Email", "Financial Status", "Created at", "Lineitem quantity",
    "Lineitem name", "Lineitem price", "Lineitem sku", "Lineitem discount",
    "Taxes", "Total", "Discount Amount", "Billing Name", "Billing City",
    "Billing Province", "Shipping City", "Shipping Province", "Tax 1 Name",
    "Tax 1 Value", "Payment Method", "Gift Note",
]


@pytest.fixture
def shopify_csv() -> str:
    """Shopify-style export: two orders, the first spread over three rows."""
    lines = [
        ",".join(SHOPIFY_HEADERS),
        "#1001,asha@example.com,paid,2024-03-05 10:00:00 +0530,2,Pearl Earrings,500,EAR-1,0,"
        "30,1030,0,Asha Rao,Hyderabad,Telangana,Hyderabad,Telangana,IGST 3%,30,Razorpay,Gift wrap",
        "#1001,,,,1,Pearl Ring,1000,RING-1,0,,,,,,,,,,,,",
        "#1001,,,,1,,0,,0,,,,,,,,,,,,",
        "#1002,ravi@example.com,pending,2024-03-06 09:30:00 +0530,1,Pearl Pendant,2000,PEN-1,100,"
        "57,1957,100,Ravi Kumar,Mumbai,Maharashtra,Pune,Maharashtra,IGST 3%,57,COD,",
    ]
    return "\n".join(lines) + "\n"
