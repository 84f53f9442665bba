"""Tests for invoice number allocation."""

from gst_invoice.core.config import settings
from gst_invoice.domain.services.field_mapper import MappingContext, map_row
from gst_invoice.domain.services.invoice_numbering import (
    InMemoryInvoiceSettingsProvider,
    InvoiceNumbering,
    InvoiceSettings,
    extract_order_sequence,
    increment_invoice_number,
    map_order_to_invoice_number,
)

from conftest import make_data

ANCHORED = InvoiceSettings(prefix="O-/", starting_order_number=6244, starting_invoice_number=3579)


class TestIncrementInvoiceNumber:
    def test_trailing_number(self):
        assert increment_invoice_number("O-/3579") == "O-/3580"

    def test_no_digits(self):
        assert increment_invoice_number("ORDER") == "ORDER-1"

    def test_carry(self):
        assert increment_invoice_number("INV-099") == "INV-100"


class TestExtractOrderSequence:
    def test_last_digit_run(self):
        assert extract_order_sequence("MAN-25-6246") == 6246

    def test_hash_prefix(self):
        assert extract_order_sequence("#1001") == 1001

    def test_no_digits(self):
        assert extract_order_sequence("ABC") is None
        assert extract_order_sequence("") is None


class TestOrderMapping:
    """Invoice = starting invoice + (order seq - starting order)."""

    def test_offset_applied(self):
        assert map_order_to_invoice_number("MAN-25-6246", ANCHORED) == "O-/3581"

    def test_anchor_order(self):
        assert map_order_to_invoice_number("6244", ANCHORED) == "O-/3579"

    def test_without_anchors(self):
        assert map_order_to_invoice_number("MAN-25-6246", InvoiceSettings()) is None

    def test_half_anchored(self):
        assert map_order_to_invoice_number("6246", InvoiceSettings(starting_order_number=6244)) is None

    def test_order_without_digits(self):
        assert map_order_to_invoice_number("MANUAL", ANCHORED) is None


class TestInvoiceNumbering:
    def test_counter_advances(self):
        numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(InvoiceSettings(starting_number=10)))
        assert numbering.next_invoice_number() == "O-/10"
        assert numbering.next_invoice_number() == "O-/11"
        assert numbering.provider.get().starting_number == 12

    def test_peek_does_not_advance(self):
        numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(InvoiceSettings(starting_number=10)))
        assert numbering.next_invoice_number(increment=False) == "O-/10"
        assert numbering.next_invoice_number() == "O-/10"

    def test_auto_increment_off(self):
        provider = InMemoryInvoiceSettingsProvider(InvoiceSettings(starting_number=10, auto_increment=False))
        numbering = InvoiceNumbering(provider)
        assert numbering.next_invoice_number() == "O-/10"
        assert numbering.next_invoice_number() == "O-/10"

    def test_mapping_wins_for_orders(self):
        numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(ANCHORED))
        assert numbering.invoice_number_for_order("MAN-25-6246") == "O-/3581"
        # counter untouched
        assert numbering.provider.get().starting_number == ANCHORED.starting_number

    def test_counter_fallback_for_unmappable_order(self):
        numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(ANCHORED))
        assert numbering.invoice_number_for_order("MANUAL") == f"O-/{ANCHORED.starting_number}"

    def test_mapping_through_mapper(self, fixed_today):
        numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(ANCHORED))
        context = MappingContext(numbering=numbering, invoice_date=fixed_today)
        data = make_data(["Order Number", "Billing Name"], ["MAN-25-6246", "Ravi"])
        assert map_row(data, 0, context=context).metadata.invoice_no == "O-/3581"


class TestInvoiceNumberExists:
    def test_without_store(self, event_loop):
        numbering = InvoiceNumbering(InMemoryInvoiceSettingsProvider(InvoiceSettings()))
        assert event_loop.run_until_complete(numbering.invoice_number_exists("O-/1")) is False

    def test_with_store(self, event_loop, store, numbering, single_row_data, context):
        invoice = map_row(single_row_data, 0, invoice_no="O-/3340", context=context)
        event_loop.run_until_complete(store.create(invoice))

        assert event_loop.run_until_complete(numbering.invoice_number_exists("O-/3340")) is True
        assert event_loop.run_until_complete(numbering.invoice_number_exists("O-/3341")) is False


class TestInvoiceSettings:
    def test_from_app_settings(self):
        invoice_settings = InvoiceSettings.from_app_settings()
        assert invoice_settings.prefix == settings.INVOICE_PREFIX
        assert invoice_settings.starting_number == settings.INVOICE_STARTING_NUMBER
        assert invoice_settings.auto_increment == settings.INVOICE_AUTO_INCREMENT

    def test_defaults(self):
        invoice_settings = InvoiceSettings()
        assert invoice_settings.prefix == "O-/"
        assert invoice_settings.starting_number == 3340
        assert invoice_settings.has_order_mapping is False

    def test_fields(self):
        assert set(InvoiceSettings.model_fields) == {
            "prefix",
            "starting_number",
            "auto_increment",
            "starting_order_number",
            "starting_invoice_number",
        }

    def test_provider_hands_out_copies(self):
        provider = InMemoryInvoiceSettingsProvider(InvoiceSettings(starting_number=5))
        provider.get().starting_number = 99
        assert provider.get().starting_number == 5
