"""Tests for the in-memory invoice store."""

import pytest

from gst_invoice.domain.services.field_mapper import map_row
from gst_invoice.infrastructure.repositories.invoice_repository import DuplicateInvoiceError


@pytest.fixture
def invoice(single_row_data, context):
    return map_row(single_row_data, 0, invoice_no="O-/3340", context=context)


class TestInMemoryInvoiceRepository:
    def test_create_and_find(self, event_loop, store, invoice):
        stored = event_loop.run_until_complete(store.create(invoice))

        assert stored.invoice_no == "O-/3340"
        assert stored.order_no == "5001"
        assert stored.invoice_date == "15-01-2025"
        assert stored.invoice_data == invoice
        assert len(store) == 1
        assert event_loop.run_until_complete(store.find_by_invoice_no("O-/3340")) is stored
        assert event_loop.run_until_complete(store.find_by_order("5001")) is stored
        assert event_loop.run_until_complete(store.exists("O-/3340")) is True

    def test_missing(self, event_loop, store):
        assert event_loop.run_until_complete(store.find_by_invoice_no("O-/1")) is None
        assert event_loop.run_until_complete(store.find_by_order("1")) is None
        assert event_loop.run_until_complete(store.exists("O-/1")) is False

    def test_duplicate_invoice_number(self, event_loop, store, invoice):
        first = event_loop.run_until_complete(store.create(invoice))
        other_order = invoice.model_copy(
            update={"metadata": invoice.metadata.model_copy(update={"order_no": "5002"})}
        )

        with pytest.raises(DuplicateInvoiceError, match="Invoice number O-/3340 already exists") as exc_info:
            event_loop.run_until_complete(store.create(other_order))
        assert exc_info.value.existing is first
        assert len(store) == 1

    def test_one_invoice_per_order(self, event_loop, store, invoice):
        event_loop.run_until_complete(store.create(invoice))
        renumbered = invoice.model_copy(
            update={"metadata": invoice.metadata.model_copy(update={"invoice_no": "O-/3341"})}
        )

        with pytest.raises(DuplicateInvoiceError, match="Order 5001 already has invoice O-/3340"):
            event_loop.run_until_complete(store.create(renumbered))
        assert event_loop.run_until_complete(store.exists("O-/3341")) is False
