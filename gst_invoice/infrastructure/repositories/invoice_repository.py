# gst_invoice/infrastructure/repositories/invoice_repository.py
"""
Invoice storage collaborator.

Invoice numbers are unique, and an order has at most one invoice.  The
in-memory repository enforces both; a database-backed store is expected to
do the same with unique constraints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Protocol

from gst_invoice.domain.models.invoice import InvoiceData

logger = logging.getLogger("invoice_repository")


class DuplicateInvoiceError(Exception):
    """Raised when an invoice number or order number is already taken."""

    def __init__(self, message: str, existing: Optional["StoredInvoice"] = None) -> None:
        super().__init__(message)
        self.existing = existing


@dataclass
class StoredInvoice:
    invoice_no: str
    order_no: str
    invoice_date: str
    invoice_data: InvoiceData
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InvoiceStore(Protocol):
    async def exists(self, invoice_no: str) -> bool: ...

    async def find_by_invoice_no(self, invoice_no: str) -> Optional[StoredInvoice]: ...

    async def find_by_order(self, order_no: str) -> Optional[StoredInvoice]: ...

    async def create(self, invoice: InvoiceData) -> StoredInvoice: ...


class InMemoryInvoiceRepository:
    def __init__(self) -> None:
        self._by_invoice_no: dict[str, StoredInvoice] = {}
        self._by_order_no: dict[str, StoredInvoice] = {}

    async def exists(self, invoice_no: str) -> bool:
        return invoice_no in self._by_invoice_no

    async def find_by_invoice_no(self, invoice_no: str) -> Optional[StoredInvoice]:
        return self._by_invoice_no.get(invoice_no)

    async def find_by_order(self, order_no: str) -> Optional[StoredInvoice]:
        return self._by_order_no.get(order_no)

    async def create(self, invoice: InvoiceData) -> StoredInvoice:
        invoice_no = invoice.metadata.invoice_no
        order_no = invoice.metadata.order_no

        existing = self._by_invoice_no.get(invoice_no)
        if existing is not None:
            raise DuplicateInvoiceError(f"Invoice number {invoice_no} already exists", existing)
        existing = self._by_order_no.get(order_no)
        if existing is not None:
            raise DuplicateInvoiceError(
                f"Order {order_no} already has invoice {existing.invoice_no}", existing
            )

        stored = StoredInvoice(
            invoice_no=invoice_no,
            order_no=order_no,
            invoice_date=invoice.metadata.invoice_date,
            invoice_data=invoice,
        )
        self._by_invoice_no[invoice_no] = stored
        self._by_order_no[order_no] = stored
        logger.debug("invoice_repository: stored %s for order %s", invoice_no, order_no)
        return stored

    def __len__(self) -> int:
        return len(self._by_invoice_no)
