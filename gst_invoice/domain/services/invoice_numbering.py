# gst_invoice/domain/services/invoice_numbering.py
"""
Invoice number allocation.

Two modes, both driven by ``InvoiceSettings`` from an injected provider:

* **order mapping** - when both ``starting_order_number`` and
  ``starting_invoice_number`` are set, an order's invoice number is
  ``prefix + starting_invoice_number + (order_seq - starting_order_number)``
  where ``order_seq`` is the last run of digits in the order number
  (``"MAN-25-6246"`` -> 6246).  Assumes order numbers are sequential.
* **counter** - ``prefix + starting_number``, advancing the stored counter
  when ``auto_increment`` is on.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Optional, Protocol

from pydantic import BaseModel, Field

from gst_invoice.core.config import settings as app_settings

if TYPE_CHECKING:
    from gst_invoice.infrastructure.repositories.invoice_repository import InvoiceStore

logger = logging.getLogger("invoice_numbering")

_TRAILING_NUMBER_RE = re.compile(r"^(.+?)(\d+)$")
_LAST_DIGIT_RUN_RE = re.compile(r"(\d+)(?!.*\d)")


class InvoiceSettings(BaseModel):
    prefix: str = "O-/"
    starting_number: int = Field(3340, description="Next number handed out in counter mode")
    auto_increment: bool = True
    starting_order_number: Optional[int] = None
    starting_invoice_number: Optional[int] = None

    @property
    def has_order_mapping(self) -> bool:
        return self.starting_order_number is not None and self.starting_invoice_number is not None

    @classmethod
    def from_app_settings(cls) -> "InvoiceSettings":
        return cls(
            prefix=app_settings.INVOICE_PREFIX,
            starting_number=app_settings.INVOICE_STARTING_NUMBER,
            auto_increment=app_settings.INVOICE_AUTO_INCREMENT,
            starting_order_number=app_settings.STARTING_ORDER_NUMBER,
            starting_invoice_number=app_settings.STARTING_INVOICE_NUMBER,
        )


class InvoiceSettingsProvider(Protocol):
    def get(self) -> InvoiceSettings: ...

    def save(self, invoice_settings: InvoiceSettings) -> None: ...


class InMemoryInvoiceSettingsProvider:
    """Holds invoice settings for the lifetime of the process."""

    def __init__(self, invoice_settings: InvoiceSettings | None = None) -> None:
        self._settings = invoice_settings or InvoiceSettings.from_app_settings()

    def get(self) -> InvoiceSettings:
        return self._settings.model_copy()

    def save(self, invoice_settings: InvoiceSettings) -> None:
        self._settings = invoice_settings.model_copy()


def increment_invoice_number(invoice_no: str) -> str:
    """``"O-/3579"`` -> ``"O-/3580"``; no trailing digits -> append ``"-1"``."""
    m = _TRAILING_NUMBER_RE.match(invoice_no)
    if m:
        prefix, number = m.groups()
        return f"{prefix}{int(number) + 1}"
    return f"{invoice_no}-1"


def extract_order_sequence(order_no: str) -> Optional[int]:
    """Last run of digits in an order number, or None if it has none."""
    if not order_no:
        return None
    m = _LAST_DIGIT_RUN_RE.search(order_no)
    return int(m.group(1)) if m else None


def map_order_to_invoice_number(order_no: str, invoice_settings: InvoiceSettings) -> Optional[str]:
    """Invoice number from the order mapping anchors; None if it can't apply."""
    if not invoice_settings.has_order_mapping:
        return None
    order_seq = extract_order_sequence(order_no)
    if order_seq is None:
        return None
    offset = order_seq - invoice_settings.starting_order_number
    return f"{invoice_settings.prefix}{invoice_settings.starting_invoice_number + offset}"


class InvoiceNumbering:
    def __init__(
        self,
        provider: InvoiceSettingsProvider | None = None,
        store: "InvoiceStore | None" = None,
    ) -> None:
        self.provider = provider or InMemoryInvoiceSettingsProvider()
        self.store = store

    def next_invoice_number(self, increment: bool = True) -> str:
        current = self.provider.get()
        invoice_no = f"{current.prefix}{current.starting_number}"
        if increment and current.auto_increment:
            self.provider.save(current.model_copy(update={"starting_number": current.starting_number + 1}))
        return invoice_no

    def invoice_number_for_order(self, order_no: str) -> str:
        mapped = map_order_to_invoice_number(order_no, self.provider.get())
        if mapped is not None:
            logger.debug("invoice_numbering: order %s -> %s (mapped)", order_no, mapped)
            return mapped
        invoice_no = self.next_invoice_number()
        logger.debug("invoice_numbering: order %s -> %s (counter)", order_no, invoice_no)
        return invoice_no

    async def invoice_number_exists(self, invoice_no: str) -> bool:
        if self.store is None:
            return False
        return await self.store.exists(invoice_no)
