# gst_invoice/domain/models/invoice.py
"""
Invoice data model shared by the mapper, the import pipeline and every
downstream consumer (storage, rendering).

Attributes are snake_case; serialising with ``by_alias=True`` produces the
camelCase shape (``invoiceNo``, ``billToParty``, ...) expected by the
rendering and storage layers.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FinancialStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    REFUNDED = "refunded"
    VOIDED = "voided"


class BusinessDetails(_CamelModel):
    name: str
    legal_name: str
    address: str
    city: str
    state: str
    pincode: str
    email: str
    phone: str
    gstin: str
    cin: Optional[str] = None
    pan: Optional[str] = None


class PartyDetails(_CamelModel):
    name: str = ""
    address: str = ""
    city: Optional[str] = None
    state: str = ""
    state_code: str = Field("", description="2-digit GST state code, '' if unknown")
    pincode: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None
    gstin: Optional[str] = None
    country: str = "India"


class InvoiceLineItem(_CamelModel):
    sno: int = Field(..., description="1-based position within the invoice")
    item_name: str
    sku: str
    quantity: float = 1
    rate_per_item: float = 0
    discount_per_item: float = 0
    taxable_amount: float = 0
    hsn: str
    gst_rate: float = Field(0, description="Percent, 0-100")
    cgst: Optional[float] = None
    sgst: Optional[float] = None
    igst: Optional[float] = None
    total: float = 0


class TaxSummary(_CamelModel):
    subtotal: float = 0
    discount_percent: Optional[float] = None
    discount_amount: float = 0
    total_taxable_amount: float = 0
    total_cgst: Optional[float] = None
    total_sgst: Optional[float] = None
    total_igst: Optional[float] = None
    total_tax_amount: float = 0
    total_amount_after_tax: float = 0


class InvoiceMetadata(_CamelModel):
    invoice_no: str
    order_no: str
    invoice_date: str
    order_date: str
    place_of_supply: str
    transport_mode: Optional[str] = None
    payment_method: str
    state: str
    state_code: str
    financial_status: Optional[FinancialStatus] = None
    cancelled_at: Optional[str] = None


class InvoiceData(_CamelModel):
    business: BusinessDetails
    metadata: InvoiceMetadata
    bill_to_party: PartyDetails
    ship_to_party: PartyDetails
    line_items: list[InvoiceLineItem] = Field(default_factory=list)
    tax_summary: TaxSummary
    amount_in_words: str = ""
    metafields: Optional[dict[str, Union[str, int, float]]] = None

    def to_payload(self) -> dict:
        """camelCase dict for storage / rendering collaborators."""
        return self.model_dump(mode="json", by_alias=True)
