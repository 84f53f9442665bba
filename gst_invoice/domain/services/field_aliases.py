# gst_invoice/domain/services/field_aliases.py
"""
Column alias tables for order exports (Shopify and similar).

Each semantic field maps to an ordered tuple of lowercase name fragments.
A header matches an alias when it *contains* the fragment, and aliases are
tried in the declared order (see ``column_resolver.find_column``).  Keep
this module as plain data: adding support for a new export format should
only mean adding fragments here.
"""

from __future__ import annotations

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    # ---- order metadata ----
    "order_no": ("order number", "order no", "order id", "name"),
    "order_date": ("order date", "created at", "paid at"),
    "payment_method": ("payment method", "payment reference"),
    "transport_mode": ("shipping method", "transport mode", "fulfillment status"),
    "financial_status": ("financial status", "payment status", "status"),
    "cancelled_at": ("cancelled at", "cancelled date"),

    # ---- bill to ----
    "billing_name": ("billing name", "name", "customer name"),
    "billing_street": ("billing street", "billing address1", "billing address"),
    "billing_city": ("billing city",),
    "billing_zip": ("billing zip", "billing pincode"),
    "billing_state": ("billing province", "billing province name", "billing state"),
    "billing_country": ("billing country",),
    "billing_phone": ("billing phone", "phone"),
    "email": ("email", "billing email", "customer email"),
    "gstin": ("gstin", "customer gstin", "buyer gstin"),

    # ---- ship to ----
    "shipping_name": ("shipping name", "billing name", "name"),
    "shipping_street": ("shipping street", "shipping address1", "shipping address"),
    "shipping_city": ("shipping city",),
    "shipping_zip": ("shipping zip", "shipping pincode"),
    "shipping_state": ("shipping province", "shipping province name", "shipping state"),
    "shipping_country": ("shipping country",),
    "shipping_phone": ("shipping phone", "phone"),

    # ---- line item ----
    "item_name": ("lineitem name", "product name", "item name"),
    "item_sku": ("lineitem sku", "sku", "variant sku"),
    "item_quantity": ("lineitem quantity", "quantity", "qty"),
    "item_price": ("lineitem price", "price", "unit price"),
    "item_discount": ("lineitem discount", "discount", "discount amount"),
    "item_taxable": ("taxable amount", "lineitem taxable", "subtotal"),
    "item_total": ("lineitem total", "total", "item total"),
    "hsn": ("hsn", "hsn code", "tax code"),

    # ---- tax (rates / labels) ----
    "tax1_name": ("tax 1 name",),
    "tax2_name": ("tax 2 name",),
    "gst_rate": ("gst rate", "tax rate"),

    # ---- tax (currency amounts) ----
    "tax1_value": ("tax 1 value",),
    "tax2_value": ("tax 2 value",),
    "cgst": ("cgst", "cgst amount"),
    "sgst": ("sgst", "sgst amount"),
    "igst": ("igst", "igst amount"),

    # ---- order totals ----
    "order_subtotal": ("subtotal", "total before tax", "taxable amount"),
    "order_total": ("total", "total amount", "total amount after tax", "grand total"),
    "order_tax": ("total tax", "tax amount", "taxes"),
    "order_discount": ("discount amount", "total discount", "discount"),
    "discount_percent": ("discount %", "discount percent", "discount percentage"),
    "total_cgst": ("total cgst", "cgst total"),
    "total_sgst": ("total sgst", "sgst total"),
    "total_igst": ("total igst", "igst total"),
}

# Header fragments the CSV parser treats as standard order columns; any
# header containing none of them is surfaced as a metafield.
STANDARD_FIELDS: tuple[str, ...] = (
    "name",
    "email",
    "order number",
    "order no",
    "order id",
    "order date",
    "created at",
    "billing name",
    "billing street",
    "billing city",
    "billing zip",
    "billing province",
    "billing country",
    "billing phone",
    "shipping name",
    "shipping street",
    "shipping city",
    "shipping zip",
    "shipping province",
    "shipping country",
    "shipping phone",
    "lineitem name",
    "lineitem quantity",
    "lineitem price",
    "lineitem sku",
    "total",
    "subtotal",
    "tax",
    "discount",
    "payment method",
    "fulfillment status",
)
