"""
Record schemas shared by the extraction pipelines.

ProductRecord is the normalized structure every bulk-generation row is mapped
into, whether the model answered with a markdown table or a JSON array.
InvoiceRecord and ClassificationRecord describe the invoice and HSN/GST
lookup results; both may instead carry an error sentinel
({"error": True, ...}) when the model reply could not be parsed.

ExtractionRequest captures one bulk-generation call, with the requested
quantity already clamped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, TypedDict, Union

from config import QTY_DEFAULT, QTY_MAX, QTY_MIN


PRICING_MRP_INCLUSIVE = "MRP_INCLUSIVE"
PRICING_BASE_PLUS_GST = "BASE_PLUS_GST"


class ProductRecord(TypedDict, total=False):
    productName: str
    brand: str
    category: str
    sku: str
    unit: str
    hsnCode: str

    gstRate: int
    pricingMode: str

    basePrice: Optional[float]
    mrp: Optional[float]
    costPrice: Optional[float]
    taxAmount: Optional[float]

    price: Optional[float]
    sellingPrice: Optional[float]
    imageUrl: str


class InvoiceLine(TypedDict):
    name: str
    quantity: Union[float, str, None]
    unit: str
    price: Union[float, str, None]


class InvoiceRecord(TypedDict, total=False):
    customerName: str
    customerPhone: str
    invoiceDate: str
    productList: List[InvoiceLine]
    subtotal: Union[float, str, None]
    tax: Union[float, str, None]
    total: Union[float, str, None]

    # error sentinel
    error: bool
    rawText: str
    rawReply: str


class ClassificationRecord(TypedDict, total=False):
    hsn: str
    gst: Union[float, int, str]
    confidence: str
    reference: str

    # error sentinel
    error: bool
    rawReply: str


def clamp_requested_qty(raw: Any) -> int:
    """Coerce a requested product count into [QTY_MIN, QTY_MAX].

    Missing, zero or non-numeric input falls back to QTY_DEFAULT; fractions are truncated.
    """
    try:
        qty = int(float(str(raw).strip()))
    except (TypeError, ValueError, OverflowError):
        qty = 0
    if qty == 0:
        qty = QTY_DEFAULT
    return max(QTY_MIN, min(QTY_MAX, qty))


@dataclass(frozen=True)
class ExtractionRequest:
    brand: str = ""
    category: str = ""
    known_types: str = ""
    description: str = ""
    requested_qty: int = QTY_DEFAULT
    prompt: str = ""

    @classmethod
    def from_body(cls, body: Mapping[str, Any] | None) -> "ExtractionRequest":
        """Build a request from a bulk-generation body ({prompt?, brand?, brandName?, ...})."""
        body = body or {}

        def _s(key: str) -> str:
            value = body.get(key)
            return str(value).strip() if value is not None else ""

        return cls(
            brand=_s("brand") or _s("brandName"),
            category=_s("category"),
            known_types=_s("knownTypes"),
            description=_s("description"),
            requested_qty=clamp_requested_qty(body.get("quantity")),
            prompt=_s("prompt"),
        )
