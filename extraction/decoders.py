"""
Decoders for the invoice and HSN/GST classification replies.

Both degrade to an error sentinel instead of raising when the reply is not a
JSON object, so the caller still gets the raw text for manual recovery.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Union

from config.logging import get_logger
from domain.canonical import ClassificationRecord, InvoiceLine, InvoiceRecord

from .normalizer import normalize_reply

LOG = get_logger("decoders")

# Optional sign, optional currency marker, then a plain or comma-grouped number.
_AMOUNT = re.compile(
    r"^(?P<sign>[-+])?\s*(?:\u20b9|rs\.?|inr)?\s*(?P<number>[-+]?(?:\d[\d,]*)?\.?\d+)$",
    flags=re.IGNORECASE,
)


def _load_object(clean: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(clean)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _amount(value: Any) -> Union[float, str, None]:
    """JSON numbers pass through; numeric strings keep their sign; other text is kept as-is."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    match = _AMOUNT.match(text)
    if not match:
        return text
    number = float(match.group("number").replace(",", ""))
    return -number if match.group("sign") == "-" else number


def _invoice_line(item: Any) -> InvoiceLine:
    item = item if isinstance(item, dict) else {}
    return InvoiceLine(
        name=_as_str(item.get("name")),
        quantity=_amount(item.get("quantity")),
        unit=_as_str(item.get("unit")),
        price=_amount(item.get("price")),
    )


def decode_invoice(reply: str, ocr_text: str) -> InvoiceRecord:
    """Parse an invoice reply into the full success shape, or the error sentinel."""
    clean = normalize_reply(reply)
    parsed = _load_object(clean)
    if parsed is None:
        LOG.warning("Failed to parse invoice reply: %.200s", clean)
        return InvoiceRecord(error=True, rawText=ocr_text, rawReply=clean)

    items = parsed.get("productList")
    product_list: List[InvoiceLine] = [_invoice_line(it) for it in items] if isinstance(items, list) else []

    return InvoiceRecord(
        customerName=_as_str(parsed.get("customerName")),
        customerPhone=_as_str(parsed.get("customerPhone")),
        invoiceDate=_as_str(parsed.get("invoiceDate")),
        productList=product_list,
        subtotal=_amount(parsed.get("subtotal")),
        tax=_amount(parsed.get("tax")),
        total=_amount(parsed.get("total")),
    )


def decode_classification(reply: str) -> ClassificationRecord:
    """Parse an HSN/GST reply; each field falls back to its own default."""
    clean = normalize_reply(reply)
    parsed = _load_object(clean)
    if parsed is None:
        LOG.warning("Failed to parse HSN/GST reply: %.200s", clean)
        return ClassificationRecord(error=True, rawReply=clean)

    hsn = parsed.get("hsn")
    gst = parsed.get("gst")
    confidence = parsed.get("confidence")
    reference = parsed.get("reference")

    return ClassificationRecord(
        hsn=hsn if isinstance(hsn, str) else "",
        gst=gst if isinstance(gst, (int, float, str)) and not isinstance(gst, bool) else "",
        confidence=confidence if isinstance(confidence, str) else "low",
        reference=reference if isinstance(reference, str) else "",
    )


def flatten_classification(record: ClassificationRecord) -> Dict[str, Any]:
    """Response body for a classification: the four fields at top level, defaults for a sentinel."""
    return {
        "hsn": record.get("hsn", ""),
        "gst": record.get("gst", ""),
        "confidence": record.get("confidence", "low"),
        "reference": record.get("reference", ""),
    }
