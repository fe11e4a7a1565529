"""
LLM-based extraction pipelines.

Three entry points share one shape: build the prompt, make one resilient
upstream call, normalize the reply, then parse it.

- generate_inventory: brand/category prompt -> List[ProductRecord]
  (markdown table or JSON array; a reply with neither raises ParseError)
- extract_invoice: OCR text -> InvoiceRecord (error sentinel on unparseable reply)
- classify_product: product details -> ClassificationRecord (per-field defaults)
"""

from __future__ import annotations

import time
from typing import Any, Callable, List

from config import (
    CLASSIFICATION_TEMPERATURE,
    CLASSIFICATION_TIMEOUT_SECONDS,
    INVENTORY_TEMPERATURE,
    INVENTORY_TIMEOUT_SECONDS,
    INVOICE_TEMPERATURE,
    INVOICE_TIMEOUT_SECONDS,
)
from config.logging import get_logger
from domain.canonical import ClassificationRecord, ExtractionRequest, InvoiceRecord, ProductRecord
from domain.errors import ValidationError

from .decoders import decode_classification, decode_invoice
from .llm_client import call_llm
from .normalizer import RawReply
from .prompts import (
    CLASSIFICATION_SYSTEM_PROMPT,
    INVENTORY_SYSTEM_PROMPT,
    INVOICE_SYSTEM_PROMPT,
    build_classification_prompt,
    build_inventory_prompt,
    build_invoice_prompt,
)
from .row_mapper import map_rows
from .table_parser import parse_table_text

LOG = get_logger("extraction")


def generate_inventory(
    request: ExtractionRequest,
    *,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> List[ProductRecord]:
    """Generate up to `request.requested_qty` products; corrupted rows are silently dropped."""
    reply = call_llm(
        INVENTORY_SYSTEM_PROMPT,
        build_inventory_prompt(request),
        timeout=INVENTORY_TIMEOUT_SECONDS,
        temperature=INVENTORY_TEMPERATURE,
        client=client,
        sleep=sleep,
    )

    raw = RawReply.from_text(reply)
    if raw.was_fenced:
        LOG.debug("Stripping code fence from inventory reply")

    table_text = parse_table_text(raw.clean())
    records = map_rows(table_text)
    LOG.info("Parsed %d inventory row(s) for brand=%r", len(records), request.brand)
    return records


def extract_invoice(
    ocr_text: str,
    *,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> InvoiceRecord:
    """Extract invoice fields from OCR text; an unparseable reply yields the error sentinel."""
    if not ocr_text or not ocr_text.strip():
        raise ValidationError("OCR text is required")

    reply = call_llm(
        INVOICE_SYSTEM_PROMPT,
        build_invoice_prompt(ocr_text),
        timeout=INVOICE_TIMEOUT_SECONDS,
        temperature=INVOICE_TEMPERATURE,
        client=client,
        sleep=sleep,
    )
    return decode_invoice(reply, ocr_text)


def classify_product(
    product_name: str,
    brand: str = "",
    category: str = "",
    unit: str = "",
    *,
    client: Any = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ClassificationRecord:
    """Look up HSN code and GST rate for one product."""
    if not product_name or not product_name.strip():
        raise ValidationError("Missing productName in request body.")

    reply = call_llm(
        CLASSIFICATION_SYSTEM_PROMPT,
        build_classification_prompt(product_name, brand, category, unit),
        timeout=CLASSIFICATION_TIMEOUT_SECONDS,
        temperature=CLASSIFICATION_TEMPERATURE,
        response_format={"type": "json_object"},
        client=client,
        sleep=sleep,
    )
    return decode_classification(reply)
