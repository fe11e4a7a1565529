"""
Dual-format reply parsing for bulk product generation.

The model is asked for a markdown table with a fixed 11-column header, but
sometimes answers with a JSON array of product objects instead. Format
detection happens once, here: a reply with the canonical header passes
through unchanged; a JSON array is re-projected into the same table shape so
a single row parser (extraction.row_mapper) handles both.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from config.logging import get_logger
from domain.canonical import PRICING_MRP_INCLUSIVE
from domain.errors import ParseError

LOG = get_logger("table-parser")

CANONICAL_COLUMNS: Tuple[str, ...] = (
    "Product Name",
    "Brand",
    "Category",
    "SKU",
    "Unit",
    "HSN",
    "GST (%)",
    "Pricing Mode",
    "Base Price",
    "MRP",
    "Cost",
)

CANONICAL_HEADER = re.compile(
    r"\|\s*Product\s*Name\s*\|\s*Brand\s*\|\s*Category\s*\|\s*SKU\s*\|\s*Unit\s*\|\s*HSN\s*\|"
    r"\s*GST\s*\(%\)\s*\|\s*Pricing\s*Mode\s*\|\s*Base\s*Price\s*\|\s*MRP\s*\|\s*Cost\s*\|",
    flags=re.IGNORECASE,
)

HEADER_LINE = "| " + " | ".join(CANONICAL_COLUMNS) + " |"
SEPARATOR_LINE = "|" + "|".join([" --- "] * len(CANONICAL_COLUMNS)) + "|"

# Accepted spellings per logical field, first non-empty match wins.
# Order follows CANONICAL_COLUMNS.
FIELD_ALIASES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("productName", ("productName", "name")),
    ("brand", ("brand",)),
    ("category", ("category",)),
    ("sku", ("sku", "SKU", "Sku")),
    ("unit", ("unit", "Unit")),
    ("hsnCode", ("hsnCode", "hsn", "HSN")),
    ("gstRate", ("gstRate", "gst", "GST")),
    ("pricingMode", ("pricingMode", "PricingMode")),
    ("basePrice", ("basePrice",)),
    ("mrp", ("mrp", "MRP")),
    ("costPrice", ("costPrice", "cost")),
)

_WRAPPER_KEYS = ("inventory", "products", "items")

_ARRAY_START = re.compile(r"\[\s*\{")
_DECODER = json.JSONDecoder()


def has_canonical_header(text: str) -> bool:
    return bool(CANONICAL_HEADER.search(text or ""))


def _unwrap(parsed: Any) -> Optional[List[Any]]:
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(parsed.get(key), list):
                return parsed[key]
    return None


def recover_json_array(text: str) -> Optional[List[Any]]:
    """Parse the whole text as a JSON array, else the first [{...}] array that decodes in it."""
    try:
        records = _unwrap(json.loads(text))
    except json.JSONDecodeError:
        records = None
    if records is not None:
        return records

    for match in _ARRAY_START.finditer(text):
        try:
            parsed, _ = _DECODER.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, list):
            return parsed
    return None


def _resolve_alias(record: Dict[str, Any], aliases: Sequence[str]) -> Any:
    for key in aliases:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _cell_text(value: Any) -> str:
    """Render a JSON value as a single table cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        text = str(value).lower()
    elif isinstance(value, float):
        text = format(Decimal(repr(value)), "f")
    else:
        text = str(value)
    return re.sub(r"\s*[|\r\n]+\s*", " ", text).strip()


def record_to_row(record: Dict[str, Any]) -> str:
    """Project one JSON product object onto a canonical table row."""
    cells: List[str] = []
    for field, aliases in FIELD_ALIASES:
        value = _resolve_alias(record, aliases)
        if field == "pricingMode" and value is None:
            value = PRICING_MRP_INCLUSIVE
        cells.append(_cell_text(value))
    return "| " + " | ".join(cells) + " |"


def records_to_table(records: Sequence[Any]) -> str:
    rows = [record_to_row(r) for r in records if isinstance(r, dict)]
    return "\n".join([HEADER_LINE, SEPARATOR_LINE, *rows])


def parse_table_text(clean_text: str) -> str:
    """
    Return table text carrying the canonical header.

    Raises:
        ParseError: neither the header nor a JSON array of records is present
    """
    text = (clean_text or "").strip()
    if has_canonical_header(text):
        return text

    records = recover_json_array(text)
    if records is not None:
        LOG.info("Reply had no table header; recovered %d JSON record(s)", len(records))
        return records_to_table(records)

    LOG.error("Reply did not contain a valid extended table header")
    raise ParseError("no valid table")
