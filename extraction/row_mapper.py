"""
Markdown table rows -> ProductRecord.

Rows are validated one at a time. A corrupted row (too few cells, leftover
markdown emphasis) is dropped and logged; it never fails the batch.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from config.logging import get_logger
from domain.canonical import PRICING_MRP_INCLUSIVE, ProductRecord
from domain.errors import RowCorruptionError
from fields.pricing_math import compute_pricing, to_num

from .table_parser import CANONICAL_COLUMNS, CANONICAL_HEADER

LOG = get_logger("row-mapper")

MIN_COLUMNS = len(CANONICAL_COLUMNS)

_HEADER_ROW = re.compile(r"^\|?\s*product\s*name\s*\|", flags=re.IGNORECASE)
_SEPARATOR_ROW = re.compile(r"^[\s|:-]+$")
_EMPHASIS_SPAN = re.compile(r"\*.*?\*")


def _table_lines(table_text: str) -> List[str]:
    """Slice from the header and keep only candidate data lines."""
    match = CANONICAL_HEADER.search(table_text or "")
    if not match:
        return []

    lines: List[str] = []
    for raw in table_text[match.start():].splitlines():
        line = raw.strip()
        if not line or "|" not in line:
            continue
        if _SEPARATOR_ROW.match(line) or _HEADER_ROW.match(line):
            continue
        lines.append(line)
    return lines


def split_row(line: str) -> List[str]:
    """Split a pipe-delimited line into trimmed cells with emphasis spans removed."""
    line = line.strip()
    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|"):
        line = line[:-1]
    return [_EMPHASIS_SPAN.sub("", cell.strip()).strip() for cell in line.split("|")]


def validate_row(cells: List[str]) -> List[str]:
    """Return the cells if the row is usable, otherwise raise RowCorruptionError."""
    if len(cells) < MIN_COLUMNS:
        raise RowCorruptionError(f"row has {len(cells)} cells, expected {MIN_COLUMNS}")
    if any("*" in cell for cell in cells):
        raise RowCorruptionError("row contains unpaired emphasis marker")
    return cells


def row_to_record(cells: List[str]) -> ProductRecord:
    """Map validated cells positionally and run the GST/price computation."""
    base: Dict[str, str] = {
        "productName": cells[0],
        "brand": cells[1],
        "category": cells[2] or "General",
        "sku": cells[3],
        "unit": cells[4],
        "hsnCode": cells[5],
        "gstRate": cells[6],
        "pricingMode": cells[7] or PRICING_MRP_INCLUSIVE,
        "basePrice": cells[8],
        "mrp": cells[9],
        "costPrice": cells[10],
    }
    computed = compute_pricing(base)

    return ProductRecord(
        productName=base["productName"],
        brand=base["brand"],
        category=base["category"],
        sku=base["sku"],
        unit=base["unit"],
        hsnCode=base["hsnCode"],
        gstRate=computed["gstRate"],
        pricingMode=computed["pricingMode"],
        basePrice=computed["basePrice"],
        mrp=computed["mrp"],
        costPrice=to_num(base["costPrice"]),
        taxAmount=computed["taxAmount"],
        # sellingPrice mirrors MRP for the inventory UI
        price=computed["mrp"],
        sellingPrice=computed["mrp"],
        imageUrl="",
    )


def _parse_line(line: str) -> Optional[ProductRecord]:
    try:
        cells = validate_row(split_row(line))
    except RowCorruptionError as e:
        LOG.debug("Dropping row (%s): %s", e, line)
        return None
    return row_to_record(cells)


def map_rows(table_text: str) -> List[ProductRecord]:
    """Parse every data row of the table; rows without productName or sku are dropped."""
    records: List[ProductRecord] = []
    for line in _table_lines(table_text):
        record = _parse_line(line)
        if record is None:
            continue
        if not record["productName"] or not record["sku"]:
            LOG.debug("Dropping row without productName/sku: %s", line)
            continue
        records.append(record)
    return records
