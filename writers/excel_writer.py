"""
EXCEL WRITER
------------
Write generated inventory to an .xlsx sheet using the canonical table headers.

Library-level export: the request handlers return JSON only, so callers that
want a spreadsheet pass the `inventory` list from generate_inventory (or the
inventory handler body) to write_inventory_xlsx themselves.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Tuple

import pandas as pd

from domain.canonical import ProductRecord
from extraction.table_parser import CANONICAL_COLUMNS

# (record key, sheet header); headers follow the generation table, plus tax.
EXPORT_COLUMNS: List[Tuple[str, str]] = list(
    zip(
        (
            "productName",
            "brand",
            "category",
            "sku",
            "unit",
            "hsnCode",
            "gstRate",
            "pricingMode",
            "basePrice",
            "mrp",
            "costPrice",
        ),
        CANONICAL_COLUMNS,
    )
) + [("taxAmount", "Tax Amount")]

PRICE_HEADERS = ("Base Price", "MRP", "Cost", "Tax Amount")


def inventory_to_frame(records: Iterable[ProductRecord]) -> pd.DataFrame:
    """Build a DataFrame with one row per product and the export headers as columns."""
    rows = [{header: record.get(key) for key, header in EXPORT_COLUMNS} for record in records]
    df = pd.DataFrame(rows, columns=[header for _, header in EXPORT_COLUMNS])
    for header in PRICE_HEADERS:
        df[header] = pd.to_numeric(df[header], errors="coerce")
    return df


def write_inventory_xlsx(
    output_path: Path,
    records: Iterable[ProductRecord],
    sheet_name: str = "Inventory",
) -> Path:
    """
    Write products to an Excel file (row 1 = headers, rows 2+ = products).

    Args:
        output_path: Destination .xlsx path (parent directories are created)
        records: Products as returned by generate_inventory
        sheet_name: Worksheet name

    Returns:
        The resolved output path
    """
    output_path = output_path.expanduser().resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = inventory_to_frame(records)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        ws = writer.sheets[sheet_name]
        for col_idx, header in enumerate(df.columns, start=1):
            if header in PRICE_HEADERS:
                for row_idx in range(2, len(df) + 2):
                    ws.cell(row=row_idx, column=col_idx).number_format = "0.00"

    return output_path
