"""
GST and price computations for generated products.

RULES:
- GST rate is always one of 0, 5, 12, 18, 28 (anything else snaps to the nearest,
  ties go to the lower rate).
- Pricing mode is BASE_PLUS_GST only when stated exactly; otherwise MRP_INCLUSIVE.
- Only the missing side of the (base price, MRP) pair is derived; values the model
  provided are trusted as given.
- Every derived amount is rounded half-up to 2 decimals.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Mapping, Optional

from config import GST_ALLOWED
from config.logging import get_logger
from domain.canonical import PRICING_BASE_PLUS_GST, PRICING_MRP_INCLUSIVE

LOG = get_logger("pricing-math")

_NON_NUMERIC = re.compile(r"[^\d.]")
_FIRST_NUMBER = re.compile(r"[-+]?\d*\.?\d+")

_CONSISTENCY_TOLERANCE = 0.01


def to_num(value: Any) -> Optional[float]:
    """Convert a price-like value to float, keeping only digits and '.'. Return None if not possible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    s = _NON_NUMERIC.sub("", str(value))
    if not s:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def round2(value: float) -> float:
    """Round half-up to 2 decimals on the exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _leading_rate(raw: Any) -> float:
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)

    match = _FIRST_NUMBER.search(str(raw))
    if not match:
        return 0.0
    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def clamp_gst_rate(raw: Any) -> int:
    """Snap a raw GST value to the nearest allowed slab."""
    n = _leading_rate(raw)
    if n in GST_ALLOWED:
        return int(n)

    best = GST_ALLOWED[0]
    best_distance = float("inf")
    for rate in GST_ALLOWED:
        distance = abs(rate - n)
        if distance < best_distance:
            best, best_distance = rate, distance
    return best


def resolve_pricing_mode(raw: Any) -> str:
    if isinstance(raw, str) and raw.strip() == PRICING_BASE_PLUS_GST:
        return PRICING_BASE_PLUS_GST
    return PRICING_MRP_INCLUSIVE


def _add_gst(base_price: float, gst_rate: int) -> float:
    return round2(base_price * (1 + gst_rate / 100))


def _remove_gst(mrp: float, gst_rate: int) -> float:
    return round2(mrp / (1 + gst_rate / 100))


def _warn_if_inconsistent(base_price: float, mrp: float, gst_rate: int) -> None:
    expected = base_price * (1 + gst_rate / 100)
    if abs(expected - mrp) > _CONSISTENCY_TOLERANCE:
        LOG.warning(
            "MRP %.2f does not match base %.2f at %d%% GST (expected %.2f); keeping both as given",
            mrp,
            base_price,
            gst_rate,
            expected,
        )


def compute_pricing(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Derive the missing side of the base price / MRP pair and the tax amount.

    Reads gstRate, pricingMode, basePrice and mrp from `fields` (raw strings or
    numbers) and returns {gstRate, pricingMode, basePrice, mrp, taxAmount}.
    """
    gst_rate = clamp_gst_rate(fields.get("gstRate"))
    mode = resolve_pricing_mode(fields.get("pricingMode"))
    base_price = to_num(fields.get("basePrice"))
    mrp = to_num(fields.get("mrp"))
    both_given = base_price is not None and mrp is not None

    # The mode only labels which side was quoted; derivation fills whichever is missing.
    if mrp is not None and base_price is None:
        base_price = _remove_gst(mrp, gst_rate)
    elif base_price is not None and mrp is None:
        mrp = _add_gst(base_price, gst_rate)

    tax_amount = None
    if mrp is not None and base_price is not None:
        if both_given:
            _warn_if_inconsistent(base_price, mrp, gst_rate)
        tax_amount = round2(mrp - base_price)

    return {
        "gstRate": gst_rate,
        "pricingMode": mode,
        "basePrice": base_price,
        "mrp": mrp,
        "taxAmount": tax_amount,
    }
