"""Field resolution and numeric coercion for loosely-typed sales and stock documents."""

import math
from typing import Any, Dict, Optional, Tuple


def to_number(value: Any):
    """
        Coerce a stored field to a number.

        None, empty strings, non-numeric strings, NaN and infinities become 0.
        Integral values come back as int so exact comparisons stay exact.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)

    if isinstance(value, (int, float)):
        num = value
    else:
        # Strings, Decimal and bson Decimal128 all parse from their text form
        text = str(value).strip()
        if text == "":
            return 0
        try:
            num = float(text)
        except ValueError:
            return 0

    if isinstance(num, float):
        if not math.isfinite(num):
            return 0
        if num.is_integer():
            return int(num)
    return num


def validate_sold_count(value: Any) -> Tuple[Any, bool]:
    """Return the coerced soldCount clamped to >= 0 and whether clamping happened."""
    num = to_number(value)
    if num < 0:
        return 0, True
    return num, False


def _first_non_empty(*candidates: Any) -> str:
    for candidate in candidates:
        if candidate is None or candidate == "":
            continue
        return candidate if isinstance(candidate, str) else str(candidate)
    return ""


def _battery_details(item: Dict) -> Dict:
    details = item.get("batteryDetails")
    return details if isinstance(details, dict) else {}


def resolve_brand_name(item: Dict) -> str:
    return _first_non_empty(item.get("brandName"), _battery_details(item).get("brandName"))


def resolve_series(item: Dict) -> str:
    return _first_non_empty(item.get("series"), _battery_details(item).get("name"))


def make_product_key(brand_name: str, series: str, separator: str = "-") -> Optional[str]:
    """Join brand and series into the key shared by sales and stock, or None if either is empty."""
    if not brand_name or not series:
        return None
    return f"{brand_name}{separator}{series}"
