"""Field resolution for loosely-typed source records.

The four sources (catalog, sales orders, purchase orders, clock records) do not
share a schema: the same logical field arrives under different header names
depending on which export produced the file. Each logical field is therefore
described by an ordered alias list, and :func:`resolve_field` returns the value
of the first alias that is present and non-blank.

The alias tables below are the recognized defaults; they can be overridden per
source through ``engine.aliases`` in the YAML configuration.
"""
from __future__ import annotations

import math
import numbers
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import pandas as pd


# Catalog (product master)
CATALOG_PRODUCT_ALIASES: Tuple[str, ...] = ("Product Name", "ProductName", "Name", "Product")
CATALOG_UNITS_ALIASES: Tuple[str, ...] = ("Units Per Case", "UnitsPerCase", "Units")

# Sales orders (shipments to stores)
SALES_PRODUCT_ALIASES: Tuple[str, ...] = ("Product", "Product Name", "ProductName")
SALES_QUANTITY_ALIASES: Tuple[str, ...] = ("Quantity", "Qty")
SALES_STORE_ALIASES: Tuple[str, ...] = ("Customer", "Store", "Client")
SALES_DATE_ALIASES: Tuple[str, ...] = ("Delivery Date", "DeliveryDate", "Date")

# Purchase orders (receipts)
PURCHASE_PRODUCT_ALIASES: Tuple[str, ...] = ("Product Name", "Product", "ProductName")
PURCHASE_QUANTITY_ALIASES: Tuple[str, ...] = ("Purchase Quantity", "Quantity", "Qty")
PURCHASE_DATE_ALIASES: Tuple[str, ...] = ("Purchase Order Date", "PODate", "Date")

# Labor clock records
LABOR_DATE_ALIASES: Tuple[str, ...] = ("Date In", "DateIn", "Date")
LABOR_HOURS_ALIASES: Tuple[str, ...] = ("Total Less Break", "TotalLessBreak", "Hours")


DEFAULT_ALIASES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "catalog": {
        "product_name": CATALOG_PRODUCT_ALIASES,
        "units_per_case": CATALOG_UNITS_ALIASES,
    },
    "sales": {
        "product_name": SALES_PRODUCT_ALIASES,
        "quantity": SALES_QUANTITY_ALIASES,
        "store": SALES_STORE_ALIASES,
        "date": SALES_DATE_ALIASES,
    },
    "purchases": {
        "product_name": PURCHASE_PRODUCT_ALIASES,
        "quantity": PURCHASE_QUANTITY_ALIASES,
        "date": PURCHASE_DATE_ALIASES,
    },
    "labor": {
        "date": LABOR_DATE_ALIASES,
        "hours": LABOR_HOURS_ALIASES,
    },
}

# Text tokens treated as "no value" when a numeric field is coerced
_MISSING_TOKENS = {"", "na", "n/a", "-", "#div/0!", "null", "none", "nan"}


def is_blank(value: Any) -> bool:
    """Return True for absent values: None, NaN/NA/NaT, or whitespace-only text."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if pd.api.types.is_scalar(value):
        try:
            return bool(pd.isna(value))
        except (TypeError, ValueError):
            return False
    return False


def resolve_field(record: Mapping[str, Any], aliases: Sequence[str], default: Any = None) -> Any:
    """Return the value of the first alias present in ``record`` with a non-blank value.

    Falls back to ``default`` (``None`` means "missing") when no alias matches.
    """
    for alias in aliases:
        if alias not in record:
            continue
        value = record[alias]
        if not is_blank(value):
            return value
    return default


def clean_text(value: Any) -> Optional[str]:
    """Normalize a name-like value to a trimmed string, or None when blank."""
    if is_blank(value):
        return None
    text = str(value).strip()
    return text or None


def coerce_number(value: Any) -> Optional[float]:
    """Coerce numbers or numeric text to a finite float.

    Thousand separators are tolerated (``"1,200"``). Booleans, missing tokens,
    unparseable text and non-finite values all yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        try:
            number = float(value)
        except OverflowError:
            return None
    else:
        text = str(value).strip()
        if text.lower() in _MISSING_TOKENS:
            return None
        try:
            number = float(text.replace(",", ""))
        except (ValueError, OverflowError):
            return None
    if not math.isfinite(number):
        return None
    return number


def coerce_positive_int(value: Any) -> Optional[int]:
    """Return ``value`` as a positive integer, or None when it is not one.

    Integral floats (``12.0``) are accepted; fractional values are rejected.
    """
    number = coerce_number(value)
    if number is None or number <= 0 or not number.is_integer():
        return None
    return int(number)
