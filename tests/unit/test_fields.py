import math

import numpy as np
import pandas as pd

from flowboard.fields import (
    SALES_PRODUCT_ALIASES,
    SALES_STORE_ALIASES,
    clean_text,
    coerce_number,
    coerce_positive_int,
    is_blank,
    resolve_field,
)


def test_resolve_field_prefers_first_present_alias():
    record = {"Store": "North", "Customer": "Acme"}
    assert resolve_field(record, SALES_STORE_ALIASES) == "Acme"


def test_resolve_field_skips_blank_values():
    record = {"Product": "  ", "Product Name": "Widget"}
    assert resolve_field(record, SALES_PRODUCT_ALIASES) == "Widget"

    record = {"Product": float("nan"), "ProductName": "Gizmo"}
    assert resolve_field(record, SALES_PRODUCT_ALIASES) == "Gizmo"


def test_resolve_field_default_when_missing():
    assert resolve_field({"Other": 1}, ("Quantity", "Qty")) is None
    assert resolve_field({"Other": 1}, ("Quantity", "Qty"), default=0) == 0


def test_resolve_field_keeps_zero():
    # zero is a value, not a blank; validation happens later
    assert resolve_field({"Quantity": 0, "Qty": 5}, ("Quantity", "Qty")) == 0


def test_is_blank():
    assert is_blank(None)
    assert is_blank("")
    assert is_blank(pd.NA)
    assert is_blank(pd.NaT)
    assert is_blank(np.nan)
    assert not is_blank(0)
    assert not is_blank("x")


def test_clean_text():
    assert clean_text("  Widget ") == "Widget"
    assert clean_text("   ") is None
    assert clean_text(None) is None
    assert clean_text(42) == "42"


def test_coerce_number():
    assert coerce_number("1,200") == 1200.0
    assert coerce_number(" 7.5 ") == 7.5
    assert coerce_number(np.int64(3)) == 3.0
    assert coerce_number("n/a") is None
    assert coerce_number("abc") is None
    assert coerce_number(True) is None
    assert coerce_number(float("inf")) is None
    assert coerce_number(None) is None
    assert coerce_number(10**400) is None
    assert coerce_number(str(10**400)) is None
    assert not math.isnan(coerce_number(0))


def test_coerce_positive_int():
    assert coerce_positive_int("12") == 12
    assert coerce_positive_int(12.0) == 12
    assert coerce_positive_int("12.5") is None
    assert coerce_positive_int(0) is None
    assert coerce_positive_int(-3) is None
    assert coerce_positive_int("") is None
