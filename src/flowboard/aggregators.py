"""Per-source weekly aggregation.

Each aggregator resolves the logical fields of every row, charges rows that
cannot be used to the first failing check, and folds the rest into week
buckets (and store x week buckets for sales). Nothing here raises on bad data:
a source full of unusable rows simply yields empty buckets and a report saying
why.

Check order for sales and purchase rows:
  malformed -> missing product/quantity/date -> quantity <= 0 or unparseable
  -> product not in index -> date not parseable

Labor rows:
  malformed -> missing date/hours -> hours <= 0 or unparseable
  -> date not parseable
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .diagnostics import SkipReason, SourceReport, log_source_report
from .fields import DEFAULT_ALIASES, clean_text, coerce_number, resolve_field
from .product_index import ProductIndex
from .week_keys import DATE_ORDERS, to_week_key, week_sort_key


logger = logging.getLogger("flowboard.aggregators")


@dataclass(frozen=True)
class SourceAggregate:
    source: str
    by_week: Dict[str, float]
    report: SourceReport
    by_store_week: Dict[Tuple[str, str], float] = field(default_factory=dict)

    @property
    def weeks(self) -> List[str]:
        return list(self.by_week)

    @property
    def empty(self) -> bool:
        return not self.by_week


def _resolve_frame(rows: Sequence[Any], aliases: Mapping[str, Sequence[str]]) -> pd.DataFrame:
    """One object column per logical field, None where unresolved."""
    data = {
        name: [resolve_field(row, names) if isinstance(row, Mapping) else None for row in rows]
        for name, names in aliases.items()
    }
    frame = pd.DataFrame(data, index=pd.RangeIndex(len(rows)), dtype=object)
    frame["_malformed"] = [not isinstance(row, Mapping) for row in rows]
    return frame


def _charge(reasons: List[Optional[SkipReason]], mask: pd.Series, reason: SkipReason) -> None:
    for pos in np.flatnonzero(mask.to_numpy(dtype=bool)):
        if reasons[pos] is None:
            reasons[pos] = reason


def _numeric(series: pd.Series) -> pd.Series:
    return pd.to_numeric(series.map(coerce_number), errors="coerce").astype(float)


def _week_totals(frame: pd.DataFrame, value_column: str) -> Dict[str, float]:
    if frame.empty:
        return {}
    sums = frame.groupby("week")[value_column].sum()
    return {week: float(sums[week]) for week in sorted(sums.index, key=week_sort_key)}


def _store_week_totals(frame: pd.DataFrame) -> Dict[Tuple[str, str], float]:
    if frame.empty:
        return {}
    sums = frame.groupby(["store", "week"])["cases"].sum()
    keys = sorted(sums.index, key=lambda k: (k[0], week_sort_key(k[1])))
    return {(store, week): float(sums[(store, week)]) for store, week in keys}


def _case_rows(
    rows: Sequence[Any],
    aliases: Mapping[str, Sequence[str]],
    product_index: ProductIndex,
    date_orders: Sequence[str],
) -> Tuple[pd.DataFrame, List[Optional[SkipReason]]]:
    """Resolve and validate rows that carry product quantities; add ``cases`` and ``week``."""
    frame = _resolve_frame(rows, aliases)
    reasons: List[Optional[SkipReason]] = [None] * len(rows)

    _charge(reasons, frame["_malformed"], SkipReason.MALFORMED_RECORD)
    product = frame["product_name"].map(clean_text)
    _charge(reasons, product.isna(), SkipReason.MISSING_PRODUCT)
    _charge(reasons, frame["quantity"].isna(), SkipReason.MISSING_QUANTITY)
    _charge(reasons, frame["date"].isna(), SkipReason.MISSING_DATE)

    quantity = _numeric(frame["quantity"])
    _charge(reasons, ~(quantity > 0), SkipReason.INVALID_QUANTITY)

    units = pd.to_numeric(product.map(product_index.units_per_case), errors="coerce").astype(float)
    _charge(reasons, units.isna(), SkipReason.UNKNOWN_PRODUCT)

    week = frame["date"].map(lambda value: to_week_key(value, date_orders))
    _charge(reasons, week.isna(), SkipReason.INVALID_DATE)

    # Fractional cases are kept as-is; no rounding before accumulation
    frame = frame.assign(product=product, cases=quantity / units, week=week)
    kept = frame.loc[[reason is None for reason in reasons]]
    return kept, reasons


def aggregate_sales(
    records: Iterable[Any],
    product_index: ProductIndex,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
    unknown_store: str = "Unknown",
    date_orders: Sequence[str] = DATE_ORDERS,
    max_samples: int = 5,
) -> SourceAggregate:
    """Fold sales orders into shipped cases per week and per (store, week).

    Rows without a store/customer value are attributed to ``unknown_store``.
    """
    rows = list(records or [])
    aliases = aliases or DEFAULT_ALIASES["sales"]
    kept, reasons = _case_rows(rows, aliases, product_index, date_orders)
    kept = kept.assign(store=kept["store"].map(lambda value: clean_text(value) or unknown_store))

    report = SourceReport.from_reasons("sales", rows, reasons, max_samples=max_samples)
    log_source_report(logger, report)
    return SourceAggregate(
        source="sales",
        by_week=_week_totals(kept, "cases"),
        by_store_week=_store_week_totals(kept),
        report=report,
    )


def aggregate_purchases(
    records: Iterable[Any],
    product_index: ProductIndex,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
    date_orders: Sequence[str] = DATE_ORDERS,
    max_samples: int = 5,
) -> SourceAggregate:
    """Fold purchase orders into received cases per week."""
    rows = list(records or [])
    aliases = aliases or DEFAULT_ALIASES["purchases"]
    kept, reasons = _case_rows(rows, aliases, product_index, date_orders)

    report = SourceReport.from_reasons("purchases", rows, reasons, max_samples=max_samples)
    log_source_report(logger, report)
    return SourceAggregate(source="purchases", by_week=_week_totals(kept, "cases"), report=report)


def aggregate_labor(
    records: Iterable[Any],
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
    date_orders: Sequence[str] = DATE_ORDERS,
    max_samples: int = 5,
) -> SourceAggregate:
    """Fold clock records into labor hours per week (keyed by clock-in date)."""
    rows = list(records or [])
    aliases = aliases or DEFAULT_ALIASES["labor"]
    frame = _resolve_frame(rows, aliases)
    reasons: List[Optional[SkipReason]] = [None] * len(rows)

    _charge(reasons, frame["_malformed"], SkipReason.MALFORMED_RECORD)
    _charge(reasons, frame["date"].isna(), SkipReason.MISSING_DATE)
    _charge(reasons, frame["hours"].isna(), SkipReason.MISSING_HOURS)

    hours = _numeric(frame["hours"])
    _charge(reasons, ~(hours > 0), SkipReason.INVALID_HOURS)

    week = frame["date"].map(lambda value: to_week_key(value, date_orders))
    _charge(reasons, week.isna(), SkipReason.INVALID_DATE)

    frame = frame.assign(hours=hours, week=week)
    kept = frame.loc[[reason is None for reason in reasons]]

    report = SourceReport.from_reasons("labor", rows, reasons, max_samples=max_samples)
    log_source_report(logger, report)
    return SourceAggregate(source="labor", by_week=_week_totals(kept, "hours"), report=report)
