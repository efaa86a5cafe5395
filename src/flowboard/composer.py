"""Combine per-source week buckets into the dashboard series.

All functions are pure: given the same buckets they return identical
``DashboardMetrics``.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Tuple

import numpy as np
import pandas as pd

from .errors import NoWeeksError
from .models import CumulativeTotal, DashboardMetrics, StoreTotal, StoreWeekEntry, WeeklyTotal
from .week_keys import sort_week_keys, week_sort_key


logger = logging.getLogger("flowboard.composer")

DEFAULT_TOP_N = 10


def build_weekly_frame(
    sales_by_week: Mapping[str, float],
    purchase_by_week: Mapping[str, float],
    labor_by_week: Mapping[str, float],
) -> pd.DataFrame:
    """Week-indexed frame over the union of weeks, in chronological order.

    Columns: received, shipped, labor_hours, efficiency, cumulative_received,
    cumulative_shipped. Weeks missing from a source read as 0. Efficiency is
    (received + shipped) / labor_hours, and 0 when there are no labor hours.
    """
    weeks = sort_week_keys([*sales_by_week, *purchase_by_week, *labor_by_week])
    frame = pd.DataFrame(
        {
            "received": pd.Series(dict(purchase_by_week), dtype=float),
            "shipped": pd.Series(dict(sales_by_week), dtype=float),
            "labor_hours": pd.Series(dict(labor_by_week), dtype=float),
        },
        index=pd.Index(weeks, name="week", dtype=object),
    ).fillna(0.0)

    volume = frame["received"] + frame["shipped"]
    labor = frame["labor_hours"]
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = np.where(labor > 0, volume / labor.where(labor > 0, 1.0), 0.0)
    frame["efficiency"] = ratio.astype(float)

    cumulative = frame[["received", "shipped"]].cumsum()
    frame["cumulative_received"] = cumulative["received"]
    frame["cumulative_shipped"] = cumulative["shipped"]
    return frame


def rank_stores(sales_by_store_week: Mapping[Tuple[str, str], float]) -> List[StoreTotal]:
    """Every store's total shipped cases, descending; ties by store name ascending."""
    if not sales_by_store_week:
        return []
    index = pd.MultiIndex.from_tuples(list(sales_by_store_week), names=["store", "week"])
    cases = pd.Series(list(sales_by_store_week.values()), index=index, dtype=float)
    totals = cases.groupby(level="store").sum()
    ordered = sorted(((str(store), float(total)) for store, total in totals.items()), key=lambda item: (-item[1], item[0]))
    return [StoreTotal(store=store, total=total) for store, total in ordered]


def build_store_week_series(
    sales_by_store_week: Mapping[Tuple[str, str], float],
    store_order: List[str],
) -> List[StoreWeekEntry]:
    """Sparse (store, week) entries ordered by week, then by store rank."""
    rank: Dict[str, int] = {store: pos for pos, store in enumerate(store_order)}
    entries = [
        StoreWeekEntry(store=store, week=week, cases=float(cases))
        for (store, week), cases in sales_by_store_week.items()
        if cases != 0
    ]
    entries.sort(key=lambda e: (week_sort_key(e.week), rank.get(e.store, len(rank)), e.store))
    return entries


def compose_metrics(
    sales_by_week: Mapping[str, float],
    sales_by_store_week: Mapping[Tuple[str, str], float],
    purchase_by_week: Mapping[str, float],
    labor_by_week: Mapping[str, float],
    top_n: int = DEFAULT_TOP_N,
) -> DashboardMetrics:
    """Merge the three sources into the dashboard dataset.

    Raises:
        NoWeeksError: when no source contributed a single week.
    """
    if not (sales_by_week or purchase_by_week or labor_by_week):
        raise NoWeeksError("No valid data weeks found in sales, purchases or labor")

    frame = build_weekly_frame(sales_by_week, purchase_by_week, labor_by_week)
    weekly = tuple(
        WeeklyTotal(
            week=str(week),
            received_cases=float(row.received),
            shipped_cases=float(row.shipped),
            labor_hours=float(row.labor_hours),
            efficiency=float(row.efficiency),
        )
        for week, row in zip(frame.index, frame.itertuples(index=False))
    )
    cumulative = tuple(
        CumulativeTotal(
            week=str(week),
            cumulative_received=float(row.cumulative_received),
            cumulative_shipped=float(row.cumulative_shipped),
        )
        for week, row in zip(frame.index, frame.itertuples(index=False))
    )

    all_stores = rank_stores(sales_by_store_week)
    series = build_store_week_series(sales_by_store_week, [s.store for s in all_stores])
    logger.info(
        "Composed %d weeks (%s .. %s), %d stores, %d store-week points",
        len(weekly),
        weekly[0].week,
        weekly[-1].week,
        len(all_stores),
        len(series),
    )
    return DashboardMetrics(
        weekly_totals=weekly,
        cumulative_totals=cumulative,
        store_rankings=tuple(all_stores[:top_n]),
        all_store_totals=tuple(all_stores),
        store_week_series=tuple(series),
    )
