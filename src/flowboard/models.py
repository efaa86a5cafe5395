"""Value types emitted by the metrics composer.

Field names are snake_case in Python; ``to_dict`` renders the camelCase contract
read by the dashboard front end.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import pandas as pd


@dataclass(frozen=True)
class WeeklyTotal:
    week: str
    received_cases: float
    shipped_cases: float
    labor_hours: float
    efficiency: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "receivedCases": self.received_cases,
            "shippedCases": self.shipped_cases,
            "laborHours": self.labor_hours,
            "efficiency": self.efficiency,
        }


@dataclass(frozen=True)
class CumulativeTotal:
    week: str
    cumulative_received: float
    cumulative_shipped: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "week": self.week,
            "cumulativeReceived": self.cumulative_received,
            "cumulativeShipped": self.cumulative_shipped,
        }


@dataclass(frozen=True)
class StoreTotal:
    store: str
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return {"store": self.store, "total": self.total}


@dataclass(frozen=True)
class StoreWeekEntry:
    store: str
    week: str
    cases: float

    def to_dict(self) -> Dict[str, Any]:
        return {"store": self.store, "week": self.week, "cases": self.cases}


@dataclass(frozen=True)
class DashboardMetrics:
    """Everything the presentation layer may depend on.

    - ``weekly_totals``: ascending by week, one row per week seen in any source.
    - ``cumulative_totals``: running received/shipped sums over ``weekly_totals``.
    - ``store_rankings``: top-N stores by shipped cases, descending.
    - ``all_store_totals``: every store, same ordering.
    - ``store_week_series``: sparse (store, week) cases; absent pairs mean zero.
    """

    weekly_totals: Tuple[WeeklyTotal, ...]
    cumulative_totals: Tuple[CumulativeTotal, ...]
    store_rankings: Tuple[StoreTotal, ...]
    all_store_totals: Tuple[StoreTotal, ...]
    store_week_series: Tuple[StoreWeekEntry, ...]

    @property
    def weeks(self) -> List[str]:
        return [w.week for w in self.weekly_totals]

    @property
    def all_stores(self) -> List[str]:
        return [s.store for s in self.all_store_totals]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weeklyTotals": [w.to_dict() for w in self.weekly_totals],
            "cumulativeTotals": [c.to_dict() for c in self.cumulative_totals],
            "storeRankings": [s.to_dict() for s in self.store_rankings],
            "allStoreTotals": [s.to_dict() for s in self.all_store_totals],
            "storeWeekSeries": [e.to_dict() for e in self.store_week_series],
            "weeks": self.weeks,
            "allStores": self.all_stores,
        }

    def to_frames(self) -> Dict[str, pd.DataFrame]:
        """Return one DataFrame per collection, columns in contract order."""
        return {
            "weekly_totals": pd.DataFrame(
                [w.to_dict() for w in self.weekly_totals],
                columns=["week", "receivedCases", "shippedCases", "laborHours", "efficiency"],
            ),
            "cumulative_totals": pd.DataFrame(
                [c.to_dict() for c in self.cumulative_totals],
                columns=["week", "cumulativeReceived", "cumulativeShipped"],
            ),
            "store_rankings": pd.DataFrame([s.to_dict() for s in self.store_rankings], columns=["store", "total"]),
            "all_store_totals": pd.DataFrame([s.to_dict() for s in self.all_store_totals], columns=["store", "total"]),
            "store_week_series": pd.DataFrame(
                [e.to_dict() for e in self.store_week_series],
                columns=["store", "week", "cases"],
            ),
        }
