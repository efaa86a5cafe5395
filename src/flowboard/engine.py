"""Aggregation entry point.

``run_aggregation`` is the one call the dashboard makes: four record batches in,
one :class:`AggregationOutcome` out. Fatal data conditions (empty catalog, no
weeks at all) come back as ``outcome.failure`` rather than as exceptions; a
source that contributes nothing is reported in ``outcome.warnings`` and its
metric reads as zero.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from .aggregators import aggregate_labor, aggregate_purchases, aggregate_sales
from .composer import compose_metrics
from .config import EngineConfig, FlowboardConfig
from .diagnostics import SourceReport
from .errors import AggregationError, AggregationFailure
from .logging_utils import log_error, log_system_event, log_warning
from .models import DashboardMetrics
from .product_index import build_product_index


logger = logging.getLogger("flowboard.engine")

Records = Iterable[Any]


@dataclass(frozen=True)
class AggregationOutcome:
    metrics: Optional[DashboardMetrics] = None
    failure: Optional[AggregationFailure] = None
    warnings: Tuple[str, ...] = ()
    reports: Dict[str, SourceReport] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "metrics": self.metrics.to_dict() if self.metrics is not None else None,
            "failure": self.failure.as_dict() if self.failure is not None else None,
            "warnings": list(self.warnings),
            "reports": {name: report.as_dict() for name, report in self.reports.items()},
        }


def _engine_config(config: EngineConfig | FlowboardConfig | None) -> EngineConfig:
    if config is None:
        return EngineConfig()
    if isinstance(config, FlowboardConfig):
        return config.engine
    return config


def _fail(exc: AggregationError, warnings: Tuple[str, ...], reports: Dict[str, SourceReport]) -> AggregationOutcome:
    failure = AggregationFailure.from_error(exc)
    log_error(logger, f"Aggregation aborted ({failure.code.value}): {failure.message}")
    return AggregationOutcome(failure=failure, warnings=warnings, reports=reports)


def run_aggregation(
    products: Records,
    sales_orders: Records,
    purchase_orders: Records,
    clocks: Records,
    config: EngineConfig | FlowboardConfig | None = None,
) -> AggregationOutcome:
    """Turn the four raw batches into dashboard metrics.

    Steps:
      1. Build the product index (fatal when empty).
      2. Aggregate sales, purchases and labor independently.
      3. Warn for every source that produced no week buckets.
      4. Compose weekly totals, cumulative series and store rankings
         (fatal when no source produced a week).
    """
    cfg = _engine_config(config)
    aliases = cfg.aliases
    orders = tuple(cfg.date_orders)
    reports: Dict[str, SourceReport] = {}

    try:
        index = build_product_index(
            products,
            product_aliases=aliases.catalog.product_name,
            units_aliases=aliases.catalog.units_per_case,
            default_units_per_case=cfg.default_units_per_case,
            max_samples=cfg.max_skip_samples,
        )
    except AggregationError as exc:
        return _fail(exc, (), reports)
    reports["catalog"] = index.report

    sales = aggregate_sales(
        sales_orders,
        index,
        aliases=aliases.sales.model_dump(),
        unknown_store=cfg.unknown_store,
        date_orders=orders,
        max_samples=cfg.max_skip_samples,
    )
    purchases = aggregate_purchases(
        purchase_orders,
        index,
        aliases=aliases.purchases.model_dump(),
        date_orders=orders,
        max_samples=cfg.max_skip_samples,
    )
    labor = aggregate_labor(
        clocks,
        aliases=aliases.labor.model_dump(),
        date_orders=orders,
        max_samples=cfg.max_skip_samples,
    )

    warnings = []
    for aggregate in (sales, purchases, labor):
        reports[aggregate.source] = aggregate.report
        if aggregate.empty:
            message = f"No valid {aggregate.source} records found"
            warnings.append(message)
            log_warning(logger, message)

    try:
        metrics = compose_metrics(
            sales.by_week,
            sales.by_store_week,
            purchases.by_week,
            labor.by_week,
            top_n=cfg.top_n,
        )
    except AggregationError as exc:
        return _fail(exc, tuple(warnings), reports)

    log_system_event(
        logger,
        f"Aggregated {len(metrics.weekly_totals)} weeks from "
        f"{sales.report.records_used} sales, {purchases.report.records_used} purchase "
        f"and {labor.report.records_used} clock records",
    )
    return AggregationOutcome(metrics=metrics, warnings=tuple(warnings), reports=reports)
