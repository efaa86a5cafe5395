"""
Flowboard: weekly throughput aggregation for warehouse dashboards.

Turns catalog, sales-order, purchase-order and clock records into weekly case
volumes, labor hours, cases-per-labor-hour and store rankings.
"""

from .engine import AggregationOutcome, run_aggregation

__all__ = ["AggregationOutcome", "run_aggregation"]
