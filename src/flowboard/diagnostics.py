"""Per-source skip accounting.

Aggregators never fail on a bad row; they charge it to a :class:`SkipReason`
and move on. A :class:`SourceReport` keeps the counts plus a few sample rows so
malformed exports can be traced without re-running anything.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class SkipReason(str, Enum):
    MALFORMED_RECORD = "malformed_record"
    MISSING_PRODUCT = "missing_product"
    MISSING_QUANTITY = "missing_quantity"
    MISSING_DATE = "missing_date"
    MISSING_HOURS = "missing_hours"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_HOURS = "invalid_hours"
    INVALID_UNITS = "invalid_units"
    UNKNOWN_PRODUCT = "unknown_product"
    INVALID_DATE = "invalid_date"


def _sample_of(record: Any) -> Dict[str, Any]:
    if isinstance(record, Mapping):
        return {str(k): v for k, v in record.items()}
    return {"value": repr(record)}


@dataclass(frozen=True)
class SourceReport:
    source: str
    records_seen: int = 0
    records_used: int = 0
    skipped: Dict[str, int] = field(default_factory=dict)
    samples: Tuple[Tuple[str, Dict[str, Any]], ...] = ()

    @classmethod
    def from_reasons(
        cls,
        source: str,
        records: Sequence[Any],
        reasons: Sequence[Optional[SkipReason]],
        max_samples: int = 5,
    ) -> "SourceReport":
        """Build a report from one reason per record (None = record was used)."""
        counts: Dict[str, int] = {}
        samples: List[Tuple[str, Dict[str, Any]]] = []
        for record, reason in zip(records, reasons):
            if reason is None:
                continue
            counts[reason.value] = counts.get(reason.value, 0) + 1
            if len(samples) < max_samples:
                samples.append((reason.value, _sample_of(record)))
        ordered = {r.value: counts[r.value] for r in SkipReason if r.value in counts}
        used = sum(1 for r in reasons if r is None)
        return cls(
            source=source,
            records_seen=len(records),
            records_used=used,
            skipped=ordered,
            samples=tuple(samples),
        )

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    @property
    def degraded(self) -> bool:
        return self.records_used == 0

    def as_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "records_seen": self.records_seen,
            "records_used": self.records_used,
            "skipped": dict(self.skipped),
            "samples": [{"reason": reason, "record": record} for reason, record in self.samples],
        }


def log_source_report(logger: logging.Logger, report: SourceReport) -> None:
    if report.skipped_total:
        logger.info(
            "%s: used %d of %d records, skipped %s",
            report.source,
            report.records_used,
            report.records_seen,
            ", ".join(f"{k}={v}" for k, v in report.skipped.items()),
        )
    else:
        logger.info("%s: used %d of %d records", report.source, report.records_used, report.records_seen)
    for reason, record in report.samples:
        logger.debug("%s: skipped (%s) %s", report.source, reason, record)
