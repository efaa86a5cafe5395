"""Product catalog lookup: product name to units per case."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from .diagnostics import SkipReason, SourceReport, log_source_report
from .errors import EmptyCatalogError
from .fields import (
    CATALOG_PRODUCT_ALIASES,
    CATALOG_UNITS_ALIASES,
    clean_text,
    coerce_positive_int,
    resolve_field,
)


logger = logging.getLogger("flowboard.product_index")


class ProductIndex(Mapping[str, int]):
    """Read-only product name -> units-per-case lookup.

    Names are trimmed and case-sensitive. Missing names are "unknown product";
    :meth:`units_per_case` returns None for them instead of raising.
    """

    def __init__(self, entries: Mapping[str, int], report: Optional[SourceReport] = None) -> None:
        self._entries: Dict[str, int] = dict(entries)
        self.report = report or SourceReport(source="catalog", records_used=len(self._entries))

    def __getitem__(self, name: str) -> int:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ProductIndex({len(self._entries)} products)"

    def units_per_case(self, name: Any) -> Optional[int]:
        key = clean_text(name)
        if key is None:
            return None
        return self._entries.get(key)


def lookup_units_per_case(index: ProductIndex, name: Any) -> Optional[int]:
    return index.units_per_case(name)


def build_product_index(
    records: Iterable[Any],
    product_aliases: Sequence[str] = CATALOG_PRODUCT_ALIASES,
    units_aliases: Sequence[str] = CATALOG_UNITS_ALIASES,
    default_units_per_case: Optional[int] = None,
    max_samples: int = 5,
) -> ProductIndex:
    """Build the product index from catalog rows.

    A row is kept only when it has a non-blank name and a positive integer
    units-per-case (or ``default_units_per_case`` when the field is absent).
    Later rows win on duplicate names.

    Raises:
        EmptyCatalogError: when no row survives validation.
    """
    rows: List[Any] = list(records or [])
    entries: Dict[str, int] = {}
    reasons: List[Optional[SkipReason]] = []

    for row in rows:
        if not isinstance(row, Mapping):
            reasons.append(SkipReason.MALFORMED_RECORD)
            continue
        name = clean_text(resolve_field(row, product_aliases))
        if name is None:
            reasons.append(SkipReason.MISSING_PRODUCT)
            continue
        raw_units = resolve_field(row, units_aliases, default=default_units_per_case)
        units = coerce_positive_int(raw_units)
        if units is None:
            reasons.append(SkipReason.INVALID_UNITS)
            continue
        if name in entries and entries[name] != units:
            logger.debug("catalog: %r redefined (%d -> %d units per case)", name, entries[name], units)
        entries[name] = units
        reasons.append(None)

    report = SourceReport.from_reasons("catalog", rows, reasons, max_samples=max_samples)
    log_source_report(logger, report)
    if not entries:
        raise EmptyCatalogError(
            f"No valid products found in catalog ({len(rows)} rows, {report.skipped_total} skipped)"
        )
    return ProductIndex(entries, report=report)
