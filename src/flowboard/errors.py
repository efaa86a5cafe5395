"""Fatal aggregation conditions and the typed failure handed back to callers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureCode(str, Enum):
    EMPTY_CATALOG = "empty_catalog"
    NO_WEEKS = "no_weeks"


class AggregationError(ValueError):
    """Base class for conditions that abort a whole aggregation run."""

    code: FailureCode


class EmptyCatalogError(AggregationError):
    """No catalog row produced a usable product -> units-per-case entry."""

    code = FailureCode.EMPTY_CATALOG


class NoWeeksError(AggregationError):
    """Sales, purchases and labor together produced no week buckets."""

    code = FailureCode.NO_WEEKS


@dataclass(frozen=True)
class AggregationFailure:
    code: FailureCode
    message: str

    @classmethod
    def from_error(cls, exc: AggregationError) -> "AggregationFailure":
        return cls(code=exc.code, message=str(exc))

    def as_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message}
