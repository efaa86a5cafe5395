"""Configuration validation models using Pydantic."""
from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional

import yaml
from pydantic import AfterValidator, BaseModel, Field, field_validator

from .fields import DEFAULT_ALIASES


def _check_aliases(v: List[str]) -> List[str]:
    cleaned = [str(a) for a in v if str(a).strip()]
    if not cleaned:
        raise ValueError("alias list must contain at least one non-blank name")
    return cleaned


AliasList = Annotated[List[str], AfterValidator(_check_aliases)]


def _defaults(source: str, name: str) -> List[str]:
    return list(DEFAULT_ALIASES[source][name])


class CatalogAliases(BaseModel):
    product_name: AliasList = Field(default_factory=lambda: _defaults("catalog", "product_name"))
    units_per_case: AliasList = Field(default_factory=lambda: _defaults("catalog", "units_per_case"))


class SalesAliases(BaseModel):
    product_name: AliasList = Field(default_factory=lambda: _defaults("sales", "product_name"))
    quantity: AliasList = Field(default_factory=lambda: _defaults("sales", "quantity"))
    store: AliasList = Field(default_factory=lambda: _defaults("sales", "store"))
    date: AliasList = Field(default_factory=lambda: _defaults("sales", "date"))


class PurchaseAliases(BaseModel):
    product_name: AliasList = Field(default_factory=lambda: _defaults("purchases", "product_name"))
    quantity: AliasList = Field(default_factory=lambda: _defaults("purchases", "quantity"))
    date: AliasList = Field(default_factory=lambda: _defaults("purchases", "date"))


class LaborAliases(BaseModel):
    date: AliasList = Field(default_factory=lambda: _defaults("labor", "date"))
    hours: AliasList = Field(default_factory=lambda: _defaults("labor", "hours"))


class AliasConfig(BaseModel):
    """Recognized header names per source and logical field, first match wins."""

    catalog: CatalogAliases = Field(default_factory=CatalogAliases)
    sales: SalesAliases = Field(default_factory=SalesAliases)
    purchases: PurchaseAliases = Field(default_factory=PurchaseAliases)
    labor: LaborAliases = Field(default_factory=LaborAliases)


class EngineConfig(BaseModel):
    """Aggregation engine settings."""

    aliases: AliasConfig = Field(default_factory=AliasConfig)
    top_n: int = Field(10, ge=1, description="Number of stores in the ranking")
    unknown_store: str = Field("Unknown", min_length=1, description="Label for sales rows without a store")
    default_units_per_case: Optional[int] = Field(
        None, ge=1, description="Units per case for catalog rows that omit the field"
    )
    date_orders: List[Literal["mdy", "dmy", "ymd"]] = Field(
        default_factory=lambda: ["mdy", "dmy", "ymd"],
        min_length=1,
        description="Trial order for ambiguous A/B/C dates",
    )
    max_skip_samples: int = Field(5, ge=0, description="Skipped rows kept per source for diagnostics")

    @field_validator("date_orders")
    @classmethod
    def validate_orders(cls, v):
        """Reject repeated orders."""
        if len(set(v)) != len(v):
            raise ValueError("date_orders must not repeat an order")
        return v


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return str(v).upper()


class PathsConfig(BaseModel):
    logs_dir: Optional[str] = None


class FlowboardConfig(BaseModel):
    """Complete configuration file."""

    engine: EngineConfig = Field(default_factory=EngineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)


def load_and_validate_config(config_dict: Optional[Dict[str, Any]]) -> FlowboardConfig:
    """
    Validate a configuration mapping.

    Args:
        config_dict: Parsed YAML content; None or empty means all defaults.

    Returns:
        Validated FlowboardConfig object

    Raises:
        ValidationError: If configuration is invalid
    """
    return FlowboardConfig(**(config_dict or {}))


def load_engine_config(path: str | Path | None) -> FlowboardConfig:
    """Load and validate a YAML configuration file. A missing file yields defaults."""
    if path is None:
        return FlowboardConfig()
    p = Path(path)
    if not p.exists():
        return FlowboardConfig()
    with open(p, "r", encoding="utf-8") as stream:
        data = yaml.safe_load(stream) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration root must be a mapping: {p}")
    return load_and_validate_config(data)
