import logging
from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from flowboard.config import FlowboardConfig, load_and_validate_config, load_engine_config
from flowboard.fields import DEFAULT_ALIASES
from flowboard.logging_utils import get_logger


REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "flowboard.yaml"


def test_defaults_match_alias_tables():
    cfg = FlowboardConfig()
    assert cfg.engine.top_n == 10
    assert cfg.engine.unknown_store == "Unknown"
    assert cfg.engine.date_orders == ["mdy", "dmy", "ymd"]
    assert cfg.engine.aliases.sales.quantity == list(DEFAULT_ALIASES["sales"]["quantity"])
    assert cfg.engine.aliases.catalog.product_name == ["Product Name", "ProductName", "Name", "Product"]


def test_repository_config_file_is_valid():
    cfg = load_engine_config(REPO_CONFIG)
    assert cfg.engine.aliases.labor.hours == ["Total Less Break", "TotalLessBreak", "Hours"]
    assert cfg.engine.default_units_per_case is None
    assert cfg.logging.level == "INFO"


def test_missing_file_yields_defaults(tmp_path: Path):
    assert load_engine_config(tmp_path / "absent.yaml") == FlowboardConfig()
    assert load_engine_config(None) == FlowboardConfig()


def test_partial_yaml_overrides(tmp_path: Path):
    path = tmp_path / "flowboard.yaml"
    path.write_text(
        dedent(
            """
            engine:
              top_n: 3
              date_orders: [dmy, mdy, ymd]
              aliases:
                sales:
                  quantity: ["Units Shipped"]
            logging:
              level: debug
            """
        ),
        encoding="utf-8",
    )
    cfg = load_engine_config(path)
    assert cfg.engine.top_n == 3
    assert cfg.engine.date_orders == ["dmy", "mdy", "ymd"]
    assert cfg.engine.aliases.sales.quantity == ["Units Shipped"]
    # untouched fields keep defaults
    assert cfg.engine.aliases.sales.store == ["Customer", "Store", "Client"]
    assert cfg.logging.level == "DEBUG"


@pytest.mark.parametrize(
    "engine",
    [
        {"top_n": 0},
        {"date_orders": ["mdy", "mdy"]},
        {"date_orders": ["ydm"]},
        {"date_orders": []},
        {"default_units_per_case": 0},
        {"aliases": {"labor": {"hours": []}}},
        {"aliases": {"labor": {"hours": ["  "]}}},
    ],
)
def test_invalid_config_rejected(engine):
    with pytest.raises(ValidationError):
        load_and_validate_config({"engine": engine})


def test_non_mapping_yaml_rejected(tmp_path: Path):
    path = tmp_path / "flowboard.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_engine_config(path)


def test_get_logger_with_logs_dir(tmp_path: Path):
    cfg = load_and_validate_config({"paths": {"logs_dir": str(tmp_path / "logs")}, "logging": {"level": "WARNING"}})
    logger = get_logger("flowboard.test", cfg)
    try:
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 2
        assert (tmp_path / "logs" / "flowboard.log").exists()
        # repeated setup does not stack handlers
        logger = get_logger("flowboard.test", cfg)
        assert len(logger.handlers) == 2
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
