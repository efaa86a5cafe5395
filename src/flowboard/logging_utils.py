"""Logging setup shared by the engine modules.

Module loggers live under the ``flowboard`` namespace. :func:`get_logger`
attaches a console handler and, when ``paths.logs_dir`` is configured, a
``flowboard.log`` file handler. If the file handler cannot be created the
logger keeps console output only.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import FlowboardConfig


SYSTEM_FMT = "[%(asctime)s] [%(levelname)s] %(message)s"
ROOT_LOGGER = "flowboard"


def _logs_dir(config: FlowboardConfig) -> Optional[Path]:
    if not config.paths.logs_dir:
        return None
    logs_dir = Path(config.paths.logs_dir).expanduser().resolve()
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir


def _safe_add_file_handler(logger: logging.Logger, path: Path, fmt: str, level: int) -> None:
    try:
        fh = logging.FileHandler(path, encoding="utf-8")
    except OSError as exc:
        logger.warning("[WARNING] Failed to attach file handler %s (%s)", str(path), exc)
        return
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter(fmt))
    logger.addHandler(fh)


def get_logger(name: str = ROOT_LOGGER, config: Optional[FlowboardConfig] = None) -> logging.Logger:
    """Return a logger with console (+ optional file) handlers at the configured level.

    Handlers are reset on every call so repeated setup does not duplicate output.
    """
    config = config or FlowboardConfig()
    level = getattr(logging, config.logging.level)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers = []

    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(SYSTEM_FMT))
    logger.addHandler(sh)

    logs_dir = _logs_dir(config)
    if logs_dir is not None:
        _safe_add_file_handler(logger, logs_dir / "flowboard.log", SYSTEM_FMT, level)
    return logger


def log_system_event(logger: logging.Logger, message: str):
    logger.info("[SYSTEM] %s", message)


def log_warning(logger: logging.Logger, message: str):
    logger.warning("[WARNING] %s", message)


def log_error(logger: logging.Logger, message: str):
    logger.error("[ERROR] %s", message)
