"""Logging setup helper with rotating file handler for long-running pollers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List


def setup_logging(cfg: Dict[str, Any]) -> logging.Logger:
    """Configure the root logger with console and optional rotating-file outputs.

    Parameters
    ----------
    cfg : dict
        The ``logging`` section of ``runtime.yaml``.  When ``file`` is
        empty or absent only the console handler is installed.

    Returns
    -------
    logging.Logger
        The configured root logger.
    """
    level = cfg.get("level", "INFO")
    log_file = cfg.get("file")
    fmt = cfg.get("format", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    rotate = cfg.get("rotate", {})
    max_bytes = rotate.get("max_bytes", 1_048_576)
    backup_count = rotate.get("backup_count", 3)

    formatter = logging.Formatter(fmt)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    handlers: List[logging.Handler] = [console_handler]

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setFormatter(formatter)
        handlers.insert(0, file_handler)

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers = handlers

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return root
