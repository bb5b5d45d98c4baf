"""
Console logging for nut-exporter.

The root logger gets one stream handler. Level and format come from:
- NUT_EXPORTER_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
- NUT_EXPORTER_LOG_FORMAT: text|json (default: text)
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _env_level() -> int:
    name = os.getenv("NUT_EXPORTER_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


def _formatter() -> logging.Formatter:
    if os.getenv("NUT_EXPORTER_LOG_FORMAT", "text").lower() == "json":
        return JsonFormatter(JSON_FORMAT, rename_fields={"levelname": "level", "name": "logger"})
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")


def setup_logging(force: bool = False, *, level: Optional[int] = None) -> None:
    """Attach the console handler to the root logger.

    Does nothing if the root logger already has handlers, unless force is
    set, in which case they are replaced. An explicit level overrides
    NUT_EXPORTER_LOG_LEVEL.
    """
    root = logging.getLogger()
    if root.handlers:
        if not force:
            return
        for handler in list(root.handlers):
            root.removeHandler(handler)

    root.setLevel(level if level is not None else _env_level())
    handler = logging.StreamHandler()
    handler.setFormatter(_formatter())
    root.addHandler(handler)
