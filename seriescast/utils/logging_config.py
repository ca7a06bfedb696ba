"""Logging setup for applications embedding the engine.

The library itself only creates module loggers; an application calls
``setup_logging`` once to get a console stream plus JSON-lines files.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
APP_LOG = "app.jsonl"
ERROR_LOG = "errors.jsonl"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; ``extra={"props": {...}}`` fields are inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
            "lineNo": record.lineno,
        }

        props = getattr(record, "props", None)
        if isinstance(props, dict):
            entry.update(props)

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _json_handler(path: Path, level: Union[int, str]) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(
    log_level: Union[int, str] = "INFO",
    log_dir: Optional[Union[str, Path]] = "logs",
) -> None:
    """
    Configure the root logger, replacing any handlers already attached.

    Args:
        log_level: Threshold for the console and ``app.jsonl``
        log_dir: Directory receiving ``app.jsonl`` and ``errors.jsonl``;
            console only when None
    """
    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers = []

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    if log_dir is not None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        root.addHandler(_json_handler(directory / APP_LOG, log_level))
        root.addHandler(_json_handler(directory / ERROR_LOG, logging.ERROR))

    logging.getLogger(__name__).info(
        f"Logging configured at {logging.getLevelName(root.level)}"
        + (f", JSON logs in {log_dir}" if log_dir is not None else "")
    )


def get_logger(name: str) -> logging.Logger:
    """Named logger, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
