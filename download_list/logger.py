"""JSON-lines file logger with printf-style message templates."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Union

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}


def _iso8601(created: float) -> str:
    moment = datetime.fromtimestamp(created).astimezone()
    millis = f"{moment.microsecond // 1000:03d}"
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + millis + moment.strftime("%z")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname.lower()),
            "ts": _iso8601(record.created),
            "caller": f"{record.filename}:{record.lineno}",
            "msg": record.getMessage(),
        }
        return json.dumps(payload, ensure_ascii=False)


def _render(template: str, args: tuple) -> str:
    if not args:
        return template
    if "%" in template:
        try:
            return template % args
        except (TypeError, ValueError):
            pass
    return " ".join([template.rstrip(), *(str(arg) for arg in args)])


class Logger:
    """Levelled logger; each call takes a template and optional arguments."""

    def __init__(self, engine: logging.Logger) -> None:
        self._engine = engine

    def _log(self, level: int, template: str, args: tuple) -> None:
        self._engine.log(level, _render(template, args), stacklevel=3)

    def debug(self, template: str, *args: Any) -> None:
        self._log(logging.DEBUG, template, args)

    def info(self, template: str, *args: Any) -> None:
        self._log(logging.INFO, template, args)

    def warn(self, template: str, *args: Any) -> None:
        self._log(logging.WARNING, template, args)

    def error(self, template: str, *args: Any) -> None:
        self._log(logging.ERROR, template, args)

    def fatal(self, template: str, *args: Any) -> None:
        """Log at fatal level, then exit the process with status 1."""
        self._log(logging.CRITICAL, template, args)
        raise SystemExit(1)


def create_log_file(pattern: str, directory: Union[str, Path] = "logs") -> Path:
    """Ensure today's log file ``<directory>/<pattern>-YYYY-MM-DD.log`` exists."""
    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / f"{pattern}-{date.today():%Y-%m-%d}.log"
    path.touch(exist_ok=True)
    return path


def new_logger(pattern: str, directory: Union[str, Path] = "logs") -> Logger:
    """Create a logger writing info-and-above JSON lines to today's file."""
    path = create_log_file(pattern, directory)
    engine = logging.getLogger(f"download_list.{path.resolve()}")
    for handler in list(engine.handlers):
        engine.removeHandler(handler)
        handler.close()
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(_JsonFormatter())
    engine.addHandler(handler)
    engine.setLevel(logging.INFO)
    engine.propagate = False
    return Logger(engine)