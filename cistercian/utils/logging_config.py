"""Logging setup shared by cistercian-generate and cistercian-merge.

Every record carries the fields pushed with push_context() (``app``,
``sheet``, ...). Console output is a human line; the optional log file can be
human or JSON lines.

Public API:
    setup_logging(log_level="INFO", context={"app": "generate"})
    get_logger(name)
    push_context(sheet="side_to_side_unmerged")
    pop_context(keys=["sheet"])
    install_excepthook()

Line formats:
    2026-10-19T13:45:12.345Z | INFO     | app=generate | Rendered 500/9999 numerals
    {"t": "2026-10-19T13:45:12.345000+00:00", "lvl": "INFO", "name": "...", "pid": 4242, "msg": "...", "app": "generate"}

Calling setup_logging() again replaces the handlers it installed earlier.
"""

import contextvars
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

_context_var = contextvars.ContextVar('logging_context', default={})

_LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
_RESET = '\033[0m'

_installed_handlers: List[logging.Handler] = []


class ContextFormatter(logging.Formatter):
    """Renders a record plus the current context as a human or JSON line."""

    def __init__(self, fmt_mode: str = "human", use_color: bool = False):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown log format: {fmt_mode}. Use 'human' or 'json'.")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and fmt_mode == "human" and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        context = _context_var.get()
        if self.fmt_mode == "json":
            return self._json_line(record, created, context)
        return self._human_line(record, created, context)

    def _json_line(self, record: logging.LogRecord, created: datetime, context: dict) -> str:
        entry = {
            't': created.isoformat(),
            'lvl': record.levelname,
            'name': record.name,
            'pid': os.getpid(),
            'msg': record.getMessage(),
            **context,
        }
        if record.exc_info:
            entry['exc'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)

    def _human_line(self, record: logging.LogRecord, created: datetime, context: dict) -> str:
        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{_LEVEL_COLORS.get(record.levelname, '')}{level}{_RESET}"

        fields = [created.strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z', level]
        if context:
            fields.append(' '.join(f"{k}={v}" for k, v in context.items()))
        fields.append(record.getMessage())

        line = ' | '.join(fields)
        if record.exc_info:
            line += '\n' + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    to_stderr: bool = True,
    quiet_libs: Optional[List[str]] = None,
    context: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Configure the root logger for a CLI run.

    Parameters
    ----------
    log_level : str
        "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL"
    log_file : str, optional
        Also log to this file (parent directories are created)
    json : bool
        JSON lines in the log file instead of human lines
    color : bool
        ANSI level colors on the console when it is a terminal
    to_stderr : bool
        Attach a console handler on stderr
    quiet_libs : list[str], optional
        Loggers capped at WARNING (e.g. ``["PIL"]``, whose PNG plugin is chatty at DEBUG)
    context : dict, optional
        Fields pushed onto every record, e.g. ``{"app": "merge"}``

    Returns
    -------
    dict
        ``{"handlers": [...]}``, the handlers attached to the root logger
    """
    root = logging.getLogger()
    handlers: List[logging.Handler] = []

    if log_file:
        handlers.append(_create_file_handler(log_file, json))
    if to_stderr:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(ContextFormatter("human", use_color=color))
        handlers.insert(0, console)

    while _installed_handlers:
        old = _installed_handlers.pop()
        root.removeHandler(old)
        old.close()

    root.setLevel(getattr(logging, log_level.upper()))
    for handler in handlers:
        root.addHandler(handler)
        _installed_handlers.append(handler)

    for name in quiet_libs or ():
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.captureWarnings(True)

    if context:
        push_context(**context)

    return {'handlers': handlers}


def _create_file_handler(log_file: str, json_format: bool) -> logging.Handler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file)
    handler.setFormatter(ContextFormatter("json" if json_format else "human"))
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def push_context(**fields) -> None:
    """Attach ``fields`` to every record logged from now on."""
    _context_var.set({**_context_var.get(), **fields})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Drop the given context fields, or all of them when ``keys`` is None."""
    if keys is None:
        _context_var.set({})
        return
    _context_var.set({k: v for k, v in _context_var.get().items() if k not in keys})


def install_excepthook() -> None:
    """Send uncaught exceptions (Ctrl+C excepted) to the log as CRITICAL."""
    def log_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logging.getLogger("cistercian").critical(
            "Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_exception
