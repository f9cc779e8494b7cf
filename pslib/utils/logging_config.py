"""Logging setup for the pslib command-line tools.

Library modules only create module loggers (``logging.getLogger(__name__)``)
and never install handlers.  ``pslib-render`` calls :func:`setup_logging`
once with the ``logging`` section of ``pslib.yaml``:

    logging:
      level: INFO
      json: false          # JSON lines instead of the human format
      color: true          # ANSI level colors (TTY only)
      console: true        # stderr handler
      file: logs/pslib.log # optional
      rotate:              # optional, only with ``file``
        mode: size         # or "time"
        max_bytes: 10000000
        backup_count: 5

Records carry contextual fields (``app``, ``scene``) set with
:func:`push_context`; they are stored in a ``contextvars.ContextVar`` so
nested renders in other threads do not leak into each other.

Format examples:
    Human: 2026-10-19T13:45:12.345Z | INFO     | app=pslib-render scene=poster.yaml | Wrote 2 page(s) to poster.ps
    JSON: {"t": "2026-10-19T13:45:12.345+00:00", "lvl": "INFO", "name": "pslib.scripts.render_scene", ...}

Calling :func:`setup_logging` again replaces the handlers it installed
before instead of stacking new ones.
"""

import contextvars
import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

_context_var: contextvars.ContextVar = contextvars.ContextVar('pslib_log_context', default={})

# Handlers installed by the last setup_logging() call
_installed: List[logging.Handler] = []

# Third-party loggers that are chatty at DEBUG (Pillow plugin discovery)
QUIET_LOGGERS = ("PIL",)

LEVEL_COLORS = {
    'DEBUG': '\033[36m',
    'INFO': '\033[32m',
    'WARNING': '\033[33m',
    'ERROR': '\033[31m',
    'CRITICAL': '\033[35m',
}
RESET = '\033[0m'


# ============================================================================
# FORMATTER
# ============================================================================

class ContextFormatter(logging.Formatter):
    """Render records as ``ts | LEVEL | k=v ... | message`` or JSON lines.

    Parameters
    ----------
    fmt_mode : str
        ``"human"`` or ``"json"``
    use_color : bool
        Color the level name; ignored unless stderr is a TTY
    """

    def __init__(self, fmt_mode: str = "human", use_color: bool = True):
        super().__init__()
        if fmt_mode not in ("human", "json"):
            raise ValueError(f"Unknown log format: {fmt_mode}")
        self.fmt_mode = fmt_mode
        self.use_color = use_color and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        context = _context_var.get()
        exc = self.formatException(record.exc_info) if record.exc_info else None

        if self.fmt_mode == "json":
            payload = {
                't': ts.isoformat(),
                'lvl': record.levelname,
                'name': record.name,
                'pid': os.getpid(),
                **context,
                'msg': record.getMessage(),
            }
            if exc:
                payload['exc'] = exc
            return json.dumps(payload, default=str)

        level = f"{record.levelname:8s}"
        if self.use_color:
            level = f"{LEVEL_COLORS.get(record.levelname, '')}{level}{RESET}"
        fields = [f"{ts:%Y-%m-%dT%H:%M:%S}.{ts.microsecond // 1000:03d}Z", level]
        if context:
            fields.append(' '.join(f"{k}={v}" for k, v in context.items()))
        fields.append(record.getMessage())
        line = ' | '.join(fields)
        return f"{line}\n{exc}" if exc else line


# ============================================================================
# HANDLERS
# ============================================================================

def _file_handler(path: str, rotate: Optional[Mapping[str, Any]]) -> logging.Handler:
    """Plain, size-rotating or time-rotating file handler for *path*."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if not rotate:
        return logging.FileHandler(path, encoding='utf-8')

    mode = rotate.get('mode', 'size')
    if mode == 'size':
        return logging.handlers.RotatingFileHandler(
            path,
            maxBytes=int(rotate.get('max_bytes', 10_000_000)),
            backupCount=int(rotate.get('backup_count', 5)),
            encoding='utf-8',
        )
    if mode == 'time':
        return logging.handlers.TimedRotatingFileHandler(
            path,
            when=str(rotate.get('when', 'D')),
            interval=int(rotate.get('interval', 1)),
            backupCount=int(rotate.get('backup_count', 7)),
            encoding='utf-8',
        )
    raise ValueError(f"Unknown rotation mode: {mode}. Use 'size' or 'time'.")


def setup_logging(
    level: str = "INFO",
    file: Optional[str] = None,
    *,
    json: bool = False,
    color: bool = True,
    console: bool = True,
    rotate: Optional[Mapping[str, Any]] = None,
    context: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Install root handlers for a command-line run.

    Parameters
    ----------
    level : str
        Root level name ("DEBUG" ... "CRITICAL")
    file : str, optional
        Log file; None disables file logging
    json : bool
        JSON lines on every handler
    color : bool
        Level colors on the console handler
    console : bool
        Log to stderr
    rotate : Mapping, optional
        ``{"mode": "size", "max_bytes": ..., "backup_count": ...}`` or
        ``{"mode": "time", "when": "D", "interval": 1, "backup_count": ...}``
    context : dict, optional
        Fields added to every record (e.g. {"app": "pslib-render"})

    Returns
    -------
    dict
        {"handlers": [...]} -- the handlers installed by this call

    Raises
    ------
    ValueError
        On an unknown level name or rotation mode
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    fmt_mode = "json" if json else "human"
    handlers: List[logging.Handler] = []
    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(ContextFormatter(fmt_mode, color))
        handlers.append(stream)
    if file:
        handler = _file_handler(file, rotate)
        handler.setFormatter(ContextFormatter(fmt_mode, use_color=False))
        handlers.append(handler)

    root = logging.getLogger()
    while _installed:
        old = _installed.pop()
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        root.addHandler(handler)
    _installed.extend(handlers)
    root.setLevel(numeric)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.captureWarnings(True)

    if context:
        push_context(**context)
    return {'handlers': handlers}


# ============================================================================
# CONTEXT
# ============================================================================

def push_context(**kwargs) -> None:
    """Add contextual fields to all subsequent log records."""
    _context_var.set({**_context_var.get(), **kwargs})


def pop_context(keys: Optional[List[str]] = None) -> None:
    """Remove contextual fields; all of them when *keys* is None."""
    if keys is None:
        _context_var.set({})
        return
    _context_var.set({k: v for k, v in _context_var.get().items() if k not in keys})


def get_context() -> Dict[str, Any]:
    return dict(_context_var.get())
