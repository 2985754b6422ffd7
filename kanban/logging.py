"""Logging setup for the kanban API.

Configures the ``kanban`` logger namespace once per process: a stream handler,
an optional rotating file (5MB, 3 backups) and either a plain or a single-line
JSON format.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from kanban.config import Settings

_LOGGER_NAME = "kanban"
_setup_lock = threading.Lock()
_MAX_BYTES = 5 * 1024 * 1024  # 5MB
_BACKUP_COUNT = 3
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _JsonFormatter(logging.Formatter):
  """Format log records as single-line JSON."""

  def format(self, record: logging.LogRecord) -> str:
    entry: dict[str, Any] = {
      "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
      "level": record.levelname,
      "logger": record.name,
      "msg": record.getMessage(),
    }
    if hasattr(record, "op"):
      entry["op"] = record.op
    if hasattr(record, "ticket_id"):
      entry["ticket_id"] = record.ticket_id
    if hasattr(record, "column"):
      entry["column"] = record.column
    if record.exc_info and record.exc_info[1]:
      entry["exception"] = str(record.exc_info[1])
    return json.dumps(entry, default=str)


def _formatter(settings: Settings) -> logging.Formatter:
  if settings.log_json:
    return _JsonFormatter()
  return logging.Formatter(_PLAIN_FORMAT)


def setup_logging(settings: Settings) -> logging.Logger:
  """Attach handlers to the ``kanban`` logger.

  Safe to call repeatedly: handlers installed by an earlier call are reused,
  and a file handler pointing at a different path is replaced.
  """
  logger = logging.getLogger(_LOGGER_NAME)

  with _setup_lock:
    logger.setLevel(settings.log_level.upper())
    formatter = _formatter(settings)

    has_stream = False
    for h in logger.handlers[:]:
      if isinstance(h, RotatingFileHandler):
        if settings.log_file and h.baseFilename == os.path.abspath(settings.log_file):
          h.setFormatter(formatter)
          continue
        logger.removeHandler(h)
        h.close()
      elif isinstance(h, logging.StreamHandler):
        h.setFormatter(formatter)
        has_stream = True

    if not has_stream:
      stream = logging.StreamHandler()
      stream.setFormatter(formatter)
      logger.addHandler(stream)

    if settings.log_file and not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
      path = Path(settings.log_file)
      path.parent.mkdir(parents=True, exist_ok=True)
      handler = RotatingFileHandler(str(path), maxBytes=_MAX_BYTES, backupCount=_BACKUP_COUNT)
      handler.setFormatter(formatter)
      logger.addHandler(handler)

  return logger
