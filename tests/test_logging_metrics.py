from __future__ import annotations

import json
import logging
import os
from logging.handlers import RotatingFileHandler

import pytest

from kanban.config import Settings
from kanban.logging import _JsonFormatter, setup_logging
from kanban.metrics import RuntimeMetrics


@pytest.fixture
def clean_logger():
  logger = logging.getLogger("kanban")
  saved = logger.handlers[:]
  logger.handlers.clear()
  yield logger
  for h in logger.handlers:
    h.close()
  logger.handlers[:] = saved


def test_setup_logging_is_idempotent(clean_logger, tmp_path) -> None:
  s = Settings(_env_file=None, log_file=str(tmp_path / "logs" / "kanban.log"), log_level="DEBUG")

  setup_logging(s)
  setup_logging(s)

  files = [h for h in clean_logger.handlers if isinstance(h, RotatingFileHandler)]
  streams = [h for h in clean_logger.handlers if not isinstance(h, RotatingFileHandler)]
  assert len(files) == 1
  assert len(streams) == 1
  assert clean_logger.level == logging.DEBUG
  assert (tmp_path / "logs").is_dir()


def test_setup_logging_swaps_file_handler_on_new_path(clean_logger, tmp_path) -> None:
  setup_logging(Settings(_env_file=None, log_file=str(tmp_path / "a.log")))
  setup_logging(Settings(_env_file=None, log_file=str(tmp_path / "b.log")))

  files = [h for h in clean_logger.handlers if isinstance(h, RotatingFileHandler)]
  assert [h.baseFilename for h in files] == [os.path.abspath(str(tmp_path / "b.log"))]


def test_json_formatter_includes_extras() -> None:
  record = logging.LogRecord("kanban.positions", logging.INFO, __file__, 1, "ticket %s moved", (5,), None)
  record.op = "move"
  record.ticket_id = 5

  entry = json.loads(_JsonFormatter().format(record))

  assert entry["msg"] == "ticket 5 moved"
  assert entry["level"] == "INFO"
  assert entry["op"] == "move"
  assert entry["ticket_id"] == 5


def test_metrics_snapshot_counts_errors_and_mutations() -> None:
  m = RuntimeMetrics()
  m.observe_request(200, 5.0)
  m.observe_request(500, 50.0)
  m.count_mutation("ticket.moved")
  m.count_mutation("ticket.moved")

  snap = m.snapshot()

  assert snap["requestCount24h"] == 2
  assert snap["errorCount24h"] == 1
  assert snap["errorRate15m"] == 50.0
  assert snap["mutations"] == {"ticket.moved": 2}
