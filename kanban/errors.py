"""Domain errors raised by the store and the position engine.

The HTTP layer maps each class to its ``status_code``; nothing below the
routers knows about HTTP.
"""

from __future__ import annotations

from typing import Any


class KanbanError(Exception):
  status_code = 500

  def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
    super().__init__(message)
    self.message = message
    self.details = details or {}


class ValidationError(KanbanError):
  """A required field is empty or an argument is out of range."""

  status_code = 400


class NotFound(KanbanError):
  """A referenced ticket, tag or comment does not exist."""

  status_code = 404


class Conflict(KanbanError):
  """A unique constraint would be violated (e.g. duplicate tag name)."""

  status_code = 409
