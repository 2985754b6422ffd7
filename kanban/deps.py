from __future__ import annotations

from fastapi import Request

from kanban.config import Settings
from kanban.metrics import RuntimeMetrics
from kanban.store import Store


def get_store(request: Request) -> Store:
  return request.app.state.store


def get_settings(request: Request) -> Settings:
  return request.app.state.settings


def get_metrics(request: Request) -> RuntimeMetrics:
  return request.app.state.metrics
