from __future__ import annotations

from fastapi import APIRouter, Depends

from kanban import tickets
from kanban.config import Settings
from kanban.deps import get_metrics, get_settings, get_store
from kanban.metrics import RuntimeMetrics
from kanban.schemas import SystemStatusOut
from kanban.store import Store

router = APIRouter(tags=["system"])


@router.get("/health")
async def health() -> dict:
  return {"ok": True}


@router.get("/version")
async def version(settings: Settings = Depends(get_settings)) -> dict:
  return {"version": settings.app_version}


@router.get("/system/status", response_model=SystemStatusOut)
async def system_status(
  store: Store = Depends(get_store),
  settings: Settings = Depends(get_settings),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> SystemStatusOut:
  return SystemStatusOut(
    version=settings.app_version,
    startedAt=metrics.started_at,
    columns=await tickets.column_counts(store),
    metrics=metrics.snapshot(),
  )
