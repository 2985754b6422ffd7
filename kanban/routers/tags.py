from __future__ import annotations

from fastapi import APIRouter, Depends

from kanban import tags
from kanban.config import Settings
from kanban.deps import get_metrics, get_settings, get_store
from kanban.metrics import RuntimeMetrics
from kanban.routers.serializers import tag_out
from kanban.schemas import TagCreateIn, TagOut, TicketTagIn
from kanban.store import Store

router = APIRouter(tags=["tags"])


@router.get("/tags", response_model=list[TagOut])
async def list_tags(store: Store = Depends(get_store)) -> list[TagOut]:
  return [tag_out(t) for t in await tags.list_tags(store)]


@router.post("/tags", response_model=TagOut)
async def create_tag(
  payload: TagCreateIn,
  store: Store = Depends(get_store),
  settings: Settings = Depends(get_settings),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> TagOut:
  tag = await tags.create_tag(store, name=payload.name, color=payload.color, default_color=settings.default_tag_color)
  metrics.count_mutation("tag.created")
  return tag_out(tag)


@router.delete("/tags/{tag_id}")
async def delete_tag(
  tag_id: int,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> dict:
  await tags.delete_tag(store, tag_id)
  metrics.count_mutation("tag.deleted")
  return {"ok": True}


@router.post("/tickets/{ticket_id}/tags")
async def add_ticket_tag(
  ticket_id: int,
  payload: TicketTagIn,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> dict:
  if await tags.add_ticket_tag(store, ticket_id=ticket_id, tag_id=payload.tagId):
    metrics.count_mutation("ticket_tag.added")
  return {"ok": True}


@router.delete("/tickets/{ticket_id}/tags/{tag_id}")
async def remove_ticket_tag(ticket_id: int, tag_id: int, store: Store = Depends(get_store)) -> dict:
  await tags.remove_ticket_tag(store, ticket_id=ticket_id, tag_id=tag_id)
  return {"ok": True}
