from __future__ import annotations

from fastapi import APIRouter, Depends

from kanban import comments
from kanban.deps import get_metrics, get_store
from kanban.metrics import RuntimeMetrics
from kanban.routers.serializers import comment_out
from kanban.schemas import CommentCreateIn, CommentOut
from kanban.store import Store

router = APIRouter(tags=["comments"])


@router.get("/tickets/{ticket_id}/comments", response_model=list[CommentOut])
async def list_comments(ticket_id: int, store: Store = Depends(get_store)) -> list[CommentOut]:
  return [comment_out(c) for c in await comments.list_comments(store, ticket_id)]


@router.post("/tickets/{ticket_id}/comments", response_model=CommentOut)
async def create_comment(
  ticket_id: int,
  payload: CommentCreateIn,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> CommentOut:
  c = await comments.create_comment(store, ticket_id=ticket_id, body=payload.body)
  metrics.count_mutation("comment.created")
  return comment_out(c)


@router.delete("/comments/{comment_id}")
async def delete_comment(
  comment_id: int,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> dict:
  await comments.delete_comment(store, comment_id)
  metrics.count_mutation("comment.deleted")
  return {"ok": True}
