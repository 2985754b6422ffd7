from __future__ import annotations

from fastapi import APIRouter, Depends

from kanban import comments as comments_svc
from kanban import positions, tickets
from kanban.deps import get_metrics, get_store
from kanban.metrics import RuntimeMetrics
from kanban.routers.serializers import comment_out, ticket_out
from kanban.schemas import (
  ClearDoneOut,
  ColumnReorderIn,
  TicketCreateIn,
  TicketDetailOut,
  TicketMoveIn,
  TicketOut,
  TicketUpdateIn,
)
from kanban.store import Store

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("", response_model=TicketOut)
async def create_ticket(
  payload: TicketCreateIn,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> TicketOut:
  t = await tickets.create_ticket(store, title=payload.title, column=payload.column, description=payload.description)
  metrics.count_mutation("ticket.created")
  return ticket_out(t)


# Fixed paths are registered before /{ticket_id} so they are not captured by it.
@router.post("/move")
async def move_ticket(
  payload: TicketMoveIn,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> dict:
  await positions.move_ticket(
    store,
    ticket_id=payload.ticketId,
    target_column=payload.targetColumn,
    new_position=payload.newPosition,
  )
  metrics.count_mutation("ticket.moved")
  return {"ok": True}


@router.post("/reorder")
async def reorder_column(
  payload: ColumnReorderIn,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> dict:
  await positions.reorder_column(store, column=payload.column, ticket_ids=payload.ticketIds)
  metrics.count_mutation("column.reordered")
  return {"ok": True}


@router.delete("/done/clear", response_model=ClearDoneOut)
async def clear_done(
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> ClearDoneOut:
  deleted = await tickets.clear_done(store)
  metrics.count_mutation("done.cleared")
  return ClearDoneOut(deleted=deleted)


@router.get("/{ticket_id}", response_model=TicketDetailOut)
async def get_ticket(ticket_id: int, store: Store = Depends(get_store)) -> TicketDetailOut:
  t = await tickets.get_ticket(store, ticket_id)
  comments = await comments_svc.list_comments(store, ticket_id)
  return TicketDetailOut(**ticket_out(t).model_dump(), comments=[comment_out(c) for c in comments])


@router.patch("/{ticket_id}", response_model=TicketOut)
@router.put("/{ticket_id}", response_model=TicketOut)
async def update_ticket(
  ticket_id: int,
  payload: TicketUpdateIn,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> TicketOut:
  t = await tickets.update_ticket(store, ticket_id, title=payload.title, description=payload.description)
  metrics.count_mutation("ticket.updated")
  return ticket_out(t)


@router.delete("/{ticket_id}")
async def delete_ticket(
  ticket_id: int,
  store: Store = Depends(get_store),
  metrics: RuntimeMetrics = Depends(get_metrics),
) -> dict:
  await tickets.delete_ticket(store, ticket_id)
  metrics.count_mutation("ticket.deleted")
  return {"ok": True}
