from __future__ import annotations

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from kanban.errors import NotFound, ValidationError
from kanban.models import COLUMNS, DEFAULT_COLUMN, Comment, Ticket, TicketTag
from kanban.positions import close_gap, next_position, validate_column
from kanban.store import Store

logger = logging.getLogger(__name__)


async def load_ticket(db: AsyncSession, ticket_id: int) -> Ticket:
  res = await db.execute(select(Ticket).options(selectinload(Ticket.tags)).where(Ticket.id == ticket_id))
  t = res.scalar_one_or_none()
  if not t:
    raise NotFound("Ticket not found", details={"ticketId": ticket_id})
  return t


async def _delete_ticket_rows(db: AsyncSession, ticket_ids) -> None:
  await db.execute(delete(TicketTag).where(TicketTag.ticket_id.in_(ticket_ids)))
  await db.execute(delete(Comment).where(Comment.ticket_id.in_(ticket_ids)))
  await db.execute(delete(Ticket).where(Ticket.id.in_(ticket_ids)))


async def create_ticket(
  store: Store, *, title: str | None, column: str | None = None, description: str | None = ""
) -> Ticket:
  clean_title = (title or "").strip()
  if not clean_title:
    raise ValidationError("Title is required")
  col = validate_column(column or DEFAULT_COLUMN)

  async with store.transaction() as db:
    t = Ticket(
      title=clean_title,
      description=description or "",
      column_name=col,
      position=await next_position(db, col),
    )
    db.add(t)
    await db.flush()
    await db.refresh(t, attribute_names=["tags"])

  logger.info("ticket %s created in %s[%s]", t.id, t.column_name, t.position, extra={"op": "create", "ticket_id": t.id})
  return t


async def get_ticket(store: Store, ticket_id: int) -> Ticket:
  async with store.session() as db:
    return await load_ticket(db, ticket_id)


async def update_ticket(
  store: Store,
  ticket_id: int,
  *,
  title: str | None = None,
  description: str | None = None,
) -> Ticket:
  if title is None and description is None:
    raise ValidationError("Nothing to update")
  clean_title = None
  if title is not None:
    clean_title = title.strip()
    if not clean_title:
      raise ValidationError("Title must not be empty")

  async with store.transaction() as db:
    t = await load_ticket(db, ticket_id)
    if clean_title is not None:
      t.title = clean_title
    if description is not None:
      t.description = description
    await db.flush()
  return t


async def delete_ticket(store: Store, ticket_id: int) -> None:
  async with store.transaction() as db:
    t = await load_ticket(db, ticket_id)
    column, position = t.column_name, t.position
    await _delete_ticket_rows(db, [t.id])
    await close_gap(db, column=column, position=position)

  logger.info("ticket %s deleted from %s[%s]", ticket_id, column, position, extra={"op": "delete", "ticket_id": ticket_id})


async def clear_done(store: Store) -> int:
  """Delete every ticket in the ``done`` column. Returns how many were removed."""
  async with store.transaction() as db:
    res = await db.execute(select(Ticket.id).where(Ticket.column_name == "done"))
    ids = list(res.scalars().all())
    if ids:
      await _delete_ticket_rows(db, ids)

  logger.info("cleared %d done tickets", len(ids), extra={"op": "clear_done", "column": "done"})
  return len(ids)


async def list_board(store: Store) -> dict[str, list[Ticket]]:
  async with store.session() as db:
    res = await db.execute(
      select(Ticket).options(selectinload(Ticket.tags)).order_by(Ticket.position.asc(), Ticket.id.asc())
    )
    board: dict[str, list[Ticket]] = {c: [] for c in COLUMNS}
    for t in res.scalars().all():
      board.setdefault(t.column_name, []).append(t)
    return board


async def column_counts(store: Store) -> dict[str, int]:
  async with store.session() as db:
    res = await db.execute(select(Ticket.column_name, func.count()).group_by(Ticket.column_name))
    counts = {c: 0 for c in COLUMNS}
    for column, n in res.all():
      counts[column] = int(n)
    return counts
