from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from kanban.errors import Conflict, NotFound, ValidationError
from kanban.models import Tag, Ticket, TicketTag
from kanban.store import Store

logger = logging.getLogger(__name__)


async def _require(db: AsyncSession, model, pk: int, label: str) -> None:
  res = await db.execute(select(model.id).where(model.id == pk))
  if res.scalar_one_or_none() is None:
    raise NotFound(f"{label} not found", details={f"{label.lower()}Id": pk})


async def list_tags(store: Store) -> list[Tag]:
  async with store.session() as db:
    res = await db.execute(select(Tag).order_by(Tag.name.asc()))
    return list(res.scalars().all())


async def create_tag(store: Store, *, name: str | None, color: str | None = None, default_color: str = "#f179af") -> Tag:
  clean = (name or "").strip()
  if not clean:
    raise ValidationError("Name is required")

  try:
    async with store.transaction() as db:
      res = await db.execute(select(Tag.id).where(Tag.name == clean))
      if res.scalar_one_or_none() is not None:
        raise Conflict("Tag already exists", details={"name": clean})
      tag = Tag(name=clean, color=(color or "").strip() or default_color)
      db.add(tag)
      await db.flush()
  except IntegrityError as e:
    raise Conflict("Tag already exists", details={"name": clean}) from e
  return tag


async def delete_tag(store: Store, tag_id: int) -> None:
  async with store.transaction() as db:
    await _require(db, Tag, tag_id, "Tag")
    await db.execute(delete(TicketTag).where(TicketTag.tag_id == tag_id))
    await db.execute(delete(Tag).where(Tag.id == tag_id))
  logger.info("tag %s deleted", tag_id, extra={"op": "tag_delete"})


async def add_ticket_tag(store: Store, *, ticket_id: int, tag_id: int) -> bool:
  """
  Attach a tag to a ticket.

  Returns False when the association already existed; that case is not an
  error so callers can retry freely.
  """
  async with store.transaction() as db:
    await _require(db, Ticket, ticket_id, "Ticket")
    await _require(db, Tag, tag_id, "Tag")
    res = await db.execute(
      select(TicketTag).where(TicketTag.ticket_id == ticket_id, TicketTag.tag_id == tag_id)
    )
    if res.scalar_one_or_none() is not None:
      logger.debug("tag %s already on ticket %s", tag_id, ticket_id, extra={"op": "tag_add", "ticket_id": ticket_id})
      return False
    db.add(TicketTag(ticket_id=ticket_id, tag_id=tag_id))
  return True


async def remove_ticket_tag(store: Store, *, ticket_id: int, tag_id: int) -> None:
  async with store.transaction() as db:
    await db.execute(delete(TicketTag).where(TicketTag.ticket_id == ticket_id, TicketTag.tag_id == tag_id))
