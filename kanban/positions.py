"""Ticket ordering within columns.

Within each column, ticket positions always form the sequence ``0..n-1``.
Every function here re-reads the current positions from the database; no
ordering state is kept between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from kanban.errors import NotFound, ValidationError
from kanban.models import COLUMNS, Ticket
from kanban.store import Store

logger = logging.getLogger(__name__)


def validate_column(column: str) -> str:
  if column not in COLUMNS:
    raise ValidationError(f"Invalid column: {column!r}", details={"allowed": list(COLUMNS)})
  return column


async def column_size(db: AsyncSession, column: str, *, exclude_id: int | None = None) -> int:
  q = select(func.count()).select_from(Ticket).where(Ticket.column_name == column)
  if exclude_id is not None:
    q = q.where(Ticket.id != exclude_id)
  res = await db.execute(q)
  return int(res.scalar_one() or 0)


async def next_position(db: AsyncSession, column: str) -> int:
  res = await db.execute(select(func.max(Ticket.position)).where(Ticket.column_name == column))
  max_pos = res.scalar_one()
  return (max_pos + 1) if max_pos is not None else 0


async def close_gap(db: AsyncSession, *, column: str, position: int) -> None:
  """Shift every ticket after ``position`` in ``column`` up by one slot."""
  await db.execute(
    update(Ticket)
    .where(Ticket.column_name == column, Ticket.position > position)
    .values(position=Ticket.position - 1)
    .execution_options(synchronize_session=False)
  )


async def renumber_column(db: AsyncSession, column: str, *, leading_ids: Sequence[int] = ()) -> list[Ticket]:
  """
  Rewrite the positions of ``column`` as ``0..n-1``.

  Tickets named in ``leading_ids`` come first, in that order; the rest of the
  column keeps its current relative order (position, then id).
  """
  res = await db.execute(
    select(Ticket)
    .options(selectinload(Ticket.tags))
    .where(Ticket.column_name == column)
    .order_by(Ticket.position.asc(), Ticket.id.asc())
  )
  current = res.scalars().all()
  by_id = {t.id: t for t in current}
  lead = [by_id[i] for i in leading_ids if i in by_id]
  lead_set = {t.id for t in lead}
  ordered = lead + [t for t in current if t.id not in lead_set]
  for idx, t in enumerate(ordered):
    if t.position != idx:
      t.position = idx
  await db.flush()
  return ordered


async def renumber_columns(db: AsyncSession, columns: Iterable[str]) -> None:
  for column in sorted(set(columns)):
    await renumber_column(db, column)


async def move_ticket(store: Store, *, ticket_id: int, target_column: str, new_position: int) -> Ticket:
  validate_column(target_column)
  if new_position < 0:
    raise ValidationError("newPosition must be >= 0")

  async with store.transaction() as db:
    res = await db.execute(select(Ticket).options(selectinload(Ticket.tags)).where(Ticket.id == ticket_id))
    t = res.scalar_one_or_none()
    if not t:
      raise NotFound("Ticket not found", details={"ticketId": ticket_id})

    from_column = t.column_name
    from_position = t.position

    # Out-of-range targets append at the end of the destination column.
    size = await column_size(db, target_column, exclude_id=t.id)
    to_position = min(new_position, size)

    # Order matters: when source == target, the second shift works on the
    # gap-closed state left by the first.
    await close_gap(db, column=from_column, position=from_position)
    await db.execute(
      update(Ticket)
      .where(Ticket.column_name == target_column, Ticket.position >= to_position, Ticket.id != t.id)
      .values(position=Ticket.position + 1)
      .execution_options(synchronize_session=False)
    )
    t.column_name = target_column
    t.position = to_position
    await db.flush()

  logger.info(
    "ticket %s moved %s[%s] -> %s[%s]",
    t.id,
    from_column,
    from_position,
    target_column,
    to_position,
    extra={"op": "move", "ticket_id": t.id, "column": target_column},
  )
  return t


async def reorder_column(store: Store, *, column: str, ticket_ids: Sequence[int]) -> list[Ticket]:
  """
  Make ``ticket_ids`` the leading order of ``column``.

  Listed tickets coming from other columns are moved in; every column touched
  (the target plus each listed ticket's prior column) ends up contiguous.
  Tickets already in ``column`` but not listed follow the listed ones.
  """
  validate_column(column)
  ids = list(ticket_ids)
  if len(set(ids)) != len(ids):
    raise ValidationError("ticketIds must not contain duplicates")

  async with store.transaction() as db:
    found: dict[int, Ticket] = {}
    if ids:
      res = await db.execute(select(Ticket).options(selectinload(Ticket.tags)).where(Ticket.id.in_(ids)))
      found = {t.id: t for t in res.scalars().all()}
    missing = [i for i in ids if i not in found]
    if missing:
      raise NotFound("Ticket not found", details={"ticketIds": missing})

    touched = {column}
    for idx, ticket_id in enumerate(ids):
      t = found[ticket_id]
      touched.add(t.column_name)
      t.column_name = column
      t.position = idx
    await db.flush()

    ordered = await renumber_column(db, column, leading_ids=ids)
    await renumber_columns(db, touched - {column})

  logger.info(
    "column %s reordered (%d listed, touched=%s)",
    column,
    len(ids),
    ",".join(sorted(touched)),
    extra={"op": "reorder", "column": column},
  )
  return ordered
