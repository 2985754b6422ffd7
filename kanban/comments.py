from __future__ import annotations

from sqlalchemy import delete, select

from kanban.errors import NotFound, ValidationError
from kanban.models import Comment, Ticket
from kanban.store import Store


async def list_comments(store: Store, ticket_id: int) -> list[Comment]:
  async with store.session() as db:
    tres = await db.execute(select(Ticket.id).where(Ticket.id == ticket_id))
    if tres.scalar_one_or_none() is None:
      raise NotFound("Ticket not found", details={"ticketId": ticket_id})
    res = await db.execute(
      select(Comment).where(Comment.ticket_id == ticket_id).order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    return list(res.scalars().all())


async def create_comment(store: Store, *, ticket_id: int, body: str | None) -> Comment:
  clean = (body or "").strip()
  if not clean:
    raise ValidationError("Comment body is required")

  async with store.transaction() as db:
    tres = await db.execute(select(Ticket.id).where(Ticket.id == ticket_id))
    if tres.scalar_one_or_none() is None:
      raise NotFound("Ticket not found", details={"ticketId": ticket_id})
    c = Comment(ticket_id=ticket_id, body=clean)
    db.add(c)
    await db.flush()
  return c


async def delete_comment(store: Store, comment_id: int) -> None:
  async with store.transaction() as db:
    res = await db.execute(delete(Comment).where(Comment.id == comment_id))
    if not res.rowcount:
      raise NotFound("Comment not found", details={"commentId": comment_id})
