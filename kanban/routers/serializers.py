from __future__ import annotations

from kanban.models import Comment, Tag, Ticket
from kanban.schemas import CommentOut, TagOut, TicketOut


def tag_out(tag: Tag) -> TagOut:
  return TagOut(id=tag.id, name=tag.name, color=tag.color)


def ticket_out(t: Ticket) -> TicketOut:
  return TicketOut(
    id=t.id,
    title=t.title,
    description=t.description,
    column=t.column_name,
    position=t.position,
    createdAt=t.created_at,
    tags=[tag_out(tag) for tag in t.tags],
  )


def comment_out(c: Comment) -> CommentOut:
  return CommentOut(id=c.id, ticketId=c.ticket_id, body=c.body, createdAt=c.created_at)
