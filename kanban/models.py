from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

COLUMNS: tuple[str, ...] = ("todo", "doing", "done")
DEFAULT_COLUMN = "todo"


def utcnow() -> datetime:
  return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
  """Timestamp that always reads back as an aware UTC datetime.

  SQLite drops the offset on write, so values are stored as UTC wall time and
  tagged with UTC on the way out.
  """

  impl = DateTime(timezone=True)
  cache_ok = True

  def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
    if value is not None and value.tzinfo is not None:
      value = value.astimezone(timezone.utc)
    return value

  def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
    if value is None:
      return None
    if value.tzinfo is None:
      return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Base(DeclarativeBase):
  pass


class Tag(Base):
  __tablename__ = "tags"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
  color: Mapped[str] = mapped_column(String, nullable=False, default="#f179af")


class Ticket(Base):
  __tablename__ = "tickets"
  __table_args__ = (
    CheckConstraint("column_name IN ('todo', 'doing', 'done')", name="ck_tickets_column_name"),
    CheckConstraint("position >= 0", name="ck_tickets_position_nonneg"),
    Index("ix_tickets_column_position", "column_name", "position"),
  )

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  description: Mapped[str] = mapped_column(Text, nullable=False, default="")
  column_name: Mapped[str] = mapped_column(String, nullable=False, default=DEFAULT_COLUMN)
  position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
  created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, nullable=False)

  # Association rows are written through TicketTag directly.
  tags: Mapped[list[Tag]] = relationship(secondary="ticket_tags", order_by="Tag.name", viewonly=True)


class TicketTag(Base):
  __tablename__ = "ticket_tags"

  ticket_id: Mapped[int] = mapped_column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), primary_key=True)
  tag_id: Mapped[int] = mapped_column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)


class Comment(Base):
  __tablename__ = "comments"

  id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
  ticket_id: Mapped[int] = mapped_column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
  body: Mapped[str] = mapped_column(Text, nullable=False)
  created_at: Mapped[datetime] = mapped_column(UTCDateTime(), default=utcnow, nullable=False)
