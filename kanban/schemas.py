from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field

ColumnName = Literal["todo", "doing", "done"]


class TagOut(BaseModel):
  id: int
  name: str
  color: str


class TagCreateIn(BaseModel):
  name: str | None = None
  color: str | None = None


class TicketCreateIn(BaseModel):
  title: str | None = None
  column: ColumnName | None = Field(default=None, validation_alias=AliasChoices("column", "column_name"))
  description: str | None = None


class TicketUpdateIn(BaseModel):
  title: str | None = None
  description: str | None = None


class TicketOut(BaseModel):
  id: int
  title: str
  description: str
  column: str
  position: int
  createdAt: datetime
  tags: list[TagOut] = []


class TicketMoveIn(BaseModel):
  ticketId: int
  targetColumn: ColumnName
  newPosition: int = Field(ge=0)


class ColumnReorderIn(BaseModel):
  column: ColumnName = Field(validation_alias=AliasChoices("column", "column_name"))
  ticketIds: list[int]


class TicketTagIn(BaseModel):
  tagId: int


class CommentCreateIn(BaseModel):
  body: str | None = None


class CommentOut(BaseModel):
  id: int
  ticketId: int
  body: str
  createdAt: datetime


class TicketDetailOut(TicketOut):
  comments: list[CommentOut] = []


class BoardOut(BaseModel):
  todo: list[TicketOut]
  doing: list[TicketOut]
  done: list[TicketOut]
  tags: list[TagOut]
  doneCount: int


class ClearDoneOut(BaseModel):
  ok: bool = True
  deleted: int


class SystemStatusOut(BaseModel):
  version: str
  startedAt: datetime
  columns: dict[str, int]
  metrics: dict[str, Any]
