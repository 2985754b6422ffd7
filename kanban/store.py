from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from kanban.models import Base

logger = logging.getLogger(__name__)


def _is_sqlite(url: str) -> bool:
  return url.startswith("sqlite")


class Store:
  """
  Handle on the board's relational store.

  One instance is built at process start and passed to every service call.
  It owns the engine, the session factory and the board write lock.

  Notes:
  - `session()` is for reads and does not take the lock.
  - `transaction()` serializes writers on the lock, then runs one database
    transaction that commits on exit and rolls back if the body raises.
  """

  def __init__(self, database_url: str, *, echo: bool = False) -> None:
    self.database_url = database_url
    self.engine: AsyncEngine = create_async_engine(database_url, echo=echo)
    if _is_sqlite(database_url):
      event.listen(self.engine.sync_engine, "connect", _sqlite_on_connect)
    self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)
    self._write_lock = asyncio.Lock()

  async def create_schema(self) -> None:
    async with self.engine.begin() as conn:
      await conn.run_sync(Base.metadata.create_all)
    logger.info("schema ready", extra={"op": "schema"})

  async def dispose(self) -> None:
    await self.engine.dispose()

  @asynccontextmanager
  async def session(self) -> AsyncIterator[AsyncSession]:
    async with self._sessionmaker() as db:
      yield db

  @asynccontextmanager
  async def transaction(self) -> AsyncIterator[AsyncSession]:
    async with self._write_lock:
      async with self._sessionmaker() as db:
        async with db.begin():
          yield db


def _sqlite_on_connect(dbapi_conn, _record) -> None:
  cur = dbapi_conn.cursor()
  try:
    cur.execute("PRAGMA foreign_keys = ON")
    cur.execute("PRAGMA journal_mode = WAL")
  finally:
    cur.close()
