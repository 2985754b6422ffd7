from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select

from kanban.config import Settings
from kanban.main import create_app
from kanban.models import COLUMNS, Ticket
from kanban.store import Store
from kanban.tickets import create_ticket


@pytest.fixture(scope="session")
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
  return Settings(
    _env_file=None,
    database_url=f"sqlite+aiosqlite:///{tmp_path / 'kanban_test.db'}",
    log_level="WARNING",
  )


@pytest.fixture
async def store(test_settings: Settings) -> Store:
  s = Store(test_settings.database_url)
  await s.create_schema()
  yield s
  await s.dispose()


@pytest.fixture
async def client(test_settings: Settings, store: Store) -> AsyncClient:
  app = create_app(test_settings, store=store)
  transport = ASGITransport(app=app)
  async with AsyncClient(transport=transport, base_url="http://localhost") as c:
    yield c


async def seed_column(store: Store, column: str, count: int, *, prefix: str | None = None) -> list[int]:
  ids = []
  for i in range(count):
    t = await create_ticket(store, title=f"{prefix or column}-{i}", column=column)
    ids.append(t.id)
  return ids


async def column_order(store: Store, column: str) -> list[int]:
  async with store.session() as db:
    res = await db.execute(
      select(Ticket.id).where(Ticket.column_name == column).order_by(Ticket.position.asc(), Ticket.id.asc())
    )
    return list(res.scalars().all())


async def positions(store: Store) -> dict[str, dict[int, int]]:
  async with store.session() as db:
    res = await db.execute(select(Ticket.id, Ticket.column_name, Ticket.position))
    out: dict[str, dict[int, int]] = {c: {} for c in COLUMNS}
    for ticket_id, column, pos in res.all():
      out[column][ticket_id] = pos
    return out


async def assert_contiguous(store: Store) -> None:
  for column, by_id in (await positions(store)).items():
    assert sorted(by_id.values()) == list(range(len(by_id))), f"{column}: {by_id}"
