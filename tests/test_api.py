from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio


async def _ticket(client: AsyncClient, title: str, column: str | None = None) -> dict:
  payload: dict = {"title": title}
  if column:
    payload["column"] = column
  res = await client.post("/tickets", json=payload)
  assert res.status_code == 200, res.text
  return res.json()


async def _board(client: AsyncClient) -> dict:
  res = await client.get("/board")
  assert res.status_code == 200, res.text
  return res.json()


async def test_health_and_version(client: AsyncClient) -> None:
  assert (await client.get("/health")).json() == {"ok": True}
  res = await client.get("/version")
  assert res.status_code == 200
  assert res.json()["version"]


async def test_create_ticket_defaults_and_errors(client: AsyncClient) -> None:
  t = await _ticket(client, "First")
  assert t["column"] == "todo"
  assert t["position"] == 0
  assert t["tags"] == []

  legacy = await client.post("/tickets", json={"title": "Legacy field", "column_name": "doing"})
  assert legacy.status_code == 200, legacy.text
  assert legacy.json()["column"] == "doing"

  blank = await client.post("/tickets", json={"title": "   "})
  assert blank.status_code == 400
  assert blank.json()["detail"] == "Title is required"

  bad_col = await client.post("/tickets", json={"title": "x", "column": "someday"})
  assert bad_col.status_code == 422


async def test_update_ticket(client: AsyncClient) -> None:
  t = await _ticket(client, "Draft")

  res = await client.patch(f"/tickets/{t['id']}", json={"description": "more words"})
  assert res.status_code == 200, res.text
  assert res.json()["description"] == "more words"
  assert res.json()["title"] == "Draft"

  res = await client.put(f"/tickets/{t['id']}", json={"title": "Final"})
  assert res.status_code == 200, res.text
  assert res.json()["title"] == "Final"

  assert (await client.patch(f"/tickets/{t['id']}", json={})).status_code == 400
  assert (await client.patch("/tickets/9999", json={"title": "nope"})).status_code == 404


async def test_move_ticket_endpoint(client: AsyncClient) -> None:
  todo = [await _ticket(client, f"T{i}") for i in range(4)]
  doing = [await _ticket(client, f"D{i}", "doing") for i in range(2)]

  res = await client.post(
    "/tickets/move",
    json={"ticketId": todo[2]["id"], "targetColumn": "doing", "newPosition": 0},
  )
  assert res.status_code == 200, res.text
  assert res.json() == {"ok": True}

  board = await _board(client)
  assert [(t["id"], t["position"]) for t in board["todo"]] == [
    (todo[0]["id"], 0),
    (todo[1]["id"], 1),
    (todo[3]["id"], 2),
  ]
  assert [t["id"] for t in board["doing"]] == [todo[2]["id"], doing[0]["id"], doing[1]["id"]]
  assert [t["position"] for t in board["doing"]] == [0, 1, 2]


async def test_move_ticket_errors(client: AsyncClient) -> None:
  t = await _ticket(client, "Lonely")

  missing = await client.post("/tickets/move", json={"ticketId": 4242, "targetColumn": "done", "newPosition": 0})
  assert missing.status_code == 404
  assert missing.json()["detail"] == "Ticket not found"

  negative = await client.post("/tickets/move", json={"ticketId": t["id"], "targetColumn": "done", "newPosition": -1})
  assert negative.status_code == 422

  bad_col = await client.post("/tickets/move", json={"ticketId": t["id"], "targetColumn": "void", "newPosition": 0})
  assert bad_col.status_code == 422


async def test_reorder_endpoint(client: AsyncClient) -> None:
  t1, t2, t3 = [await _ticket(client, f"R{i}") for i in range(3)]

  res = await client.post("/tickets/reorder", json={"column": "todo", "ticketIds": [t3["id"], t1["id"], t2["id"]]})
  assert res.status_code == 200, res.text

  board = await _board(client)
  assert [(t["id"], t["position"]) for t in board["todo"]] == [(t3["id"], 0), (t1["id"], 1), (t2["id"], 2)]

  dup = await client.post("/tickets/reorder", json={"column": "todo", "ticketIds": [t1["id"], t1["id"]]})
  assert dup.status_code == 400
  missing = await client.post("/tickets/reorder", json={"column": "todo", "ticketIds": [t1["id"], 555]})
  assert missing.status_code == 404
  assert missing.json()["info"] == {"ticketIds": [555]}


async def test_delete_and_clear_done(client: AsyncClient) -> None:
  a, b, c = [await _ticket(client, f"X{i}", "done") for i in range(3)]
  keep = await _ticket(client, "stay")

  res = await client.delete(f"/tickets/{b['id']}")
  assert res.status_code == 200
  assert res.json() == {"ok": True}
  board = await _board(client)
  assert [(t["id"], t["position"]) for t in board["done"]] == [(a["id"], 0), (c["id"], 1)]
  assert board["doneCount"] == 2

  assert (await client.delete(f"/tickets/{b['id']}")).status_code == 404

  cleared = await client.delete("/tickets/done/clear")
  assert cleared.status_code == 200, cleared.text
  assert cleared.json() == {"ok": True, "deleted": 2}
  board = await _board(client)
  assert board["done"] == []
  assert [t["id"] for t in board["todo"]] == [keep["id"]]


async def test_tags_endpoints(client: AsyncClient) -> None:
  t = await _ticket(client, "Tagged")

  created = await client.post("/tags", json={"name": "bug"})
  assert created.status_code == 200, created.text
  tag = created.json()
  assert tag["color"] == "#f179af"

  dup = await client.post("/tags", json={"name": "bug"})
  assert dup.status_code == 409
  assert (await client.post("/tags", json={"name": ""})).status_code == 400

  for _ in range(2):
    res = await client.post(f"/tickets/{t['id']}/tags", json={"tagId": tag["id"]})
    assert res.status_code == 200, res.text
    assert res.json() == {"ok": True}

  detail = (await client.get(f"/tickets/{t['id']}")).json()
  assert [x["name"] for x in detail["tags"]] == ["bug"]
  board = await _board(client)
  assert [x["name"] for x in board["tags"]] == ["bug"]
  assert [x["id"] for x in board["todo"][0]["tags"]] == [tag["id"]]

  res = await client.delete(f"/tickets/{t['id']}/tags/{tag['id']}")
  assert res.status_code == 200
  res = await client.delete(f"/tickets/{t['id']}/tags/{tag['id']}")
  assert res.status_code == 200

  assert (await client.delete(f"/tags/{tag['id']}")).status_code == 200
  assert (await client.get("/tags")).json() == []
  assert (await client.delete(f"/tags/{tag['id']}")).status_code == 404


async def test_comments_endpoints(client: AsyncClient) -> None:
  t = await _ticket(client, "Discussed")

  first = await client.post(f"/tickets/{t['id']}/comments", json={"body": "first"})
  assert first.status_code == 200, first.text
  second = await client.post(f"/tickets/{t['id']}/comments", json={"body": "second"})
  assert second.status_code == 200, second.text
  assert second.json()["ticketId"] == t["id"]

  assert (await client.post(f"/tickets/{t['id']}/comments", json={"body": " "})).status_code == 400
  assert (await client.post("/tickets/31337/comments", json={"body": "hi"})).status_code == 404

  listed = (await client.get(f"/tickets/{t['id']}/comments")).json()
  assert [c["body"] for c in listed] == ["second", "first"]

  detail = (await client.get(f"/tickets/{t['id']}")).json()
  assert [c["body"] for c in detail["comments"]] == ["second", "first"]

  res = await client.delete(f"/comments/{first.json()['id']}")
  assert res.json() == {"ok": True}
  assert (await client.delete(f"/comments/{first.json()['id']}")).status_code == 404


async def test_get_unknown_ticket_is_404(client: AsyncClient) -> None:
  res = await client.get("/tickets/808")
  assert res.status_code == 404


async def test_system_status_reports_columns_and_mutations(client: AsyncClient) -> None:
  t = await _ticket(client, "Counted")
  await client.post("/tickets/move", json={"ticketId": t["id"], "targetColumn": "doing", "newPosition": 0})

  res = await client.get("/system/status")
  assert res.status_code == 200, res.text
  body = res.json()
  assert body["columns"] == {"todo": 0, "doing": 1, "done": 0}
  assert body["metrics"]["mutations"]["ticket.moved"] == 1
  assert body["metrics"]["requestCount24h"] >= 2
  assert res.headers["x-content-type-options"] == "nosniff"


async def test_created_at_is_stable_between_create_and_reads(client: AsyncClient) -> None:
  t = await _ticket(client, "Stamped")
  assert t["createdAt"].endswith("Z")

  board = await _board(client)
  assert board["todo"][0]["createdAt"] == t["createdAt"]
  assert (await client.get(f"/tickets/{t['id']}")).json()["createdAt"] == t["createdAt"]

  c = (await client.post(f"/tickets/{t['id']}/comments", json={"body": "noted"})).json()
  listed = (await client.get(f"/tickets/{t['id']}/comments")).json()
  assert listed[0]["createdAt"] == c["createdAt"]


async def test_null_or_missing_required_text_is_400(client: AsyncClient) -> None:
  t = await _ticket(client, "Parent")

  for payload in ({"title": None}, {}):
    res = await client.post("/tickets", json=payload)
    assert res.status_code == 400, res.text
    assert res.json()["detail"] == "Title is required"

  assert (await client.post("/tags", json={"name": None})).status_code == 400
  assert (await client.post(f"/tickets/{t['id']}/comments", json={"body": None})).status_code == 400

  ok = await client.post("/tickets", json={"title": "No description", "description": None})
  assert ok.status_code == 200, ok.text
  assert ok.json()["description"] == ""
