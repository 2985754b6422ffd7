from __future__ import annotations

from fastapi import APIRouter, Depends

from kanban import tags, tickets
from kanban.deps import get_store
from kanban.routers.serializers import tag_out, ticket_out
from kanban.schemas import BoardOut
from kanban.store import Store

router = APIRouter(tags=["board"])


@router.get("/board", response_model=BoardOut)
async def get_board(store: Store = Depends(get_store)) -> BoardOut:
  board = await tickets.list_board(store)
  all_tags = await tags.list_tags(store)
  return BoardOut(
    todo=[ticket_out(t) for t in board["todo"]],
    doing=[ticket_out(t) for t in board["doing"]],
    done=[ticket_out(t) for t in board["done"]],
    tags=[tag_out(t) for t in all_tags],
    doneCount=len(board["done"]),
  )
