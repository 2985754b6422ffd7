from __future__ import annotations

import uvicorn

from kanban.config import settings


def main() -> None:
  uvicorn.run("kanban.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
  main()
