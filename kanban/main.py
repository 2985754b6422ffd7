from __future__ import annotations

import logging
from time import monotonic

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.trustedhost import TrustedHostMiddleware

from kanban.config import Settings, settings as default_settings
from kanban.errors import KanbanError
from kanban.logging import setup_logging
from kanban.metrics import RuntimeMetrics
from kanban.routers.board import router as board_router
from kanban.routers.comments import router as comments_router
from kanban.routers.system import router as system_router
from kanban.routers.tags import router as tags_router
from kanban.routers.tickets import router as tickets_router
from kanban.store import Store

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: Store | None = None) -> FastAPI:
  settings = settings or default_settings
  setup_logging(settings)

  app = FastAPI(title="Kanban API", version=settings.app_version)
  app.state.settings = settings
  app.state.store = store or Store(settings.database_url, echo=settings.database_echo)
  app.state.metrics = RuntimeMetrics()

  @app.exception_handler(KanbanError)
  async def _kanban_error_handler(_, exc: KanbanError) -> JSONResponse:
    if exc.status_code >= 500:
      logger.error("unhandled domain error: %s", exc.message)
    content: dict = {"detail": exc.message}
    if exc.details:
      content["info"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)

  app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list(),
    allow_origin_regex=settings.cors_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )
  app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_host_list())

  app.include_router(system_router)
  app.include_router(board_router)
  app.include_router(tickets_router)
  app.include_router(tags_router)
  app.include_router(comments_router)

  @app.middleware("http")
  async def _request_metrics_middleware(request, call_next):
    start = monotonic()
    response = await call_next(request)
    elapsed_ms = (monotonic() - start) * 1000.0
    app.state.metrics.observe_request(response.status_code, elapsed_ms)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    return response

  @app.on_event("startup")
  async def _startup() -> None:
    await app.state.store.create_schema()
    logger.info("kanban api %s ready (%s)", settings.app_version, app.state.store.engine.url.render_as_string())

  @app.on_event("shutdown")
  async def _shutdown() -> None:
    await app.state.store.dispose()

  return app


app = create_app()
