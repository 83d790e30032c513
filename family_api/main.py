"""Application factory for the two record services.

Run one variant per process, for example::

    API_VARIANT=harmony uvicorn family_api.main:app
    API_VARIANT=legacy  uvicorn family_api.main:app
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import db
from .config import VARIANT_HARMONY, VARIANT_LEGACY, get_cors_origins, get_log_level, get_variant
from .errors import install_error_handlers
from .middleware import RequestLogMiddleware
from .routes.harmony import groups, invites, media, messages, people, relationships, timeline, tributes, users
from .routes.legacy import events, families, stories, tree
from .schema import ensure_schema

log = logging.getLogger(__name__)

_TITLES = {
    VARIANT_HARMONY: "Project Harmony API",
    VARIANT_LEGACY: "Family Legacy API",
}

_ROUTERS: dict[str, tuple[APIRouter, ...]] = {
    VARIANT_HARMONY: (
        users.router,
        people.router,
        relationships.router,
        timeline.router,
        media.router,
        tributes.router,
        groups.router,
        invites.router,
        messages.router,
    ),
    VARIANT_LEGACY: (
        families.router,
        tree.router,
        stories.router,
        events.router,
    ),
}


def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _health_router(title: str) -> APIRouter:
    router = APIRouter(tags=["health"])

    @router.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "message": f"{title} is running"}

    return router


def create_app(variant: str | None = None, *, init_schema: bool = True) -> FastAPI:
    """Build the FastAPI app for one variant.

    The connection pool is opened (and the schema ensured) in the lifespan
    startup phase and drained on shutdown; building the app touches no
    database.
    """
    variant = variant or get_variant()
    if variant not in _ROUTERS:
        raise ValueError(f"unknown variant: {variant!r}")
    title = _TITLES[variant]

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        pool = db.open_pool()
        try:
            if init_schema:
                with pool.connection() as conn:
                    ensure_schema(conn, variant)
            log.info("%s started", title)
            yield
        finally:
            db.close_pool()

    app = FastAPI(title=title, version="1.0.0", lifespan=lifespan)
    app.state.variant = variant

    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    app.include_router(_health_router(title), prefix="/api")
    for router in _ROUTERS[variant]:
        app.include_router(router, prefix="/api")

    return app


configure_logging()
app = create_app()
