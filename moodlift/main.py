from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from moodlift.db import dispose_engine
from moodlift.db_init import init_db
from moodlift.routes import activities, auth_callback, catalog, progress, seo, sitemap, streak


def create_app() -> FastAPI:
    logging.basicConfig(
        level=os.getenv("BACKEND_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="MoodLift API", version="0.1.0")

    app.include_router(auth_callback.router)
    app.include_router(sitemap.router)
    app.include_router(streak.router)
    app.include_router(progress.router)
    app.include_router(activities.router)
    app.include_router(catalog.router)
    app.include_router(seo.router)

    @app.on_event("startup")
    async def _startup():
        await init_db()

    @app.on_event("shutdown")
    async def _shutdown():
        await dispose_engine()

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("moodlift").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()
