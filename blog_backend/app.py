"""
FastAPI application entry point for the blog backend.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from blog_backend.config import Settings, get_settings
from blog_backend.errors import BlogBackendError
from blog_backend.routes import router
from blog_backend.store import DocumentStore, connect

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if app.state.store is None:
        try:
            app.state.store = connect(app.state.settings)
        except ConnectionError:
            logger.exception("Error occurred while connecting to the database")
            raise
    try:
        yield
    finally:
        store, app.state.store = app.state.store, None
        if store is not None:
            store.close()


async def handle_backend_error(request: Request, exc: BlogBackendError):
    return JSONResponse(exc.as_body(), status_code=exc.status_code)


async def handle_validation_error(request: Request, exc: RequestValidationError):
    fields = sorted(
        {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
    )
    message = "Missing or invalid fields"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return JSONResponse({"message": message}, status_code=400)


def create_app(
    settings: Optional[Settings] = None, store: Optional[DocumentStore] = None
) -> FastAPI:
    """
    Build the app. Passing ``store`` skips the connect step in the lifespan.
    """
    settings = settings or get_settings()
    app = FastAPI(title="Blog Backend (FastAPI)", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BlogBackendError, handle_backend_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.include_router(router, prefix=settings.api_prefix)

    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir), name="static")
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = app.state.settings
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("App listening on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
