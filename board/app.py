"""
FastAPI application entry point for the message board backend.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from board.config import get_settings
from board.db import DatastoreError
from board.routes import public_router, router

logger = logging.getLogger(__name__)


async def _datastore_error_handler(request: Request, exc: DatastoreError):
    logger.exception(
        "Datastore failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(status_code=500, content={"detail": "Datastore failure"})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="NXT Message Board", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DatastoreError, _datastore_error_handler)
    app.include_router(public_router, prefix=settings.api_prefix)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
