"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from ecosystem_book import __version__
from ecosystem_book.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="ecosystem-book", version=__version__)
    app.include_router(router)
    return app
