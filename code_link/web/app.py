"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from code_link import __version__
from code_link.web.api import router


def create_app() -> FastAPI:
    app = FastAPI(title="code-link", version=__version__)
    app.include_router(router)
    return app
