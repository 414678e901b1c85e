"""FastAPI application entry point for the Portfolio CMS API."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_cms.api.routes import (
    about,
    audit,
    auth,
    certificate_details,
    configuration,
    content,
    files,
    health,
    reports,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator


DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)


def get_cors_origins() -> list[str]:
    """Return allowed browser origins, honoring ``PORTFOLIO_CORS_ORIGINS`` (comma-separated)."""
    env_value = os.getenv("PORTFOLIO_CORS_ORIGINS")
    if env_value:
        return [origin.strip() for origin in env_value.split(",") if origin.strip()]
    return list(DEFAULT_CORS_ORIGINS)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup and clean up on shutdown."""
    from portfolio_cms.data.db import init_db

    init_db()
    yield


app = FastAPI(
    title="Portfolio CMS API",
    description="API for the portfolio site content, reports and media files",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth.router, prefix="/api")
app.include_router(about.router, prefix="/api")
app.include_router(configuration.router, prefix="/api")
app.include_router(certificate_details.router, prefix="/api")
app.include_router(content.projects_router, prefix="/api")
app.include_router(content.certificates_router, prefix="/api")
app.include_router(content.skills_router, prefix="/api")
app.include_router(reports.router, prefix="/api")
app.include_router(files.router, prefix="/api")
app.include_router(audit.router, prefix="/api")


def main(host: str = "0.0.0.0", port: int = 8000, reload: bool = True) -> None:
    """Start the development server."""
    import uvicorn

    uvicorn.run(
        "portfolio_cms.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
