"""Liveness check used by the hosting platform."""

from __future__ import annotations

from fastapi import APIRouter, Response, status

from portfolio_cms.data.db import ping_database

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(response: Response) -> dict[str, str]:
    """Report whether the API and its database are reachable."""
    if not ping_database():
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unhealthy", "database": "unreachable"}
    return {"status": "healthy", "database": "ok"}
