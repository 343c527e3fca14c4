from __future__ import annotations

from fastapi import APIRouter

from ..schemas import HealthResponse

router = APIRouter(
    prefix="/api/health",
    tags=["health"],
)


# PUBLIC_INTERFACE
@router.get("", response_model=HealthResponse, summary="Health Check")
def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        {"status": "ok", "timestampUtc": <current UTC time>}
    """
    return HealthResponse()
