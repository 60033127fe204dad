from fastapi import APIRouter
from typing import Any

from bilemo.core.config import settings

router = APIRouter()


@router.get("", response_model=dict[str, Any])
def health_check() -> Any:
    """Liveness check; also reports the build version and default API version."""
    return {
        "status": "ok",
        "version": settings.VERSION,
        "default_api_version": settings.DEFAULT_API_VERSION,
    }
