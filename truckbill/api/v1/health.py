"""Health check endpoints."""

from fastapi import APIRouter

from truckbill.config import settings

router = APIRouter()


@router.get("/health", operation_id="healthCheck")
async def health_check() -> dict[str, str]:
    """Report liveness and the configured row store backend."""
    return {"status": "healthy", "backend": settings.row_store_backend}
