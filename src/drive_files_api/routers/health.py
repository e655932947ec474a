from fastapi import APIRouter, Depends

from drive_files_api.config.settings import Settings
from drive_files_api.dependencies import get_app_settings
from drive_files_api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)):
    """
    Health check endpoint for monitoring API status and provider configuration.

    Providers are reported as "ready" when their credentials are configured; no call is
    made to either provider.
    """
    health_status = {
        "status": "ok",
        "components": {
            "api": "ready",
            "drive": "ready" if settings.drive_configured else "not configured",
            "blob": "ready" if settings.blob_configured else "not configured",
        },
        "ready": False,
    }

    if not all(state == "ready" for state in health_status["components"].values()):
        health_status["status"] = "degraded"
    else:
        health_status["ready"] = True

    return health_status
