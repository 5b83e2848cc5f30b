# online_shop/api/health.py
"""
Endpoints de verificación de estado.

- /health: liveness, no toca la base de datos
- /health/db: alcanzabilidad de la base de datos y estado del pool
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from online_shop.api import deps
from online_shop.api.responses import utc_timestamp
from online_shop.core.config import Settings
from online_shop.core.exceptions import StorageError
from online_shop.db.database import Database

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(settings: Settings = Depends(deps.get_settings)):
    """
    Health check básico para monitoreo y verificación de despliegue.
    """
    return {
        "status": "OK",
        "message": f"{settings.PROJECT_NAME} is running",
        "timestamp": utc_timestamp(),
        "version": settings.PROJECT_VERSION,
    }


@router.get("/health/db")
async def database_health(
    database: Database = Depends(deps.get_database),
    settings: Settings = Depends(deps.get_settings),
):
    """Ejecuta `SELECT 1` y devuelve el estado del pool de conexiones."""
    try:
        report = await database.health_check()
    except StorageError as exc:
        logger.error(f"❌ Health check de base de datos fallido: {exc.message}")
        return JSONResponse(
            status_code=500,
            content={
                "status": "ERROR",
                "message": "Database connection failed",
                "timestamp": utc_timestamp(),
                "error": exc.message if settings.is_development else "Internal server error",
            },
        )

    return {
        "status": "OK",
        "message": "Database connection is healthy",
        "timestamp": utc_timestamp(),
        "database": report,
    }
