# online_shop/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y construye la aplicación completa mediante una
factoría (`create_app`):
- Configuración de logging a partir de Settings
- Ciclo de vida del pool de conexiones (init en el arranque, close al apagar)
- Middleware CORS
- Clasificador global de errores
- Registro de routers (API con prefijo y health checks en la raíz)
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from online_shop.api import health
from online_shop.api.error_handlers import register_exception_handlers
from online_shop.api.v1.api_router import api_router
from online_shop.core.config import Settings, settings as default_settings
from online_shop.core.exceptions import StorageError
from online_shop.core.logging_config import setup_logging
from online_shop.db.database import Database

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Construye una instancia de la aplicación.

    Cada aplicación posee su propio `Database`; no hay pool global.

    Args:
        settings: Configuración a usar. Por defecto, la cargada del entorno.
    """
    settings = settings or default_settings
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database(settings)
        app.state.database = database

        # No detener la aplicación si la base de datos aún no responde:
        # /health/db lo reportará y las peticiones fallarán con 503.
        try:
            await database.init()
            await database.health_check()
            logger.info("✅ Base de datos conectada correctamente")
        except StorageError as exc:
            logger.error(f"❌ No se pudo conectar a la base de datos: {exc.message}")

        logger.info(f"🚀 {settings.PROJECT_NAME} v{settings.PROJECT_VERSION} ({settings.APP_ENVIRONMENT})")
        try:
            yield
        finally:
            await database.close()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        version=settings.PROJECT_VERSION,
        description="API del sistema de tienda online: productos, categorías y stock",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # CORS se añade después: el último middleware añadido es el más externo
    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)
