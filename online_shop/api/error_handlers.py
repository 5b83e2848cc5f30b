# online_shop/api/error_handlers.py
"""
Clasificador global de errores.

Convierte cualquier excepción que escape de un endpoint en un sobre JSON con
el código HTTP adecuado. Starlette resuelve el handler recorriendo el MRO de
la excepción, así que una subclase (DuplicateKeyError) siempre se atiende
antes que su base (StorageError). Orden efectivo de las reglas:

1. DuplicateKeyError          -> 409 "Duplicate entry found"
2. ReferentialIntegrityError  -> 400 "Referenced record not found"
3. StorageUnavailableError    -> 503 (transitorio, con Retry-After)
4. StorageError               -> 400 "Database operation failed"
5. ValidationError / RequestValidationError -> 400 con `details`
6. AuthenticationError        -> 401 "Invalid token"
7. AppError / HTTPException   -> su status; cualquier otra -> 500

En modo no-desarrollo nunca se devuelven trazas ni textos crudos del motor.
"""

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from online_shop.api.responses import error_response
from online_shop.core.exceptions import (
    AppError,
    AuthenticationError,
    DuplicateKeyError,
    ReferentialIntegrityError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
    format_validation_details,
)

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = "5"


def _is_development(request: Request) -> bool:
    return request.app.state.settings.is_development


# ========================================
# ERRORES DE ALMACENAMIENTO
# ========================================

async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    logger.warning(f"⚠️ Clave duplicada en {request.method} {request.url.path}: {exc.message}")
    return error_response(409, "Duplicate entry found")


async def referential_integrity_handler(request: Request, exc: ReferentialIntegrityError):
    logger.warning(f"⚠️ Referencia inexistente en {request.method} {request.url.path}: {exc.message}")
    return error_response(400, "Referenced record not found")


async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    logger.error(f"❌ Base de datos no disponible ({exc.code}): {exc.message}")
    extra = {"retryable": True}
    if _is_development(request):
        extra["error"] = exc.message
    return error_response(
        503,
        "Database temporarily unavailable",
        headers={"Retry-After": RETRY_AFTER_SECONDS},
        **extra,
    )


async def storage_error_handler(request: Request, exc: StorageError):
    logger.warning(f"⚠️ Error de base de datos ({exc.code}): {exc.message}")
    return error_response(
        400,
        "Database operation failed",
        error=exc.message if _is_development(request) else "Bad request",
    )


# ========================================
# ERRORES DE ENTRADA Y AUTENTICACIÓN
# ========================================

async def validation_error_handler(request: Request, exc: ValidationError):
    return error_response(400, exc.message, details=exc.details)


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Petición inválida en {request.method} {request.url.path}: {exc.errors()}")
    return error_response(400, "Validation failed", details=format_validation_details(exc.errors()))


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return error_response(401, "Invalid token")


# ========================================
# RESPALDO
# ========================================

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Ruta o método sin registrar: respuesta terminal de endpoint inexistente
    if exc.status_code in (404, 405):
        return error_response(
            404,
            "Endpoint not found",
            path=request.url.path,
            method=request.method,
        )
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"❌ {type(exc).__name__}: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
    if not _is_development(request):
        return error_response(500, "Internal server error")
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return error_response(500, str(exc) or "Internal server error", stack=stack)


async def catch_unhandled_exceptions(request: Request, call_next):
    """
    Middleware de último recurso.

    El handler de `Exception` que registra Starlette corre en
    ServerErrorMiddleware, por fuera de CORS; atender aquí el error mantiene
    las cabeceras CORS en las respuestas 500.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Registra el clasificador de errores en la aplicación.

    Debe llamarse antes de añadir CORSMiddleware para que este quede por
    fuera del middleware de último recurso.
    """
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(ReferentialIntegrityError, referential_integrity_handler)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.middleware("http")(catch_unhandled_exceptions)
