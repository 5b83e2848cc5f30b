# online_shop/core/exceptions.py
"""
Jerarquía de excepciones de la aplicación.

Las capas inferiores (repositorios, adaptador de base de datos) lanzan estas
excepciones tipadas; el clasificador global de errores (api/error_handlers.py)
las convierte en respuestas JSON con el código HTTP adecuado. Ninguna
excepción cruda de SQLAlchemy o del driver debe llegar a los endpoints.

Jerarquía:

    AppError
    ├── ValidationError
    ├── AuthenticationError
    ├── NotFoundError
    ├── ConflictError
    │   └── CategoryInUseError
    └── StorageError
        ├── DuplicateKeyError
        ├── ReferentialIntegrityError
        └── StorageUnavailableError
"""

from typing import Any, Dict, Iterable, List, Optional


class AppError(Exception):
    """Error base de la aplicación. Lleva asociado un código HTTP."""

    status_code: int = 500

    def __init__(self, message: str = "Internal server error", status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# ========================================
# ERRORES DE ENTRADA Y AUTENTICACIÓN
# ========================================

class ValidationError(AppError):
    """La entrada del cliente no cumple una regla de negocio."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.details = details or []

    @classmethod
    def from_errors(cls, errors: Iterable[Dict[str, Any]]) -> "ValidationError":
        """Construye el error a partir de la lista `errors()` de Pydantic/FastAPI."""
        return cls(details=format_validation_details(errors))


def format_validation_details(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Normaliza los errores de Pydantic a `[{field, message, type}]`.

    Los prefijos de ubicación de FastAPI ("body", "query", "path") se omiten
    del nombre del campo.
    """
    details = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append({
            "field": ".".join(loc) or None,
            "message": error.get("msg", ""),
            "type": error.get("type", "value_error"),
        })
    return details


class AuthenticationError(AppError):
    """Token de autenticación inválido o ausente."""

    status_code = 401

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409


class CategoryInUseError(ConflictError):
    """Se intentó eliminar una categoría que aún tiene productos asociados."""

    def __init__(self, category_id: int, product_count: int):
        super().__init__(
            f"Category {category_id} is referenced by {product_count} product(s). Reassign products first."
        )
        self.category_id = category_id
        self.product_count = product_count


# ========================================
# ERRORES DE ALMACENAMIENTO
# ========================================

class StorageError(AppError):
    """
    Fallo del motor de base de datos.

    `code` conserva el código del motor (SQLSTATE, errno, nombre de error de
    SQLite) solo con fines de diagnóstico; la clasificación se hace por tipo.
    """

    status_code = 400

    def __init__(self, message: str = "Database operation failed", code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class DuplicateKeyError(StorageError):
    status_code = 409


class ReferentialIntegrityError(StorageError):
    status_code = 400


class StorageUnavailableError(StorageError):
    """
    Pool agotado o conexión caída. Es transitorio: el cliente puede
    reintentar con backoff.
    """

    status_code = 503
    retryable = True
