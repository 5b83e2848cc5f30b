# online_shop/db/errors.py
"""
Traducción de errores del motor de base de datos a la jerarquía de la app.

Este es el único módulo que inspecciona códigos específicos de cada motor
(SQLSTATE de PostgreSQL, nombres de error de SQLite, errno de MySQL). El
resto de la aplicación trabaja exclusivamente con las clases de
`online_shop.core.exceptions`.
"""

from typing import Optional

from sqlalchemy import exc as sa_exc

from online_shop.core.exceptions import (
    DuplicateKeyError,
    ReferentialIntegrityError,
    StorageError,
    StorageUnavailableError,
)

# ========================================
# CÓDIGOS CONOCIDOS POR MOTOR
# ========================================

_DUPLICATE_KEY_CODES = {
    "23505",                         # PostgreSQL unique_violation
    "SQLITE_CONSTRAINT_UNIQUE",
    "SQLITE_CONSTRAINT_PRIMARYKEY",
    "1062",                          # MySQL ER_DUP_ENTRY
}

_FOREIGN_KEY_CODES = {
    "23503",                         # PostgreSQL foreign_key_violation
    "SQLITE_CONSTRAINT_FOREIGNKEY",
    "1451",                          # MySQL ER_ROW_IS_REFERENCED_2
    "1452",                          # MySQL ER_NO_REFERENCED_ROW_2
}

# Clases SQLSTATE de PostgreSQL que indican problemas de conexión o del servidor
_UNAVAILABLE_SQLSTATE_PREFIXES = ("08", "53", "57P")

_UNAVAILABLE_CODES = {
    "SQLITE_BUSY",
    "SQLITE_LOCKED",
    "SQLITE_CANTOPEN",
    "2002",                          # MySQL CR_CONNECTION_ERROR
    "2003",                          # MySQL CR_CONN_HOST_ERROR
    "2006",                          # MySQL CR_SERVER_GONE_ERROR
    "2013",                          # MySQL CR_SERVER_LOST
}


def _engine_code(orig: Optional[BaseException]) -> Optional[str]:
    """Extrae el código de error nativo del driver, si lo hay."""
    if orig is None:
        return None
    for attr in ("sqlstate", "pgcode"):
        value = getattr(orig, attr, None)
        if value:
            return str(value)
    sqlite_name = getattr(orig, "sqlite_errorname", None)
    if sqlite_name:
        return sqlite_name
    args = getattr(orig, "args", ())
    if args and isinstance(args[0], int):
        return str(args[0])
    return None


def translate_storage_error(error: BaseException) -> StorageError:
    """
    Convierte una excepción de SQLAlchemy/driver en un StorageError tipado.

    Args:
        error: Excepción capturada al ejecutar una operación de base de datos

    Returns:
        Instancia de StorageError (o subclase) lista para ser lanzada con
        `raise ... from error`
    """
    if isinstance(error, StorageError):
        return error

    # Pool agotado: no se obtuvo conexión dentro de pool_timeout
    if isinstance(error, sa_exc.TimeoutError):
        return StorageUnavailableError("Connection pool exhausted", code="pool_timeout")

    # Entero fuera del rango que el driver puede enlazar
    if isinstance(error, OverflowError):
        return StorageError(str(error), code="numeric_overflow")

    if isinstance(error, (sa_exc.DisconnectionError, OSError)):
        return StorageUnavailableError(str(error), code="connection_error")

    orig = getattr(error, "orig", None)
    code = _engine_code(orig)
    message = str(orig) if orig is not None else str(error)
    lowered = message.lower()

    if isinstance(error, sa_exc.IntegrityError):
        if code in _DUPLICATE_KEY_CODES or "unique constraint" in lowered or "duplicate" in lowered:
            return DuplicateKeyError(message, code=code)
        if code in _FOREIGN_KEY_CODES or "foreign key constraint" in lowered:
            return ReferentialIntegrityError(message, code=code)
        return StorageError(message, code=code)

    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return StorageUnavailableError(message, code=code)

    if isinstance(error, (sa_exc.OperationalError, sa_exc.InterfaceError)):
        if (
            code is None
            or code in _UNAVAILABLE_CODES
            or code.startswith(_UNAVAILABLE_SQLSTATE_PREFIXES)
            or "database is locked" in lowered
            or "unable to open database" in lowered
        ):
            return StorageUnavailableError(message, code=code)

    return StorageError(message, code=code)
