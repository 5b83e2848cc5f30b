# online_shop/api/responses.py
"""
Helpers para construir los sobres (envelopes) JSON de la API.

Éxito:  {"success": true, "data": ..., "message"?: ...}
Error:  {"success": false, "status": "ERROR", "message": ..., "timestamp": ...}
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def utc_timestamp() -> str:
    """Marca de tiempo ISO-8601 en UTC, con sufijo Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_response(
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any,
) -> JSONResponse:
    body = {
        "success": False,
        "status": "ERROR",
        "message": message,
        "timestamp": utc_timestamp(),
    }
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def not_found_response(message: str) -> JSONResponse:
    """Respuesta 404 de los endpoints cuando el repositorio no encuentra la fila."""
    return JSONResponse(status_code=404, content={"success": False, "message": message})
