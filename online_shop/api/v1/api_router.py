# online_shop/api/v1/api_router.py
"""
Este archivo contiene el router principal de la API.

Se encarga de registrar y configurar todos los routers por dominio.
"""

from fastapi import APIRouter, Request

# Importación de routers especializados por dominio de negocio
from online_shop.api.v1.endpoints import (
    products,
    categories,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL
# ========================================

api_router = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# ROUTER DE PRODUCTOS
# Operaciones CRUD, stock bajo y ajustes de stock
api_router.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

# ROUTER DE CATEGORÍAS
# Catálogo de categorías referenciadas por los productos
api_router.include_router(
    categories.router,
    prefix="/categories",
    tags=["Categories"]
)


@api_router.get("", tags=["Root"])
async def api_index(request: Request):
    """
    Índice de la API: nombre, versión y endpoints disponibles.
    """
    settings = request.app.state.settings
    prefix = settings.API_PREFIX
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.PROJECT_VERSION,
        "endpoints": {
            "products": f"{prefix}/products",
            "categories": f"{prefix}/categories",
            "health": "/health",
        },
    }
