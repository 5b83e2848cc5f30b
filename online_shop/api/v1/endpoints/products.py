# online_shop/api/v1/endpoints/products.py

"""
Endpoints REST para operaciones CRUD y de stock de productos.

Cada endpoint hace una única llamada al repositorio (salvo el alta, que
inserta y relee) y devuelve el sobre `{success, data|message}`. Los errores
tipados se propagan al clasificador global.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import Annotated, Optional
import logging

from online_shop.api import deps
from online_shop.api.responses import not_found_response
from online_shop.crud.product_crud import DEFAULT_LOW_STOCK_THRESHOLD, ProductRepository
from online_shop.schemas import product_schema
from online_shop.schemas.product_schema import INT32_MAX, INT32_MIN, StockCheck

logger = logging.getLogger(__name__)
router = APIRouter()

PRODUCT_NOT_FOUND = "Product not found"

# Los enteros de ruta y de consulta deben caber en las columnas INTEGER
ProductId = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]
CategoryId = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]


# ========================================
# CONSULTAS
# ========================================

@router.get("", response_model=product_schema.ProductListEnvelope)
async def read_products(
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Obtiene todos los productos con el nombre de su categoría."""
    products = await repository.list()
    logger.debug(f"📋 PRODUCTOS: Encontrados {len(products)} resultados")
    return {"success": True, "data": products}


# Las rutas estáticas se registran antes de /{product_id}
@router.get("/low-stock", response_model=product_schema.ProductListEnvelope)
async def read_low_stock_products(
    threshold: int = Query(default=DEFAULT_LOW_STOCK_THRESHOLD, ge=0, le=INT32_MAX),
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Obtiene los productos con stock por debajo del umbral."""
    products = await repository.list_low_stock(threshold)
    logger.debug(f"📉 STOCK BAJO: {len(products)} productos por debajo de {threshold}")
    return {
        "success": True,
        "data": products,
        "message": f"Products with stock below {threshold}",
    }


@router.get("/category/{category_id}", response_model=product_schema.ProductListEnvelope)
async def read_products_by_category(
    category_id: CategoryId,
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Obtiene los productos de una categoría, ordenados por nombre."""
    products = await repository.list_by_category(category_id)
    return {"success": True, "data": products}


@router.get("/{product_id}", response_model=product_schema.ProductEnvelope)
async def read_product(
    product_id: ProductId,
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Obtiene los detalles de un producto por ID."""
    logger.debug(f"🔍 PRODUCTO: Buscando producto ID {product_id}")

    product = await repository.get_by_id(product_id)
    if product is None:
        logger.warning(f"⚠️ PRODUCTO: No encontrado ID {product_id}")
        return not_found_response(PRODUCT_NOT_FOUND)

    return {"success": True, "data": product}


@router.get("/{product_id}/stock-check", response_model=product_schema.StockCheckEnvelope)
async def check_product_stock(
    product_id: ProductId,
    quantity: int = Query(..., ge=0, le=INT32_MAX),
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Comprueba si hay stock suficiente para servir `quantity` unidades."""
    result = await repository.check_stock(product_id, quantity)
    if result is StockCheck.PRODUCT_NOT_FOUND:
        return not_found_response(PRODUCT_NOT_FOUND)

    return {
        "success": True,
        "data": product_schema.StockCheckResult(
            product_id=product_id,
            required_quantity=quantity,
            result=result,
            sufficient=result is StockCheck.SUFFICIENT,
        ),
    }


# ========================================
# ESCRITURAS
# ========================================

@router.post("", response_model=product_schema.ProductEnvelope, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_in: product_schema.ProductCreate,
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Crea un nuevo producto en el catálogo."""
    logger.info(f"🆕 PRODUCTO: Creando producto '{product_in.name}'")

    product = await repository.create(product_in)

    logger.info(f"✅ PRODUCTO: Creado exitosamente ID {product.id}")
    return {"success": True, "message": "Product created successfully", "data": product}


@router.put("/{product_id}", response_model=product_schema.MessageEnvelope)
async def update_product(
    product_id: ProductId,
    product_in: Optional[product_schema.ProductUpdate] = None,
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """
    Actualiza parcialmente un producto: solo cambian los campos enviados.

    Un cuerpo sin campos no escribe nada y se responde como no encontrado.
    """
    logger.info(f"🔄 PRODUCTO: Actualizando producto ID {product_id}")

    updated = await repository.update(product_id, product_in or product_schema.ProductUpdate())
    if not updated:
        logger.warning(f"⚠️ PRODUCTO: No se pudo actualizar el producto ID {product_id}")
        return not_found_response(PRODUCT_NOT_FOUND)

    logger.info(f"✅ PRODUCTO: Actualizado exitosamente ID {product_id}")
    return {"success": True, "message": "Product updated successfully"}


@router.delete("/{product_id}", response_model=product_schema.MessageEnvelope)
async def delete_product(
    product_id: ProductId,
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Elimina un producto del catálogo."""
    logger.info(f"🗑️ PRODUCTO: Eliminando producto ID {product_id}")

    deleted = await repository.delete(product_id)
    if not deleted:
        logger.warning(f"⚠️ PRODUCTO: No encontrado para eliminar ID {product_id}")
        return not_found_response(PRODUCT_NOT_FOUND)

    return {"success": True, "message": "Product deleted successfully"}


@router.patch("/{product_id}/stock", response_model=product_schema.MessageEnvelope)
async def adjust_product_stock(
    product_id: ProductId,
    adjustment: product_schema.StockAdjustment,
    repository: ProductRepository = Depends(deps.get_product_repository),
):
    """Ajusta el stock de forma atómica (delta positivo o negativo)."""
    logger.info(f"📦 STOCK: Ajustando producto ID {product_id} en {adjustment.delta:+d}")

    adjusted = await repository.adjust_stock(product_id, adjustment.delta)
    if not adjusted:
        return not_found_response(PRODUCT_NOT_FOUND)

    return {"success": True, "message": "Stock adjusted successfully"}
