"""
Endpoints REST para operaciones CRUD de categorías.
"""

from fastapi import APIRouter, Depends, Path, status
import logging
from typing import Annotated

from online_shop.api import deps
from online_shop.api.responses import not_found_response
from online_shop.crud.category_crud import CategoryRepository
from online_shop.schemas import category_schema
from online_shop.schemas.product_schema import INT32_MAX, INT32_MIN, MessageEnvelope

logger = logging.getLogger(__name__)
router = APIRouter()

CATEGORY_NOT_FOUND = "Category not found"

CategoryId = Annotated[int, Path(ge=INT32_MIN, le=INT32_MAX)]


@router.get("", response_model=category_schema.CategoryListEnvelope)
async def read_categories(
    repository: CategoryRepository = Depends(deps.get_category_repository),
):
    """Obtiene todas las categorías ordenadas por nombre."""
    categories = await repository.list()
    return {"success": True, "data": categories}


@router.get("/{category_id}", response_model=category_schema.CategoryEnvelope)
async def read_category(
    category_id: CategoryId,
    repository: CategoryRepository = Depends(deps.get_category_repository),
):
    """Obtiene los detalles de una categoría específica por su ID."""
    category = await repository.get_by_id(category_id)
    if category is None:
        return not_found_response(CATEGORY_NOT_FOUND)
    return {"success": True, "data": category}


@router.post("", response_model=category_schema.CategoryEnvelope, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_in: category_schema.CategoryCreate,
    repository: CategoryRepository = Depends(deps.get_category_repository),
):
    """Crea una nueva categoría. Un nombre repetido responde 409."""
    category = await repository.create(category_in)
    logger.info(f"✅ CATEGORÍA: Creada '{category.name}' con ID {category.id}")
    return {"success": True, "message": "Category created successfully", "data": category}


@router.delete("/{category_id}", response_model=MessageEnvelope)
async def delete_category(
    category_id: CategoryId,
    repository: CategoryRepository = Depends(deps.get_category_repository),
):
    """Elimina una categoría sin productos asociados."""
    deleted = await repository.delete(category_id)
    if not deleted:
        return not_found_response(CATEGORY_NOT_FOUND)
    return {"success": True, "message": "Category deleted successfully"}
