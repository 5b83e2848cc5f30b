# online_shop/crud/category_crud.py

"""
Repositorio de categorías.

Las categorías solo se referencian desde los productos (category_id); nunca
se eliminan en cascada. Borrar una categoría en uso es un conflicto.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy import delete, func, select

from online_shop.core.exceptions import CategoryInUseError
from online_shop.crud.product_crud import validate_schema
from online_shop.db.database import Database
from online_shop.db.models import Category, Product
from online_shop.schemas.category_schema import CategoryCreate, CategoryRead

logger = logging.getLogger(__name__)


class CategoryRepository:

    def __init__(self, database: Database):
        self.database = database

    async def list(self) -> List[CategoryRead]:
        """Obtiene todas las categorías ordenadas por nombre."""
        async with self.database.session() as session:
            result = await session.execute(select(Category).order_by(Category.name.asc()))
            return [CategoryRead.model_validate(category) for category in result.scalars().all()]

    async def get_by_id(self, category_id: int) -> Optional[CategoryRead]:
        async with self.database.session() as session:
            category = await session.get(Category, category_id)
            return CategoryRead.model_validate(category) if category is not None else None

    async def create(self, category_in: Union[CategoryCreate, Mapping[str, Any]]) -> CategoryRead:
        """
        Crea una categoría.

        Raises:
            DuplicateKeyError: ya existe una categoría con ese nombre
        """
        category_in = validate_schema(CategoryCreate, category_in)
        async with self.database.transaction() as session:
            db_category = Category(name=category_in.name)
            session.add(db_category)
            await session.flush()
            created = CategoryRead.model_validate(db_category)

        logger.info(f"Categoría '{created.name}' creada con ID {created.id}")
        return created

    async def delete(self, category_id: int) -> bool:
        """
        Elimina una categoría sin productos asociados.

        La comprobación de uso y el borrado se hacen en la misma transacción.

        Raises:
            CategoryInUseError: hay productos que referencian la categoría
        """
        async with self.database.transaction() as session:
            product_count = (
                await session.execute(
                    select(func.count(Product.id)).where(Product.category_id == category_id)
                )
            ).scalar_one()
            if product_count:
                raise CategoryInUseError(category_id, product_count)

            result = await session.execute(
                delete(Category).where(Category.id == category_id).execution_options(synchronize_session=False)
            )

        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Categoría {category_id} eliminada")
        return deleted
