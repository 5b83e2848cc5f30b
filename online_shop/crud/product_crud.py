# online_shop/crud/product_crud.py

"""
Repositorio de productos.

Este módulo es el único que traduce entre las filas de la tabla `products`
(con su LEFT JOIN a `categories`) y los esquemas Pydantic que usa la API.
Cada operación es una única sentencia SQL parametrizada; las escrituras se
ejecutan dentro de `Database.transaction()`.

Funcionalidades principales:
- Listados con el nombre de la categoría resuelto por JOIN
- Alta con relectura del producto creado
- Actualización parcial dinámica restringida a una lista blanca de columnas
- Ajuste atómico de stock (`stock = stock + delta`) sin leer-modificar-escribir
- Consultas de stock bajo y comprobación de disponibilidad

Ninguna excepción de SQLAlchemy sale de este módulo: `Database` las traduce a
la jerarquía `StorageError`.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError
from sqlalchemy import delete, select, update
from sqlalchemy.sql import Select

from online_shop.core.exceptions import ValidationError
from online_shop.db.database import Database
from online_shop.db.models import Category, Product
from online_shop.schemas.product_schema import ProductCreate, ProductRead, ProductUpdate, StockCheck

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEFAULT_LOW_STOCK_THRESHOLD = 5

# Lista blanca: nombre de campo de la API -> columna ORM.
# Las claves que envía el cliente nunca se interpolan en el SQL; solo se
# aceptan las que aparecen aquí.
WRITABLE_COLUMNS = {
    "name": Product.name,
    "description": Product.description,
    "price": Product.price,
    "stock_quantity": Product.stock_quantity,
    "category_id": Product.category_id,
}


def validate_schema(schema: Type[SchemaT], data: Union[SchemaT, Mapping[str, Any]]) -> SchemaT:
    """Valida un mapping contra un esquema, traduciendo el error de Pydantic."""
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError.from_errors(exc.errors()) from exc


def _column_value(field: str, value: Any) -> Any:
    # NUMERIC se enlaza como Decimal para no arrastrar errores de coma flotante
    if field == "price" and value is not None:
        return Decimal(str(value))
    return value


def build_set_clause(fields: Mapping[str, Any]) -> Dict[Any, Any]:
    """
    Construye el SET de un UPDATE parcial a partir de los campos presentes.

    Un valor `None` presente se conserva (se escribe NULL); solo las claves
    ausentes quedan fuera. Una clave fuera de la lista blanca es un error de
    validación.
    """
    unknown = sorted(key for key in fields if key not in WRITABLE_COLUMNS)
    if unknown:
        raise ValidationError(details=[
            {"field": key, "message": "Field is not writable", "type": "extra_forbidden"}
            for key in unknown
        ])
    return {WRITABLE_COLUMNS[key]: _column_value(key, value) for key, value in fields.items()}


class ProductRepository:
    """
    Acceso a datos de productos sobre el pool de `Database`.

    Las operaciones de lectura devuelven `ProductRead` (o `None` cuando no hay
    fila); las de escritura devuelven si alguna fila se vio afectada.
    """

    def __init__(self, database: Database):
        self.database = database

    # ========================================
    # OPERACIONES DE LECTURA (READ)
    # ========================================

    @staticmethod
    def _select_with_category() -> Select:
        return (
            select(
                Product.id.label("id"),
                Product.name.label("name"),
                Product.description.label("description"),
                Product.price.label("price"),
                Product.stock_quantity.label("stock_quantity"),
                Product.category_id.label("category_id"),
                Category.name.label("category_name"),
            )
            .outerjoin(Category, Product.category_id == Category.id)
        )

    @staticmethod
    def _to_read(row) -> ProductRead:
        data = dict(row._mapping)
        data["price"] = float(data["price"])
        return ProductRead.model_validate(data)

    async def _fetch_all(self, query: Select) -> List[ProductRead]:
        async with self.database.session() as session:
            result = await session.execute(query)
            return [self._to_read(row) for row in result.all()]

    async def list(self) -> List[ProductRead]:
        """
        Obtiene todos los productos ordenados por ID.

        No hay paginación: con catálogos grandes este listado debe paginarse.
        """
        return await self._fetch_all(self._select_with_category().order_by(Product.id.asc()))

    async def get_by_id(self, product_id: int) -> Optional[ProductRead]:
        """Obtiene un producto por su ID. Devuelve None si no existe."""
        query = self._select_with_category().where(Product.id == product_id)
        async with self.database.session() as session:
            row = (await session.execute(query)).first()
        return self._to_read(row) if row is not None else None

    async def list_by_category(self, category_id: int) -> List[ProductRead]:
        """Productos de una categoría, ordenados por nombre."""
        query = (
            self._select_with_category()
            .where(Product.category_id == category_id)
            .order_by(Product.name.asc(), Product.id.asc())
        )
        return await self._fetch_all(query)

    async def list_low_stock(self, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> List[ProductRead]:
        """Productos con stock por debajo del umbral, los más agotados primero."""
        query = (
            self._select_with_category()
            .where(Product.stock_quantity < threshold)
            .order_by(Product.stock_quantity.asc(), Product.id.asc())
        )
        return await self._fetch_all(query)

    async def check_stock(self, product_id: int, required_quantity: int) -> StockCheck:
        """
        Comprueba si hay stock suficiente para un producto.

        Distingue entre producto inexistente y stock insuficiente.
        """
        async with self.database.session() as session:
            stock = (
                await session.execute(select(Product.stock_quantity).where(Product.id == product_id))
            ).scalar_one_or_none()

        if stock is None:
            return StockCheck.PRODUCT_NOT_FOUND
        return StockCheck.SUFFICIENT if stock >= required_quantity else StockCheck.INSUFFICIENT

    async def has_sufficient_stock(self, product_id: int, required_quantity: int) -> bool:
        """
        Forma booleana de `check_stock`, por compatibilidad.

        Devuelve False tanto si el producto no existe como si el stock no
        alcanza; quien necesite distinguirlos debe usar `check_stock`.
        """
        return await self.check_stock(product_id, required_quantity) is StockCheck.SUFFICIENT

    # ========================================
    # OPERACIONES DE ESCRITURA (CREATE, UPDATE, DELETE)
    # ========================================

    async def create(self, product_in: Union[ProductCreate, Mapping[str, Any]]) -> ProductRead:
        """
        Crea un producto y lo devuelve releído desde la base de datos.

        Raises:
            ValidationError: faltan campos obligatorios o tienen valores inválidos
            ReferentialIntegrityError: category_id no existe
        """
        product_in = validate_schema(ProductCreate, product_in)
        values = {field: _column_value(field, value) for field, value in product_in.model_dump().items()}

        async with self.database.transaction() as session:
            db_product = Product(**values)
            session.add(db_product)
            await session.flush()
            product_id = db_product.id

        logger.info(f"Producto creado con ID {product_id}")
        return await self.get_by_id(product_id)

    async def update(self, product_id: int, partial_fields: Union[ProductUpdate, Mapping[str, Any]]) -> bool:
        """
        Actualización parcial: solo se escriben los campos presentes.

        Returns:
            False si no se envió ningún campo (no se ejecuta escritura) o si
            ninguna fila coincide con el ID; True en caso contrario.
        """
        product_update = validate_schema(ProductUpdate, partial_fields)
        fields = product_update.model_dump(exclude_unset=True)
        if not fields:
            return False

        statement = (
            update(Product)
            .where(Product.id == product_id)
            .values(build_set_clause(fields))
            .execution_options(synchronize_session=False)
        )
        async with self.database.transaction() as session:
            result = await session.execute(statement)

        updated = result.rowcount > 0
        if updated:
            logger.info(f"Producto {product_id} actualizado: {sorted(fields)}")
        return updated

    async def delete(self, product_id: int) -> bool:
        """Elimina un producto. False si no existía (idempotente)."""
        statement = delete(Product).where(Product.id == product_id).execution_options(synchronize_session=False)
        async with self.database.transaction() as session:
            result = await session.execute(statement)

        deleted = result.rowcount > 0
        if deleted:
            logger.info(f"Producto {product_id} eliminado")
        return deleted

    async def adjust_stock(self, product_id: int, delta: int) -> bool:
        """
        Incrementa (o decrementa, con delta negativo) el stock en una sola
        sentencia. Un resultado negativo lo rechaza la restricción CHECK.
        """
        statement = (
            update(Product)
            .where(Product.id == product_id)
            .values({Product.stock_quantity: Product.stock_quantity + delta})
            .execution_options(synchronize_session=False)
        )
        async with self.database.transaction() as session:
            result = await session.execute(statement)

        adjusted = result.rowcount > 0
        if adjusted:
            logger.info(f"Stock del producto {product_id} ajustado en {delta:+d}")
        return adjusted
