# online_shop/schemas/product_schema.py
"""
Esquemas Pydantic para el modelo Product.

Patrón de esquemas utilizado:
- ProductBase: Propiedades comunes compartidas
- ProductCreate: Para crear nuevos productos (POST)
- ProductUpdate: Para actualizaciones parciales (PUT)
- ProductRead: Para respuestas de la API (GET), incluye category_name
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Rango de las columnas INTEGER (ids, stock)
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# NUMERIC(10, 2): ocho dígitos enteros y dos decimales
PRICE_LIMIT = 10**8
PRICE_DECIMAL_PLACES = 2


def check_price_scale(value: Optional[float]) -> Optional[float]:
    """Rechaza precios con más decimales de los que admite la columna."""
    if value is not None and round(value, PRICE_DECIMAL_PLACES) != value:
        raise ValueError(f"price must have at most {PRICE_DECIMAL_PLACES} decimal places")
    return value


# ========================================
# ESQUEMA BASE
# ========================================

class ProductBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de producto."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: float = Field(..., ge=0, lt=PRICE_LIMIT)
    stock_quantity: int = Field(..., ge=0, le=INT32_MAX)
    category_id: Optional[int] = Field(default=None, ge=INT32_MIN, le=INT32_MAX)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("price")
    @classmethod
    def validate_price_scale(cls, value):
        return check_price_scale(value)


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class ProductCreate(ProductBase):
    """Esquema para crear un nuevo producto. El ID lo asigna la base de datos."""


class ProductUpdate(BaseModel):
    """
    Esquema para actualizar un producto. Todos los campos son opcionales.

    Se usa con `model_dump(exclude_unset=True)`: un campo ausente no se toca,
    un campo presente con `null` sí se escribe. Los campos NOT NULL no admiten
    `null` explícito y cualquier clave desconocida es rechazada.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0, lt=PRICE_LIMIT)
    stock_quantity: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    category_id: Optional[int] = Field(default=None, ge=INT32_MIN, le=INT32_MAX)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("name", "price", "stock_quantity", mode="before")
    @classmethod
    def reject_explicit_null(cls, value, info):
        """Estos campos son NOT NULL: pueden omitirse, pero no anularse."""
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("price")
    @classmethod
    def validate_price_scale(cls, value):
        return check_price_scale(value)


class StockAdjustment(BaseModel):
    """Ajuste atómico de stock. `delta` puede ser negativo."""
    delta: int = Field(..., ge=INT32_MIN, le=INT32_MAX)


# ========================================
# ESQUEMAS DE RESPUESTA
# ========================================

class ProductRead(ProductBase):
    """Esquema de respuesta para un producto, con el nombre de su categoría."""
    id: int
    category_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class StockCheck(str, Enum):
    """Resultado de la comprobación de stock."""
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"
    PRODUCT_NOT_FOUND = "product_not_found"


class StockCheckResult(BaseModel):
    product_id: int
    required_quantity: int
    result: StockCheck
    sufficient: bool


class MessageEnvelope(BaseModel):
    success: bool = True
    message: str


class StockCheckEnvelope(BaseModel):
    success: bool = True
    data: StockCheckResult


class ProductEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: ProductRead


class ProductListEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: List[ProductRead]
