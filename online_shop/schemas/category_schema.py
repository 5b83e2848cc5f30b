# online_shop/schemas/category_schema.py

"""
Esquemas Pydantic para el modelo Category.

Patrón de esquemas utilizado:
- CategoryBase: Propiedades comunes compartidas
- CategoryCreate: Para crear nuevas categorías (POST)
- CategoryRead: Para respuestas de la API (GET)
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

# ========================================
# ESQUEMA BASE
# ========================================

class CategoryBase(BaseModel):
    """Propiedades comunes compartidas entre esquemas de categoría."""
    name: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)


# ========================================
# ESQUEMAS PARA OPERACIONES
# ========================================

class CategoryCreate(CategoryBase):
    """Esquema para crear una nueva categoría. El ID lo asigna la base de datos."""


# ========================================
# ESQUEMA DE RESPUESTA
# ========================================

class CategoryRead(CategoryBase):
    """Esquema para las respuestas de la API al leer categorías."""
    id: int

    model_config = ConfigDict(from_attributes=True)


class CategoryEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: CategoryRead


class CategoryListEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: List[CategoryRead]
