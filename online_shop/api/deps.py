# online_shop/api/deps.py
"""
Módulo de dependencias para FastAPI.

Centraliza las dependencias que se inyectan en los endpoints. El pool de
conexiones (`Database`) y la configuración viven en `app.state`, creados por
la factoría de la aplicación; aquí solo se exponen a los endpoints y se
construyen los repositorios sobre ellos.
"""

from fastapi import Depends, Request

from online_shop.core.config import Settings
from online_shop.crud.category_crud import CategoryRepository
from online_shop.crud.product_crud import ProductRepository
from online_shop.db.database import Database


def get_settings(request: Request) -> Settings:
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """
    Dependencia de FastAPI para obtener el gestor del pool de conexiones.
    """
    return request.app.state.database


def get_product_repository(database: Database = Depends(get_database)) -> ProductRepository:
    return ProductRepository(database)


def get_category_repository(database: Database = Depends(get_database)) -> CategoryRepository:
    return CategoryRepository(database)
