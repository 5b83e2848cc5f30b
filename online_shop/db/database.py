# online_shop/db/database.py

"""
Gestión del pool de conexiones y de las sesiones de base de datos.

Este módulo define los componentes básicos que utiliza toda la aplicación:
- Clase base para modelos (Base)
- `Database`: propietario del motor asíncrono (y por tanto del pool de
  conexiones), de la fábrica de sesiones y de los helpers de consulta y
  transacción

No existe un motor global: la aplicación construye una instancia de
`Database` en su factoría, la inicializa en el arranque y la cierra en el
apagado. Los repositorios la reciben por constructor.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import AsyncAdaptedQueuePool

from online_shop.core.config import Settings
from online_shop.db.errors import translate_storage_error

logger = logging.getLogger(__name__)

# Clase base declarativa para todos los modelos ORM
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite no aplica las claves foráneas salvo que se active por conexión."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Propietario del pool de conexiones.

    Ciclo de vida explícito:
        database = Database(settings)
        await database.init()
        ...
        await database.close()
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None

    # ========================================
    # CICLO DE VIDA
    # ========================================

    def _engine_options(self) -> Dict[str, Any]:
        url = make_url(self.settings.DATABASE_URL)
        options: Dict[str, Any] = {"echo": self.settings.DB_ECHO}

        # SQLite en memoria usa StaticPool, que no admite parámetros de tamaño
        if url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:"):
            return options

        options.update(
            poolclass=AsyncAdaptedQueuePool,
            pool_size=self.settings.DB_POOL_SIZE,
            max_overflow=self.settings.DB_MAX_OVERFLOW,
            pool_timeout=self.settings.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
        )
        return options

    async def init(self) -> None:
        """Crea el motor y la fábrica de sesiones. Es idempotente."""
        if self.engine is not None:
            return

        self.engine = create_async_engine(self.settings.DATABASE_URL, **self._engine_options())
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False para que los objetos sigan siendo utilizables
        # después de que la transacción se haya confirmado.
        self._sessionmaker = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

        if self.settings.DB_CREATE_TABLES:
            await self.create_tables()

        logger.info(
            "Pool de base de datos inicializado (driver=%s, pool_size=%s, timeout=%ss)",
            self.engine.dialect.name, self.settings.DB_POOL_SIZE, self.settings.DB_POOL_TIMEOUT,
        )

    async def close(self) -> None:
        """Cierra todas las conexiones del pool."""
        if self.engine is None:
            return
        await self.engine.dispose()
        self.engine = None
        self._sessionmaker = None
        logger.info("Pool de base de datos cerrado")

    async def create_tables(self) -> None:
        """Crea las tablas definidas en los modelos ORM si no existen."""
        # Registrar los modelos en Base.metadata
        from online_shop.db.models import category_model, product_model  # noqa: F401

        try:
            async with self._require_engine().begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError, OverflowError) as exc:
            raise translate_storage_error(exc) from exc

    async def drop_tables(self) -> None:
        from online_shop.db.models import category_model, product_model  # noqa: F401

        async with self._require_engine().begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    def _require_engine(self) -> AsyncEngine:
        if self.engine is None:
            raise RuntimeError("Database.init() must be awaited before use")
        return self.engine

    # ========================================
    # HELPERS DE CONSULTA Y TRANSACCIÓN
    # ========================================

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Sesión para lecturas. La conexión se devuelve al pool al salir y
        cualquier error del motor se traduce a StorageError.
        """
        self._require_engine()
        try:
            async with self._sessionmaker() as session:
                yield session
        except (SQLAlchemyError, OSError, OverflowError) as exc:
            raise translate_storage_error(exc) from exc

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """
        Transacción acotada: begin → operaciones → commit.

        Ante cualquier excepción se hace rollback y se relanza; la conexión
        se libera siempre al cerrar la sesión.
        """
        async with self.session() as session:
            await session.begin()
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                logger.debug("Transacción revertida")
                raise

    async def health_check(self) -> Dict[str, Any]:
        """
        Comprueba que la base de datos responde y devuelve el estado del pool.

        Raises:
            StorageError: si la base de datos no es alcanzable
        """
        async with self.session() as session:
            await session.execute(text("SELECT 1"))

        engine = self._require_engine()
        return {
            "status": "healthy",
            "connection": "active",
            "driver": engine.dialect.name,
            "database": engine.url.database,
            "pool": {
                "size": self.settings.DB_POOL_SIZE,
                "max_overflow": self.settings.DB_MAX_OVERFLOW,
                "timeout": self.settings.DB_POOL_TIMEOUT,
                "status": engine.pool.status(),
            },
        }
