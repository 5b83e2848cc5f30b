import pytest
from fastapi.testclient import TestClient

from online_shop.core.config import Settings
from online_shop.crud.category_crud import CategoryRepository
from online_shop.crud.product_crud import ProductRepository
from online_shop.db.database import Database
from online_shop.main import create_app


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        DATABASE_URL_OVERRIDE=f"sqlite+aiosqlite:///{tmp_path / 'shop.db'}",
        DB_CREATE_TABLES=True,
        DB_POOL_SIZE=5,
        DB_POOL_TIMEOUT=5,
        APP_ENVIRONMENT="production",
        LOG_LEVEL="WARNING",
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def test_settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def database(test_settings):
    db = Database(test_settings)
    await db.init()
    yield db
    await db.drop_tables()
    await db.close()


@pytest.fixture
def product_repository(database):
    return ProductRepository(database)


@pytest.fixture
def category_repository(database):
    return CategoryRepository(database)
