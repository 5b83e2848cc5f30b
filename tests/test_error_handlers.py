import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from online_shop.core.exceptions import (
    AppError,
    AuthenticationError,
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    ReferentialIntegrityError,
    StorageError,
    StorageUnavailableError,
    ValidationError,
)
from online_shop.main import create_app
from tests.conftest import make_settings

ERRORS = {
    "duplicate": DuplicateKeyError("UNIQUE constraint failed: categories.category_name"),
    "foreign-key": ReferentialIntegrityError("FOREIGN KEY constraint failed"),
    "unavailable": StorageUnavailableError("Connection pool exhausted", code="pool_timeout"),
    "storage": StorageError("syntax error near SET", code="42601"),
    "validation": ValidationError(details=[{"field": "price", "message": "must be >= 0", "type": "greater_than_equal"}]),
    "auth": AuthenticationError(),
    "teapot": AppError("I'm a teapot", status_code=418),
    "conflict": ConflictError("Resource already exists"),
    "not-found": NotFoundError(),
    "http": HTTPException(status_code=403, detail="Forbidden"),
    "boom": RuntimeError("kaboom"),
}


def _app_raising(tmp_path, environment):
    app = create_app(make_settings(tmp_path, APP_ENVIRONMENT=environment))

    def make_endpoint(error):
        async def endpoint():
            raise error
        return endpoint

    for name, error in ERRORS.items():
        app.add_api_route(f"/raise/{name}", make_endpoint(error))

    return app


@pytest.fixture
def prod_client(tmp_path):
    with TestClient(_app_raising(tmp_path, "production"), raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def dev_client(tmp_path):
    with TestClient(_app_raising(tmp_path, "development"), raise_server_exceptions=False) as client:
        yield client


@pytest.mark.parametrize(
    "name, status, message",
    [
        ("duplicate", 409, "Duplicate entry found"),
        ("foreign-key", 400, "Referenced record not found"),
        ("unavailable", 503, "Database temporarily unavailable"),
        ("storage", 400, "Database operation failed"),
        ("validation", 400, "Validation failed"),
        ("auth", 401, "Invalid token"),
        ("teapot", 418, "I'm a teapot"),
        ("conflict", 409, "Resource already exists"),
        ("not-found", 404, "Resource not found"),
        ("http", 403, "Forbidden"),
        ("boom", 500, "Internal server error"),
    ],
)
def test_classification_table(prod_client, name, status, message):
    r = prod_client.get(f"/raise/{name}")

    assert r.status_code == status
    body = r.json()
    assert body["success"] is False
    assert body["status"] == "ERROR"
    assert body["message"] == message
    assert "timestamp" in body


def test_storage_detail_hidden_outside_development(prod_client):
    body = prod_client.get("/raise/storage").json()

    assert body["error"] == "Bad request"
    assert "syntax error" not in str(body)


def test_storage_detail_shown_in_development(dev_client):
    assert dev_client.get("/raise/storage").json()["error"] == "syntax error near SET"


def test_unavailable_is_marked_retryable(prod_client):
    r = prod_client.get("/raise/unavailable")

    assert r.headers["Retry-After"] == "5"
    assert r.json()["retryable"] is True


def test_validation_details_are_passed_through(prod_client):
    details = prod_client.get("/raise/validation").json()["details"]

    assert details == [{"field": "price", "message": "must be >= 0", "type": "greater_than_equal"}]


def test_unhandled_error_has_no_stack_in_production(prod_client):
    assert "stack" not in prod_client.get("/raise/boom").json()


def test_unhandled_error_has_stack_in_development(dev_client):
    body = dev_client.get("/raise/boom").json()

    assert body["message"] == "kaboom"
    assert "RuntimeError" in body["stack"]


def test_unhandled_error_keeps_cors_headers(prod_client):
    r = prod_client.get("/raise/boom", headers={"Origin": "http://shop.example"})

    assert r.status_code == 500
    assert "access-control-allow-origin" in r.headers
