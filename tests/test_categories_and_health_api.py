from fastapi.testclient import TestClient

from online_shop.main import create_app
from tests.conftest import make_settings


def test_create_list_and_get_category(client):
    r = client.post("/api/categories", json={"name": "Electronics"})
    assert r.status_code == 201
    category = r.json()["data"]

    assert client.get("/api/categories").json()["data"] == [category]
    assert client.get(f"/api/categories/{category['id']}").json()["data"]["name"] == "Electronics"
    assert client.get("/api/categories/999").status_code == 404


def test_duplicate_category_returns_409(client):
    client.post("/api/categories", json={"name": "Sports"})

    r = client.post("/api/categories", json={"name": "Sports"})

    assert r.status_code == 409
    assert r.json()["message"] == "Duplicate entry found"


def test_delete_category_in_use_returns_409(client):
    category = client.post("/api/categories", json={"name": "Clothing"}).json()["data"]
    client.post(
        "/api/products",
        json={"name": "Shirt", "price": 20, "stock_quantity": 5, "category_id": category["id"]},
    )

    r = client.delete(f"/api/categories/{category['id']}")

    assert r.status_code == 409
    assert r.json()["success"] is False


def test_delete_category(client):
    category = client.post("/api/categories", json={"name": "Garden"}).json()["data"]

    assert client.delete(f"/api/categories/{category['id']}").status_code == 200
    assert client.delete(f"/api/categories/{category['id']}").status_code == 404


def test_health(client):
    r = client.get("/health")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["timestamp"].endswith("Z")


def test_database_health(client):
    r = client.get("/health/db")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "OK"
    assert body["database"]["driver"] == "sqlite"
    assert body["database"]["pool"]["size"] == 5


def test_database_health_reports_unreachable_database(tmp_path):
    settings = make_settings(
        tmp_path,
        DATABASE_URL_OVERRIDE=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'shop.db'}",
        DB_CREATE_TABLES=False,
    )
    with TestClient(create_app(settings)) as client:
        r = client.get("/health/db")

    assert r.status_code == 500
    body = r.json()
    assert body["status"] == "ERROR"
    assert body["message"] == "Database connection failed"
    assert body["error"] == "Internal server error"


def test_api_index(client):
    r = client.get("/api")

    assert r.status_code == 200
    assert r.json()["endpoints"]["products"] == "/api/products"


def test_unknown_endpoint_returns_404_envelope(client):
    r = client.get("/api/orders")

    assert r.status_code == 404
    body = r.json()
    assert body["message"] == "Endpoint not found"
    assert body["path"] == "/api/orders"
    assert body["method"] == "GET"
    assert body["status"] == "ERROR"


def test_unsupported_method_returns_404_envelope(client):
    r = client.patch("/api/products")

    assert r.status_code == 404
    assert r.json()["method"] == "PATCH"
