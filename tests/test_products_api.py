def _create(client, **fields):
    payload = {"name": "Widget", "price": 10, "stock_quantity": 10}
    payload.update(fields)
    r = client.post("/api/products", json=payload)
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_laptop_scenario(client):
    r = client.post("/api/products", json={"name": "Laptop", "price": 50000, "stock_quantity": 10})
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Product created successfully"
    product_id = body["data"]["id"]
    assert body["data"]["stock_quantity"] == 10

    r2 = client.put(f"/api/products/{product_id}", json={"stock_quantity": 3})
    assert r2.status_code == 200
    assert r2.json() == {"success": True, "message": "Product updated successfully"}

    r3 = client.get(f"/api/products/{product_id}")
    assert r3.status_code == 200
    product = r3.json()["data"]
    assert product["stock_quantity"] == 3
    assert product["price"] == 50000
    assert product["name"] == "Laptop"

    r4 = client.get("/api/products/low-stock", params={"threshold": 5})
    assert r4.status_code == 200
    assert product_id in [p["id"] for p in r4.json()["data"]]
    assert r4.json()["message"] == "Products with stock below 5"


def test_list_products_includes_category_name(client):
    category = client.post("/api/categories", json={"name": "Electronics"}).json()["data"]
    _create(client, name="Phone", category_id=category["id"])
    _create(client, name="Loose item")

    r = client.get("/api/products")

    assert r.status_code == 200
    data = r.json()["data"]
    assert [p["category_name"] for p in data] == ["Electronics", None]


def test_get_missing_product_returns_404(client):
    r = client.get("/api/products/999999")

    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Product not found"}


def test_create_with_unknown_category_returns_400(client):
    r = client.post(
        "/api/products",
        json={"name": "Orphan", "price": 5, "stock_quantity": 1, "category_id": 12345},
    )

    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Referenced record not found"


def test_create_missing_required_fields_returns_field_details(client):
    r = client.post("/api/products", json={"name": "Incomplete"})

    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "Validation failed"
    assert {"price", "stock_quantity"} <= {d["field"] for d in body["details"]}


def test_create_with_negative_price_is_rejected(client):
    r = client.post("/api/products", json={"name": "Refund", "price": -1, "stock_quantity": 1})

    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "price"


def test_update_empty_body_returns_404_without_writing(client):
    product = _create(client, name="Static")

    r = client.put(f"/api/products/{product['id']}", json={})

    assert r.status_code == 404
    assert client.get(f"/api/products/{product['id']}").json()["data"] == product


def test_update_unknown_field_is_rejected(client):
    product = _create(client)

    r = client.put(f"/api/products/{product['id']}", json={"name = 'x' --": "y"})

    assert r.status_code == 400
    assert r.json()["details"][0]["type"] == "extra_forbidden"


def test_update_missing_product_returns_404(client):
    r = client.put("/api/products/999999", json={"price": 1})

    assert r.status_code == 404
    assert r.json()["message"] == "Product not found"


def test_delete_twice_returns_404_the_second_time(client):
    product = _create(client)

    first = client.delete(f"/api/products/{product['id']}")
    second = client.delete(f"/api/products/{product['id']}")

    assert first.status_code == 200
    assert first.json()["message"] == "Product deleted successfully"
    assert second.status_code == 404


def test_products_by_category(client):
    books = client.post("/api/categories", json={"name": "Books"}).json()["data"]
    _create(client, name="Zine", category_id=books["id"])
    _create(client, name="Almanac", category_id=books["id"])
    _create(client, name="Unrelated")

    r = client.get(f"/api/products/category/{books['id']}")

    assert r.status_code == 200
    assert [p["name"] for p in r.json()["data"]] == ["Almanac", "Zine"]


def test_low_stock_default_threshold(client):
    _create(client, name="Plenty", stock_quantity=5)
    _create(client, name="Few", stock_quantity=1)

    r = client.get("/api/products/low-stock")

    assert [p["name"] for p in r.json()["data"]] == ["Few"]


def test_adjust_and_check_stock(client):
    product = _create(client, stock_quantity=4)

    r = client.patch(f"/api/products/{product['id']}/stock", json={"delta": -3})
    assert r.status_code == 200

    check = client.get(f"/api/products/{product['id']}/stock-check", params={"quantity": 2})
    assert check.status_code == 200
    assert check.json()["data"]["result"] == "insufficient"
    assert check.json()["data"]["sufficient"] is False

    missing = client.get("/api/products/999999/stock-check", params={"quantity": 1})
    assert missing.status_code == 404


def test_adjust_stock_below_zero_is_a_database_error(client):
    product = _create(client, stock_quantity=1)

    r = client.patch(f"/api/products/{product['id']}/stock", json={"delta": -2})

    assert r.status_code == 400
    assert r.json()["message"] == "Database operation failed"
    assert r.json()["error"] == "Bad request"


def test_non_integer_id_is_a_validation_error(client):
    r = client.get("/api/products/abc")

    assert r.status_code == 400
    assert r.json()["message"] == "Validation failed"


OVERSIZED_ID = 99999999999999999999


def test_oversized_ids_are_validation_errors(client):
    for method, path in [
        ("GET", f"/api/products/{OVERSIZED_ID}"),
        ("DELETE", f"/api/products/{OVERSIZED_ID}"),
        ("PATCH", f"/api/products/{OVERSIZED_ID}/stock"),
        ("GET", f"/api/products/category/{OVERSIZED_ID}"),
        ("DELETE", f"/api/categories/{OVERSIZED_ID}"),
    ]:
        r = client.request(method, path, json={"delta": 1} if method == "PATCH" else None)

        assert r.status_code == 400, (method, path, r.text)
        assert r.json()["message"] == "Validation failed"


def test_oversized_query_parameters_are_validation_errors(client):
    product = _create(client)

    low_stock = client.get("/api/products/low-stock", params={"threshold": OVERSIZED_ID})
    check = client.get(f"/api/products/{product['id']}/stock-check", params={"quantity": OVERSIZED_ID})

    assert low_stock.status_code == 400
    assert low_stock.json()["details"][0]["field"] == "threshold"
    assert check.status_code == 400
    assert check.json()["details"][0]["field"] == "quantity"


def test_price_outside_numeric_column_is_rejected(client):
    product = _create(client, price=10)

    too_large = client.put(f"/api/products/{product['id']}", json={"price": 1e12})
    too_precise = client.post("/api/products", json={"name": "Fraction", "price": 1.999, "stock_quantity": 1})

    assert too_large.status_code == 400
    assert too_large.json()["details"][0]["field"] == "price"
    assert too_precise.status_code == 400
    assert too_precise.json()["details"][0]["field"] == "price"
    assert client.get(f"/api/products/{product['id']}").json()["data"]["price"] == 10


def test_largest_storable_price_is_accepted(client):
    product = _create(client, price=99999999.99)

    assert product["price"] == 99999999.99
