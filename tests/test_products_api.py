# File: tests/test_products_api.py

"""
Product catalogue endpoints: pagination, caching, admin-only mutations and
payload validation.
"""

from bilemo.core.config import settings

PRODUCT_FIELDS = {"id", "title", "price", "description", "features", "text", "_links"}


def test_list_requires_authentication(api):
    resp = api.get("/api/products")
    assert resp.status_code == 401


def test_list_defaults_to_first_page_of_three(api, client_one, auth_headers, make_product):
    for i in range(5):
        make_product(f"phone{i}")

    resp = api.get("/api/products", headers=auth_headers(client_one))
    assert resp.status_code == 200
    assert [p["title"] for p in resp.json()] == ["phone0", "phone1", "phone2"]


def test_list_honours_page_and_limit(api, client_one, auth_headers, make_product):
    for i in range(5):
        make_product(f"phone{i}")

    resp = api.get("/api/products?page=2&limit=2", headers=auth_headers(client_one))
    assert [p["title"] for p in resp.json()] == ["phone2", "phone3"]

    resp = api.get("/api/products?page=4&limit=2", headers=auth_headers(client_one))
    assert resp.json() == []


def test_list_rejects_invalid_page(api, client_one, auth_headers):
    resp = api.get("/api/products?page=0", headers=auth_headers(client_one))
    assert resp.status_code == 400
    assert resp.json()[0]["property_path"] == "page"


def test_list_rejects_page_beyond_maximum(api, client_one, auth_headers):
    resp = api.get("/api/products?page=99999999999999999999", headers=auth_headers(client_one))
    assert resp.status_code == 400
    assert resp.json()[0]["property_path"] == "page"


def test_list_rejects_limit_beyond_maximum(api, client_one, auth_headers):
    limit = settings.PRODUCTS_MAX_LIMIT + 1
    resp = api.get(f"/api/products?limit={limit}", headers=auth_headers(client_one))
    assert resp.status_code == 400
    assert resp.json()[0]["property_path"] == "limit"


def test_list_accepts_last_allowed_page(api, client_one, auth_headers):
    page = settings.PRODUCTS_MAX_PAGE
    resp = api.get(f"/api/products?page={page}", headers=auth_headers(client_one))
    assert resp.status_code == 200
    assert resp.json() == []


def test_list_is_served_from_cache_until_catalogue_changes(
    api, admin, client_one, auth_headers, make_product
):
    make_product("phone0")
    headers = auth_headers(client_one)

    first = api.get("/api/products?page=1&limit=10", headers=headers)
    # Written behind the API's back: the cached page must not notice
    make_product("sneaky")
    second = api.get("/api/products?page=1&limit=10", headers=headers)
    assert second.json() == first.json()

    resp = api.post("/api/products", json={"title": "Widget"}, headers=auth_headers(admin))
    assert resp.status_code == 201

    third = api.get("/api/products?page=1&limit=10", headers=headers)
    assert [p["title"] for p in third.json()] == ["phone0", "sneaky", "Widget"]


def test_delete_invalidates_cached_pages(api, admin, client_one, auth_headers, make_product):
    doomed = make_product("doomed")
    make_product("survivor")
    headers = auth_headers(client_one)

    before = api.get("/api/products", headers=headers)
    assert len(before.json()) == 2

    resp = api.delete(f"/api/products/{doomed.id}", headers=auth_headers(admin))
    assert resp.status_code == 204

    after = api.get("/api/products", headers=headers)
    assert [p["title"] for p in after.json()] == ["survivor"]


def test_cached_page_does_not_leak_admin_links(api, admin, client_one, auth_headers, make_product):
    make_product("phone0")

    as_admin = api.get("/api/products", headers=auth_headers(admin)).json()
    assert "delete" in as_admin[0]["_links"]

    as_client = api.get("/api/products", headers=auth_headers(client_one)).json()
    assert "delete" not in as_client[0]["_links"]
    assert "self" in as_client[0]["_links"]


def test_detail(api, client_one, auth_headers, make_product):
    product = make_product("phone0", price=199.0, description="A phone")

    resp = api.get(f"/api/products/{product.id}", headers=auth_headers(client_one))
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "phone0"
    assert body["price"] == 199.0
    assert body["description"] == "A phone"
    assert body["_links"]["self"]["href"].endswith(f"/api/products/{product.id}")


def test_detail_not_found(api, client_one, auth_headers):
    resp = api.get("/api/products/999", headers=auth_headers(client_one))
    assert resp.status_code == 404


def test_detail_rejects_out_of_range_id(api, client_one, auth_headers):
    resp = api.get(f"/api/products/{2 ** 64}", headers=auth_headers(client_one))
    assert resp.status_code == 400
    assert resp.json()[0]["property_path"] == "product_id"


def test_create_as_admin(api, admin, auth_headers):
    resp = api.post(
        "/api/products",
        json={"title": "Widget", "price": 9.99},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["title"] == "Widget"
    assert body["price"] == 9.99
    assert isinstance(body["id"], int)
    assert set(body) <= PRODUCT_FIELDS
    assert resp.headers["location"].endswith(f"/api/products/{body['id']}")


def test_create_requires_admin(api, client_one, auth_headers):
    resp = api.post(
        "/api/products",
        json={"title": "Widget", "price": 9.99},
        headers=auth_headers(client_one),
    )
    assert resp.status_code == 403


def test_create_rejects_negative_price(api, admin, auth_headers):
    resp = api.post(
        "/api/products",
        json={"title": "Widget", "price": -1},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 400
    violations = resp.json()
    assert violations[0]["property_path"] == "price"
    assert violations[0]["message"]


def test_create_rejects_empty_title(api, admin, auth_headers):
    resp = api.post("/api/products", json={"title": ""}, headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.json()[0]["property_path"] == "title"


def test_create_rejects_overlong_title(api, admin, auth_headers):
    resp = api.post("/api/products", json={"title": "x" * 256}, headers=auth_headers(admin))
    assert resp.status_code == 400
    assert resp.json()[0]["property_path"] == "title"


def test_delete_requires_admin(api, client_one, auth_headers, make_product):
    product = make_product("phone0")
    resp = api.delete(f"/api/products/{product.id}", headers=auth_headers(client_one))
    assert resp.status_code == 403


def test_delete_not_found(api, admin, auth_headers):
    resp = api.delete("/api/products/999", headers=auth_headers(admin))
    assert resp.status_code == 404
