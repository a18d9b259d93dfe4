"""Catalog Routes - categories, products, SEO and health over HTTP.

Invariants:
    - Domain errors come back as the structured error envelope
    - Request validation failures are 400 with field details
    - Hierarchical slugs (with '/') resolve through the by-slug route
"""

import storefront.infrastructure.database as db_module
from storefront.infrastructure.database import DatabaseSessionManager


async def _create_category(client, **body):
    res = await client.post("/api/v1/categories", json=body)
    assert res.status_code == 201, res.text
    return res.json()


async def test_liveness_and_readiness(client):
    live = await client.get("/api/v1/health/")
    assert live.status_code == 200
    assert live.json()["service"] == "storefront-api"

    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "healthy"
    assert ready.json()["checks"]["schema"] == "current"


async def test_readiness_fails_without_migrations(client, monkeypatch):
    empty = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    monkeypatch.setattr(db_module, "db_manager", empty)
    try:
        res = await client.get("/api/v1/health/ready")
    finally:
        await empty.dispose()
    assert res.status_code == 503
    body = res.json()
    assert body["reason"] == "schema_missing"
    assert "categories" in body["missing_tables"]


async def test_request_id_is_echoed_or_generated(client):
    echoed = await client.get("/api/v1/health/", headers={"X-Request-Id": "req-42"})
    assert echoed.headers["X-Request-Id"] == "req-42"

    generated = await client.get("/api/v1/health/")
    assert len(generated.headers["X-Request-Id"]) == 32


async def test_create_nested_category_and_lookup_by_slug(client):
    food = await _create_category(client, name="Food")
    fruit = await _create_category(client, name="Fresh Fruit", parent_id=food["id"])
    assert fruit["slug"] == "food/fresh-fruit"

    res = await client.get("/api/v1/categories/by-slug/food/fresh-fruit")
    assert res.status_code == 200
    assert res.json()["id"] == fruit["id"]

    hierarchy = (await client.get("/api/v1/categories/hierarchy")).json()
    assert hierarchy[0]["id"] == food["id"]
    assert [c["id"] for c in hierarchy[0]["subcategories"]] == [fruit["id"]]


async def test_missing_parent_returns_404_envelope(client):
    res = await client.post("/api/v1/categories", json={"name": "Orphan", "parent_id": "nope"})
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "PARENT_CATEGORY_NOT_FOUND"
    assert error["context"]["resource_id"] == "nope"


async def test_blank_name_is_a_validation_error(client):
    res = await client.post("/api/v1/categories", json={"name": "   "})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "body.name"


async def test_slug_with_path_separator_is_rejected(client):
    res = await client.post("/api/v1/categories", json={"name": "Food", "slug": "a/b"})
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"] == "body.slug"

    food = await _create_category(client, name="Food")
    patched = await client.patch(f"/api/v1/categories/{food['id']}", json={"slug": "Fresh/Food"})
    assert patched.status_code == 400
    assert (await client.get(f"/api/v1/categories/{food['id']}")).json()["slug"] == "food"


async def test_delete_parent_with_children_conflicts(client):
    food = await _create_category(client, name="Food")
    await _create_category(client, name="Fruit", parent_id=food["id"])
    res = await client.delete(f"/api/v1/categories/{food['id']}")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CATEGORY_HAS_CHILDREN"


async def test_patch_parent_null_moves_to_top_level(client):
    food = await _create_category(client, name="Food")
    fruit = await _create_category(client, name="Fruit", parent_id=food["id"])
    res = await client.patch(f"/api/v1/categories/{fruit['id']}", json={"parent_id": None})
    assert res.status_code == 200
    assert res.json()["parent_id"] is None
    assert res.json()["slug"] == "fruit"


async def test_product_create_updates_breadcrumb_counts(client):
    food = await _create_category(client, name="Food")
    fruit = await _create_category(client, name="Fruit", parent_id=food["id"])
    res = await client.post("/api/v1/products", json={
        "name": "Pear", "price": 2.5, "stock": 4, "category_id": fruit["id"],
    })
    assert res.status_code == 201
    assert res.json()["category_slug"] == "food/fruit"

    trail = (await client.get(f"/api/v1/categories/{fruit['id']}/breadcrumbs")).json()
    assert [(c["name"], c["product_count"]) for c in trail] == [("Food", 1), ("Fruit", 1)]

    listed = (await client.get(f"/api/v1/categories/{food['id']}/products")).json()
    assert [p["name"] for p in listed] == ["Pear"]


async def test_route_seo_uses_store_business_name(client):
    await client.put("/api/v1/store-settings", json={"business_name": "Green Market"})
    res = await client.get("/api/v1/seo/route", params={"path": "/shop"})
    assert res.status_code == 200
    assert res.json()["title"] == "Shop All Products | Green Market"


async def test_seo_settings_update_by_global_key(client):
    res = await client.put("/api/v1/seo/settings", json={
        "global": {"keywords": ["honey", "eggs", "bread"], "description": "Weekly farm boxes."},
    })
    assert res.status_code == 200
    assert res.json()["global"]["keywords"] == ["honey", "eggs", "bread"]

    resolved = (await client.get("/api/v1/seo/route", params={"path": "/nowhere"})).json()
    assert resolved["description"] == "Weekly farm boxes."


async def test_product_seo_metadata(client):
    product = (await client.post("/api/v1/products", json={
        "name": "Sourdough", "price": 6, "description": "<p>Slow  fermented loaf</p>",
    })).json()
    res = await client.get(f"/api/v1/seo/products/{product['id']}")
    assert res.status_code == 200
    assert res.json()["title"] == "Sourdough - | Our Store"
    assert res.json()["description"] == "Slow fermented loaf"


async def test_seo_validation_reports_findings(client):
    res = await client.post("/api/v1/seo/validate", json={"title": "Hi", "keywords": ["a"]})
    assert res.status_code == 200
    body = res.json()
    assert body["valid"] is True
    assert {f["field"] for f in body["findings"]} == {"title", "keywords"}


async def test_duplicate_product_slug_is_a_conflict(client):
    first = await client.post("/api/v1/products", json={"name": "Kale", "price": 3})
    assert first.status_code == 201

    second = await client.post("/api/v1/products", json={"name": "Kale", "price": 4})
    assert second.status_code == 409
    assert second.json()["error"]["code"] == "DATA_INTEGRITY_CONFLICT"

    listed = await client.get("/api/v1/products/by-slug/kale")
    assert listed.json()["price"] == 3


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/v1/nowhere", headers={"X-Request-Id": "req-7"})
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert error["request_id"] == "req-7"
