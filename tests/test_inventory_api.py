"""HTTP tests for the Inventory service."""
from datetime import date, timedelta

TODAY = date.today()


def test_health(inventory_api):
    assert inventory_api.get("/healthz").json() == {"status": "healthy"}


def test_create_product(inventory_api):
    response = inventory_api.post("/inventory/product", json={"product_id": "OATS", "name": "Oats"})

    assert response.status_code == 201
    assert response.json()["product_id"] == "OATS"


def test_duplicate_product(inventory_api, wheat):
    response = inventory_api.post("/inventory/product", json={"product_id": "WHEAT", "name": "Wheat"})

    assert response.status_code == 400
    assert response.json()["error"] == "AlreadyExists"


def test_blank_product_id_fails_validation(inventory_api):
    response = inventory_api.post("/inventory/product", json={"product_id": "", "name": "Oats"})
    assert response.status_code == 422


def test_get_batches_sorted_by_expiry(inventory_api, wheat):
    response = inventory_api.get("/inventory/WHEAT")

    assert response.status_code == 200
    body = response.json()
    assert [b["batch_id"] for b in body] == ["B1", "B2"]
    assert body[0] == {
        "id": body[0]["id"],
        "batch_id": "B1",
        "product_id": "WHEAT",
        "quantity": 1000,
        "expiry_date": (TODAY + timedelta(days=182)).isoformat(),
    }


def test_get_batches_unknown_product(inventory_api):
    response = inventory_api.get("/inventory/NOPE")

    assert response.status_code == 404
    assert response.json() == {"detail": "Product not found: NOPE", "error": "NotFound"}


def test_add_batch(inventory_api, wheat):
    response = inventory_api.post("/inventory/update", json={
        "product_id": "WHEAT",
        "batch_id": "B3",
        "quantity": 250,
        "expiry_date": (TODAY + timedelta(days=30)).isoformat(),
    })

    assert response.status_code == 201
    assert response.json()["batch_id"] == "B3"
    assert [b["batch_id"] for b in inventory_api.get("/inventory/WHEAT").json()] == ["B3", "B1", "B2"]


def test_add_batch_without_expiry(inventory_api, wheat):
    response = inventory_api.post("/inventory/update", json={
        "product_id": "WHEAT", "batch_id": "B3", "quantity": 250,
    })

    assert response.status_code == 400
    assert response.json()["error"] == "InvalidRequest"
    assert len(inventory_api.get("/inventory/WHEAT").json()) == 2


def test_order_reduction_returns_first_affected_batch(inventory_api, wheat):
    response = inventory_api.post("/inventory/update", json={
        "product_id": "WHEAT", "batch_id": "ORDER_REDUCTION", "quantity": 1200,
    })

    assert response.status_code == 201
    assert response.json()["batch_id"] == "B1"
    assert response.json()["quantity"] == 0
    assert [b["quantity"] for b in inventory_api.get("/inventory/WHEAT").json()] == [0, 300]


def test_order_reduction_insufficient(inventory_api, wheat):
    response = inventory_api.post("/inventory/update", json={
        "product_id": "WHEAT", "batch_id": "ORDER_REDUCTION", "quantity": 2000,
    })

    assert response.status_code == 409
    assert response.json()["error"] == "InsufficientInventory"
    assert [b["quantity"] for b in inventory_api.get("/inventory/WHEAT").json()] == [1000, 500]


def test_negative_quantity_fails_validation(inventory_api, wheat):
    response = inventory_api.post("/inventory/update", json={
        "product_id": "WHEAT", "batch_id": "B1", "quantity": -5,
    })
    assert response.status_code == 422


def test_preview_allocation(inventory_api, wheat):
    response = inventory_api.post("/inventory/allocate", json={
        "product_id": "WHEAT", "quantity": 600, "strategy": "LIFO",
    })

    assert response.status_code == 200
    assert response.json() == [
        {"batch_id": "B2", "quantity": 500},
        {"batch_id": "B1", "quantity": 100},
    ]


def test_preview_allocation_unknown_strategy(inventory_api, wheat):
    response = inventory_api.post("/inventory/allocate", json={
        "product_id": "WHEAT", "quantity": 1, "strategy": "RANDOM",
    })

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown strategy: RANDOM"
