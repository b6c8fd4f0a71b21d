from decimal import Decimal

from app.db.init_db import SAMPLE_PRODUCTS, seed_products


def test_read_products_and_filter_by_category(test_client, make_product):
    make_product(barcode="S1", category="Snacks")
    make_product(barcode="G1", category="Groceries")

    response = test_client.get("/api/products/")
    assert response.status_code == 200
    assert [p["barcode"] for p in response.json()] == ["S1", "G1"]

    response = test_client.get("/api/products/", params={"category": "Groceries"})
    assert [p["barcode"] for p in response.json()] == ["G1"]

    response = test_client.get("/api/products/category/Snacks")
    assert [p["barcode"] for p in response.json()] == ["S1"]


def test_read_product_by_barcode_and_id(test_client, make_product):
    product = make_product(barcode="8901063010631", price="25.00", name="Tata Salt")

    response = test_client.get("/api/products/barcode/8901063010631")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Tata Salt"
    assert data["price"] == "25.00"
    assert data["imageUrl"] == ""

    response = test_client.get(f"/api/products/{product.id}")
    assert response.status_code == 200
    assert response.json()["barcode"] == "8901063010631"


def test_read_unknown_product(test_client):
    assert test_client.get("/api/products/barcode/missing").status_code == 404
    assert test_client.get("/api/products/999").status_code == 404


def test_seed_products_only_once(db_session):
    assert seed_products(db_session) == len(SAMPLE_PRODUCTS)
    assert seed_products(db_session) == 0


def test_create_and_read_cart(test_client):
    response = test_client.post("/api/carts/", json={"cartId": "CART-9", "budget": "150"})
    assert response.status_code == 201
    data = response.json()
    assert data["cartId"] == "CART-9"
    assert Decimal(data["budget"]) == Decimal("150")
    assert Decimal(data["totalAmount"]) == Decimal("0")
    assert data["status"] == "active"
    assert data["isBudgetExceeded"] is False

    response = test_client.get("/api/carts/CART-9")
    assert response.status_code == 200
    assert response.json()["id"] == data["id"]


def test_create_cart_duplicate_id(test_client, make_cart):
    make_cart("CART-1")

    response = test_client.post("/api/carts/", json={"cartId": "CART-1", "budget": "10"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Cart ID already in use"}


def test_create_cart_rejects_bad_budget(test_client):
    response = test_client.post("/api/carts/", json={"cartId": "CART-2", "budget": "-5"})
    assert response.status_code == 422


def test_read_unknown_cart(test_client):
    assert test_client.get("/api/carts/NOPE").status_code == 404
    assert test_client.get("/api/carts/NOPE/items").status_code == 404


def test_update_budget_persists(test_client, make_product, make_cart):
    product = make_product(price="80.00")
    make_cart("CART-1", budget="100")
    test_client.post(
        "/api/cart-items/", json={"cartId": "CART-1", "productId": product.id, "quantity": 1}
    )

    response = test_client.patch("/api/carts/CART-1/budget", json={"budget": "50"})
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["budget"]) == Decimal("50")
    assert data["isBudgetExceeded"] is True


def test_cart_item_lifecycle_keeps_total_in_sync(test_client, make_product, make_cart):
    cookies = make_product(price="50.00")
    salt = make_product(price="20.00")
    make_cart("CART-1", budget="100")

    response = test_client.post(
        "/api/cart-items/", json={"cartId": "CART-1", "productId": cookies.id, "quantity": 2}
    )
    assert response.status_code == 201
    cookies_item = response.json()
    assert cookies_item["quantity"] == 2

    response = test_client.post(
        "/api/cart-items/", json={"cartId": "CART-1", "productId": salt.id}
    )
    salt_item = response.json()
    assert salt_item["quantity"] == 1
    assert Decimal(test_client.get("/api/carts/CART-1").json()["totalAmount"]) == Decimal("120")

    response = test_client.patch(
        f"/api/cart-items/{cookies_item['id']}/quantity", json={"quantity": 1}
    )
    assert response.status_code == 200
    assert response.json()["quantity"] == 1
    cart = test_client.get("/api/carts/CART-1").json()
    assert Decimal(cart["totalAmount"]) == Decimal("70")
    assert cart["isBudgetExceeded"] is False

    response = test_client.delete(f"/api/cart-items/{salt_item['id']}")
    assert response.status_code == 204
    assert Decimal(test_client.get("/api/carts/CART-1").json()["totalAmount"]) == Decimal("50")

    items = test_client.get("/api/carts/CART-1/items").json()
    assert len(items) == 1
    assert items[0]["product"]["id"] == cookies.id


def test_cart_item_validation(test_client, make_product, make_cart):
    product = make_product()
    make_cart("CART-1")

    response = test_client.post(
        "/api/cart-items/", json={"cartId": "CART-1", "productId": product.id, "quantity": 0}
    )
    assert response.status_code == 422
    response = test_client.post(
        "/api/cart-items/", json={"cartId": "CART-1", "productId": 999}
    )
    assert response.status_code == 404
    response = test_client.post(
        "/api/cart-items/", json={"cartId": "NOPE", "productId": product.id}
    )
    assert response.status_code == 404
    assert test_client.patch("/api/cart-items/999/quantity", json={"quantity": 2}).status_code == 404
    assert test_client.delete("/api/cart-items/999").status_code == 404


def test_checkout_flow(test_client, make_product, make_cart):
    product = make_product(price="12.50")
    make_cart("CART-1", budget="100")
    test_client.post(
        "/api/cart-items/", json={"cartId": "CART-1", "productId": product.id, "quantity": 4}
    )

    response = test_client.post("/api/orders/", json={"cartId": "CART-1", "paymentMethod": "card"})
    assert response.status_code == 201
    order = response.json()
    assert Decimal(order["totalAmount"]) == Decimal("50")
    assert order["status"] == "pending"
    assert order["paymentMethod"] == "card"
    assert test_client.get("/api/carts/CART-1").json()["status"] == "completed"

    response = test_client.post("/api/orders/", json={"cartId": "CART-1"})
    assert response.status_code == 409

    response = test_client.get(f"/api/orders/{order['id']}")
    assert response.status_code == 200
    detail = response.json()
    assert detail["cart"]["cartId"] == "CART-1"
    assert detail["items"][0]["quantity"] == 4

    assert test_client.get("/api/orders/latest").json()["id"] == order["id"]
    assert test_client.get("/api/orders/cart/CART-1").json()["id"] == order["id"]

    response = test_client.patch("/api/orders/cart/CART-1", json={"status": "paid"})
    assert response.status_code == 200
    assert response.json()["status"] == "paid"

    response = test_client.patch("/api/orders/cart/CART-1", json={"status": "shipped"})
    assert response.status_code == 422


def test_orders_not_found(test_client, make_cart):
    make_cart("CART-1")

    assert test_client.get("/api/orders/latest").status_code == 404
    assert test_client.get("/api/orders/1").status_code == 404
    assert test_client.get("/api/orders/cart/CART-1").status_code == 404
    assert test_client.post("/api/orders/", json={"cartId": "NOPE"}).status_code == 404
