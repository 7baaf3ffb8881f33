"""
HTTP tests through FastAPI's TestClient against the module-level store.
"""
import unittest
from unittest import mock

from fastapi.testclient import TestClient

import notifications
from database import db
from main import app
from seed import seed_products

ORDER = {
    "customer_name": "Aziz Karimov",
    "customer_phone": "+998 90 123 45 67",
    "customer_email": "aziz@example.com",
    "delivery_address": "Toshkent, Chilonzor 5",
    "payment_method": "uzcard",
    "total_amount": 535000,
}

USER = {
    "username": "aziz",
    "email": "aziz@example.com",
    "password": "secret123",
    "first_name": "Aziz",
    "last_name": "Karimov",
}


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        db.reset()
        seed_products()
        self.client = TestClient(app)

    def tearDown(self):
        db.reset()


class TestHealth(ApiTestCase):
    def test_root_and_test(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        body = self.client.get("/test").json()
        self.assertEqual(body["collections"]["product"], 11)


class TestProductsApi(ApiTestCase):
    def test_list_and_get(self):
        products = self.client.get("/api/products").json()
        self.assertEqual(len(products), 11)

        resp = self.client.get("/api/products/1")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], "Nike Air Max")
        self.assertEqual(resp.json()["discount_percentage"], 25)

        self.assertEqual(self.client.get("/api/products/999").status_code, 404)

    def test_sections(self):
        offers = self.client.get("/api/products/special/offers").json()
        self.assertIn("1", [p["id"] for p in offers])
        best = self.client.get("/api/products/special/bestsellers").json()
        self.assertEqual([p["id"] for p in best], ["9", "10", "11"])
        new = self.client.get("/api/products/special/newarrivals").json()
        self.assertEqual([p["id"] for p in new], ["5", "6", "7", "8"])
        shoes = self.client.get("/api/products/category/poyabzal").json()
        self.assertEqual([p["id"] for p in shoes], ["1", "4"])

    def test_search(self):
        for q in ("nike", "NIKE"):
            resp = self.client.get("/api/products/search", params={"q": q})
            self.assertEqual(resp.status_code, 200)
            self.assertEqual([p["id"] for p in resp.json()], ["1"])

    def test_search_requires_query(self):
        self.assertEqual(self.client.get("/api/products/search").status_code, 400)
        self.assertEqual(self.client.get("/api/products/search", params={"q": "  "}).status_code, 400)

    def test_create_product(self):
        resp = self.client.post("/api/products", json={
            "name": "Futbol To'pi",
            "description": "Rasmiy o'lchamdagi to'p",
            "price": 150000,
            "category": "jihozlar",
            "image_url": "https://example.com/ball.png",
        })
        self.assertEqual(resp.status_code, 201)
        created = resp.json()
        self.assertTrue(created["in_stock"])
        self.assertIsNone(created["sizes"])
        self.assertEqual(self.client.get(f"/api/products/{created['id']}").json()["name"], "Futbol To'pi")


class TestCartApi(ApiTestCase):
    def add(self, session="s1", product="1", **extra):
        return self.client.post("/api/cart", json={"session_id": session, "product_id": product, **extra})

    def test_cart_flow(self):
        resp = self.add(quantity=2, size="42")
        self.assertEqual(resp.status_code, 201)
        item = resp.json()
        self.assertEqual(item["quantity"], 2)

        rows = self.client.get("/api/cart/s1").json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["product"]["name"], "Nike Air Max")
        self.assertEqual(rows[0]["size"], "42")

        resp = self.client.put(f"/api/cart/{item['id']}", json={"quantity": 5})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["quantity"], 5)

        self.assertEqual(self.client.delete(f"/api/cart/{item['id']}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/cart/{item['id']}").status_code, 404)
        self.assertEqual(self.client.get("/api/cart/s1").json(), [])

    def test_duplicate_adds_are_not_merged(self):
        self.add()
        self.add()
        self.assertEqual(len(self.client.get("/api/cart/s1").json()), 2)

    def test_add_validation(self):
        self.assertEqual(self.add(product="999").status_code, 404)
        self.assertEqual(self.add(quantity=0).status_code, 400)
        self.assertEqual(self.client.post("/api/cart", json={"product_id": "1"}).status_code, 400)

    def test_add_rejects_non_integer_quantity(self):
        for bad in (True, "2", 1.5, None):
            self.assertEqual(self.add(quantity=bad).status_code, 400, bad)
        self.assertEqual(self.client.get("/api/cart/s1").json(), [])

    def test_update_rejects_bad_quantity_without_mutation(self):
        item = self.add(quantity=3).json()
        for bad in (0, -1, "abc", "2", 1.5, None):
            resp = self.client.put(f"/api/cart/{item['id']}", json={"quantity": bad})
            self.assertEqual(resp.status_code, 400, bad)
        self.assertEqual(self.client.get("/api/cart/s1").json()[0]["quantity"], 3)

    def test_update_missing(self):
        self.assertEqual(self.client.put("/api/cart/nope", json={"quantity": 2}).status_code, 404)

    def test_clear_session(self):
        self.add(session="a")
        self.add(session="b")
        resp = self.client.delete("/api/cart/session/a")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/cart/a").json(), [])
        self.assertEqual(len(self.client.get("/api/cart/b").json()), 1)
        self.assertEqual(self.client.delete("/api/cart/session/a").status_code, 200)

    def test_dangling_product_is_a_server_error(self):
        self.add(product="7")
        db["product"].delete("7")
        with self.assertLogs(level="ERROR"):
            resp = self.client.get("/api/cart/s1")
        self.assertEqual(resp.status_code, 500)


class TestAuthApi(ApiTestCase):
    def test_register_and_login(self):
        with mock.patch.object(notifications, "simulate_email_send") as send:
            resp = self.client.post("/api/auth/register", json=USER)
        self.assertEqual(resp.status_code, 201)
        user = resp.json()["user"]
        self.assertNotIn("password", user)
        send.assert_called_once()

        resp = self.client.post("/api/auth/login", json={"email": USER["email"], "password": USER["password"]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["id"], user["id"])

        resp = self.client.get(f"/api/user/{user['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("password", resp.json())

    def test_bad_credentials(self):
        self.client.post("/api/auth/register", json=USER)
        wrong = self.client.post("/api/auth/login", json={"email": USER["email"], "password": "nope-nope"})
        unknown = self.client.post("/api/auth/login", json={"email": "x@example.com", "password": "secret123"})
        self.assertEqual(wrong.status_code, 401)
        self.assertEqual(unknown.status_code, 401)
        self.assertEqual(wrong.json(), unknown.json())

    def test_register_validation_and_duplicates(self):
        self.assertEqual(self.client.post("/api/auth/register", json={**USER, "password": "123"}).status_code, 400)
        self.assertEqual(self.client.post("/api/auth/register", json={**USER, "email": "bad"}).status_code, 400)
        self.assertEqual(self.client.post("/api/auth/register", json=USER).status_code, 201)
        self.assertEqual(self.client.post("/api/auth/register", json=USER).status_code, 400)

    def test_registration_survives_email_failure(self):
        with mock.patch.object(notifications, "simulate_email_send", side_effect=RuntimeError("down")):
            resp = self.client.post("/api/auth/register", json=USER)
        self.assertEqual(resp.status_code, 201)

    def test_unknown_user(self):
        self.assertEqual(self.client.get("/api/user/missing").status_code, 404)


class TestOrdersApi(ApiTestCase):
    ITEMS = [
        {"product_id": "1", "quantity": 1, "size": "42", "price": 450000},
        {"product_id": "2", "quantity": 1, "price": 85000},
    ]

    def test_create_and_fetch(self):
        with mock.patch.object(notifications, "simulate_email_send") as send:
            resp = self.client.post("/api/orders", json={"order": {**ORDER, "status": "shipped"}, "items": self.ITEMS})
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        order = body["order"]
        self.assertEqual(order["status"], "pending")
        self.assertEqual(len(body["items"]), 2)
        self.assertTrue(all(i["order_id"] == order["id"] for i in body["items"]))
        send.assert_called_once()

        fetched = self.client.get(f"/api/orders/{order['id']}")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json(), order)

        items = self.client.get(f"/api/orders/{order['id']}/items").json()
        self.assertEqual([i["price"] for i in items], [450000, 85000])

    def test_order_without_email_sends_nothing(self):
        order = {k: v for k, v in ORDER.items() if k != "customer_email"}
        with mock.patch.object(notifications, "simulate_email_send") as send:
            resp = self.client.post("/api/orders", json={"order": order, "items": self.ITEMS})
        self.assertEqual(resp.status_code, 201)
        self.assertIsNone(resp.json()["order"]["customer_email"])
        send.assert_not_called()

    def test_order_survives_email_failure(self):
        with mock.patch.object(notifications, "simulate_email_send", side_effect=RuntimeError("down")):
            resp = self.client.post("/api/orders", json={"order": ORDER, "items": self.ITEMS})
        self.assertEqual(resp.status_code, 201)

    def test_order_validation(self):
        cases = [
            {**ORDER, "customer_phone": "12345"},
            {**ORDER, "customer_name": "   "},
            {**ORDER, "payment_method": "paypal"},
            {**ORDER, "customer_email": "not-an-email"},
            {k: v for k, v in ORDER.items() if k != "delivery_address"},
        ]
        for order in cases:
            resp = self.client.post("/api/orders", json={"order": order, "items": self.ITEMS})
            self.assertEqual(resp.status_code, 400, order)
        resp = self.client.post("/api/orders", json={"order": ORDER, "items": []})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(db["order"].count(), 0)

    def test_order_item_numbers_must_be_integers(self):
        line = {"product_id": "1", "quantity": 1, "price": 450000}
        cases = [
            {**line, "quantity": True},
            {**line, "quantity": "2"},
            {**line, "price": "450000"},
            {**line, "price": False},
        ]
        for item in cases:
            resp = self.client.post("/api/orders", json={"order": ORDER, "items": [item]})
            self.assertEqual(resp.status_code, 400, item)
        self.assertEqual(db["order"].count(), 0)

    def test_unknown_product_writes_nothing(self):
        items = self.ITEMS + [{"product_id": "404", "quantity": 1, "price": 1}]
        resp = self.client.post("/api/orders", json={"order": ORDER, "items": items})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(db["order"].count(), 0)
        self.assertEqual(db["order_item"].count(), 0)

    def test_missing_order(self):
        self.assertEqual(self.client.get("/api/orders/missing").status_code, 404)
        self.assertEqual(self.client.get("/api/orders/missing/items").status_code, 404)


if __name__ == "__main__":
    unittest.main(verbosity=2)
