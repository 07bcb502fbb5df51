from app.config import PRODUCTS
from app.schemas.principal import Principal
from conftest import OTHER_SELLER, SELLER


class TestProducts:
    def test_create_and_fetch(self, client, db, login):
        login(SELLER)
        response = client.post("/api/products", json={"title": "Stool", "price": 40, "quantity": 3})
        assert response.status_code == 201
        created = response.json()
        assert created["owner_id"] == SELLER.uid
        assert created["quantity"] == 3
        assert db.doc(PRODUCTS, created["id"])["title"] == "Stool"

        fetched = client.get(f"/api/products/{created['id']}").json()
        assert fetched == created

    def test_list_and_mine(self, client, shop, login):
        assert {p["id"] for p in client.get("/api/products").json()} == {"lamp", "mug", "rug"}
        login(OTHER_SELLER)
        assert [p["id"] for p in client.get("/api/products/mine").json()] == ["rug"]

    def test_unknown_product(self, client, shop):
        response = client.get("/api/products/nope")
        assert response.status_code == 404

    def test_owner_restocks(self, client, shop, login):
        login(SELLER)
        response = client.patch("/api/products/lamp", json={"quantity": 12})
        assert response.status_code == 200
        assert response.json()["quantity"] == 12
        assert shop.doc(PRODUCTS, "lamp")["title"] == "Desk Lamp"

    def test_other_seller_cannot_update(self, client, shop, login):
        login(OTHER_SELLER)
        response = client.patch("/api/products/lamp", json={"price": 1})
        assert response.status_code == 403
        assert shop.doc(PRODUCTS, "lamp")["price"] == 25.0

    def test_guest_cannot_sell(self, client, login):
        login(Principal(uid="anon-1", role="guest"))
        response = client.post("/api/products", json={"title": "Stool", "price": 40, "quantity": 3})
        assert response.status_code == 403

    def test_negative_stock_rejected(self, client, login):
        login(SELLER)
        response = client.post("/api/products", json={"title": "Stool", "price": 40, "quantity": -1})
        assert response.status_code == 400
