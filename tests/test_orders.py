from app.config import ORDERS, PRODUCTS, USERS
from conftest import BUYER, SELLER, make_account


class TestListMySales:
    def test_missing_ledger(self, client, db, login):
        login(SELLER)
        make_account(db, SELLER, ledger=False)
        response = client.get("/api/orders")
        assert response.status_code == 400
        assert response.json() == {"detail": "Order table does not exist."}

    def test_new_seller_has_empty_ledger(self, client, login):
        login(SELLER)
        response = client.get("/api/orders")
        assert response.status_code == 200
        assert response.json() == {"orders": {"owner_id": SELLER.uid, "products": []}, "sales": []}

    def test_sales_joined_to_product_and_buyer(self, client, shop, login):
        client.post("/api/carts", json={"product_id": "lamp", "selected_quantity": 2})
        client.post("/api/carts", json={"product_id": "mug", "selected_quantity": 1})
        assert client.delete("/api/carts/buy").status_code == 200

        login(SELLER)
        data = client.get("/api/orders").json()
        assert data["orders"]["products"] == [
            {"product_id": "lamp", "buy_quantity": 2, "buyer_id": BUYER.uid},
            {"product_id": "mug", "buy_quantity": 1, "buyer_id": BUYER.uid},
        ]
        lamp, mug = data["sales"]
        assert lamp["product"] == {"id": "lamp", "title": "Desk Lamp", "price": 25.0}
        assert lamp["buyer"] == {"id": BUYER.uid, "name": "Bea Buyer", "email": "bea@example.com"}
        assert lamp["total"] == 50.0
        assert mug["total"] == 12.5

    def test_deleted_product_and_buyer_show_as_null(self, client, shop, login):
        shop.seed(ORDERS, SELLER.uid, {"owner_id": SELLER.uid, "products": [
            {"product_id": "lamp", "buy_quantity": 1, "buyer_id": "ghost"},
            {"product_id": "retired", "buy_quantity": 4, "buyer_id": BUYER.uid},
        ]})
        del shop.data[USERS][BUYER.uid]

        login(SELLER)
        sales = client.get("/api/orders").json()["sales"]
        assert sales[0]["product"]["id"] == "lamp"
        assert sales[0]["buyer"] is None
        assert sales[1]["product"] is None
        assert sales[1]["total"] is None
        assert sales[1]["buyer"] is None

    def test_only_own_ledger(self, client, shop, login):
        shop.seed(ORDERS, SELLER.uid, {"owner_id": SELLER.uid, "products": [
            {"product_id": "lamp", "buy_quantity": 1, "buyer_id": BUYER.uid},
        ]})
        response = client.get("/api/orders")
        assert response.status_code == 200
        assert response.json()["orders"] == {"owner_id": BUYER.uid, "products": []}
        assert shop.doc(PRODUCTS, "lamp")["quantity"] == 5
