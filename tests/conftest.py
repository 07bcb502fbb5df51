import pytest
from fastapi.testclient import TestClient

from app.config import CARTS, ORDERS, PRODUCTS, USERS, get_db
from app.core.auth import get_principal
from app.main import app
from app.schemas.principal import Principal
from fakes import FakeFirestore

BUYER = Principal(uid="buyer-1", role="user", email="bea@example.com", display_name="Bea Buyer")
SELLER = Principal(uid="seller-1", role="user", email="sam@example.com", display_name="Sam Seller")
OTHER_SELLER = Principal(uid="seller-2", role="user", email="olga@example.com", display_name="Olga Seller")


@pytest.fixture()
def db():
    return FakeFirestore()


@pytest.fixture()
def login():
    current = {"principal": BUYER}

    def _login(principal):
        current["principal"] = principal
        return principal

    _login.current = current
    return _login


@pytest.fixture()
def client(db, login):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_principal] = lambda: login.current["principal"]
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_account(db, principal, cart=True, ledger=True, lines=None):
    db.seed(USERS, principal.uid, {
        "name": principal.display_name,
        "email": principal.email,
        "role": "customer",
        "is_guest": False,
    })
    if cart:
        db.seed(CARTS, principal.uid, {"owner_id": principal.uid, "products": lines or []})
    if ledger:
        db.seed(ORDERS, principal.uid, {"owner_id": principal.uid, "products": []})


def make_product(db, product_id, title, price, quantity, owner=SELLER):
    db.seed(PRODUCTS, product_id, {
        "title": title,
        "price": price,
        "quantity": quantity,
        "owner_id": owner.uid,
    })


@pytest.fixture()
def shop(db):
    """Buyer, two sellers and three products."""
    make_account(db, BUYER)
    make_account(db, SELLER)
    make_account(db, OTHER_SELLER)
    make_product(db, "lamp", "Desk Lamp", 25.0, 5)
    make_product(db, "mug", "Ceramic Mug", 12.5, 10)
    make_product(db, "rug", "Wool Rug", 80.0, 1, owner=OTHER_SELLER)
    return db
