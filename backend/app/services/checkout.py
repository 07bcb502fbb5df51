# app/services/checkout.py
"""
Buy every line of a cart in a single Firestore transaction.

Inside the transaction all reads happen first (cart, products, seller ledgers), then:
- each product's `quantity` is decremented by the units bought,
- a `{product_id, buy_quantity, buyer_id}` record is appended to the seller's ledger
  (`orders/{seller_uid}`, created when missing),
- the cart is emptied.

If any line fails validation nothing is written. Firestore retries the whole function
on contention, so stock is re-checked against the committed values each attempt.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP, transactional

from app.config import CARTS, ORDERS, PRODUCTS

logger = logging.getLogger("shop.checkout")


class PurchaseError(Exception):
    """A cart cannot be bought. The message is safe to show to the buyer."""


def stock_message(product: Dict[str, Any]) -> str:
    return f"Product {product.get('title')} has {int(product.get('quantity', 0) or 0)} units available only."


def line_product_id(line: Dict[str, Any]) -> str:
    """Stored product id of a cart line, "" when the line has none."""
    pid = line.get("product_id")
    return str(pid) if pid else ""


def _units_by_product(lines: List[Dict[str, Any]]) -> Dict[str, int]:
    units: Dict[str, int] = {}
    for line in lines:
        pid = line_product_id(line)
        units[pid] = units.get(pid, 0) + int(line.get("selected_quantity", 0) or 0)
    return units


def check_lines(lines: List[Dict[str, Any]], products: Dict[str, Optional[Dict[str, Any]]]) -> None:
    """
    Raise PurchaseError for the first line that cannot be bought: no product id, product
    gone, product without a seller to record the sale for, or more units than in stock.
    """
    for pid, wanted in _units_by_product(lines).items():
        if not pid:
            raise PurchaseError("A product in your cart is not available.")
        product = products.get(pid)
        if product is None or not product.get("owner_id"):
            raise PurchaseError(f"Product with ID {pid} is not available.")
        if wanted > int(product.get("quantity", 0) or 0):
            raise PurchaseError(stock_message(product))


def _buy_lines(transaction, db, uid: str) -> Dict[str, Any]:
    cart_ref = db.collection(CARTS).document(uid)
    cart_snap = cart_ref.get(transaction=transaction)
    if not cart_snap.exists:
        raise PurchaseError("Cart does not exist.")
    cart = cart_snap.to_dict() or {}
    lines = list(cart.get("products", []))
    if not lines:
        return cart

    units = _units_by_product(lines)
    product_refs = {pid: db.collection(PRODUCTS).document(pid) for pid in units if pid}
    products: Dict[str, Optional[Dict[str, Any]]] = {}
    for pid, ref in product_refs.items():
        snap = ref.get(transaction=transaction)
        products[pid] = (snap.to_dict() or {}) if snap.exists else None

    check_lines(lines, products)

    ledgers: Dict[str, Optional[Dict[str, Any]]] = {}
    ledger_refs = {}
    for product in products.values():
        seller = product["owner_id"]
        if seller in ledger_refs:
            continue
        ref = db.collection(ORDERS).document(seller)
        snap = ref.get(transaction=transaction)
        ledger_refs[seller] = ref
        ledgers[seller] = (snap.to_dict() or {}) if snap.exists else None

    # writes
    for pid, bought in units.items():
        product = products[pid]
        transaction.update(product_refs[pid], {
            "quantity": int(product.get("quantity", 0) or 0) - bought,
            "updated_at": SERVER_TIMESTAMP,
        })

    appended: Dict[str, List[Dict[str, Any]]] = {}
    for line in lines:
        pid = line_product_id(line)
        appended.setdefault(products[pid]["owner_id"], []).append({
            "product_id": pid,
            "buy_quantity": int(line.get("selected_quantity", 0) or 0),
            "buyer_id": uid,
        })

    for seller, records in appended.items():
        ledger = ledgers.get(seller)
        if ledger is None:
            transaction.set(ledger_refs[seller], {"owner_id": seller, "products": records})
        else:
            transaction.update(ledger_refs[seller], {"products": list(ledger.get("products", [])) + records})

    transaction.update(cart_ref, {"products": []})
    cart["products"] = []
    return cart


def buy_cart(db, uid: str) -> Dict[str, Any]:
    """
    Purchase the whole cart of `uid` and return the (now empty) cart.
    Raises PurchaseError when the cart is missing or a line cannot be bought.
    """
    cart = transactional(_buy_lines)(db.transaction(), db, uid)
    logger.info("Cart of %s bought", uid)
    return cart
