# app/services/sales.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from app.config import PRODUCTS, USERS


def _fetch_many(db, collection: str, ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """Load documents by id in one round trip. Missing ids are left out."""
    refs = [db.collection(collection).document(i) for i in dict.fromkeys(ids) if i]
    if not refs:
        return {}
    found: Dict[str, Dict[str, Any]] = {}
    for snap in db.get_all(refs):
        if snap.exists:
            found[snap.id] = snap.to_dict() or {}
    return found


def _product_ref(pid: str, product: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if product is None:
        return None
    return {
        "id": pid,
        "title": product.get("title", ""),
        "price": float(product.get("price", 0) or 0),
    }


def _buyer_ref(uid: str, user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"id": uid, "name": user.get("name"), "email": user.get("email")}


def sales_view(db, ledger: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Join each ledger record to its product and buyer.
    `total` is the current unit price times the units bought, None when the product is gone.
    """
    records = list(ledger.get("products", []))
    products = _fetch_many(db, PRODUCTS, (str(r.get("product_id", "")) for r in records))
    buyers = _fetch_many(db, USERS, (str(r.get("buyer_id", "")) for r in records))

    out: List[Dict[str, Any]] = []
    for r in records:
        pid = str(r.get("product_id", ""))
        buyer_id = str(r.get("buyer_id", ""))
        qty = int(r.get("buy_quantity", 0) or 0)
        product = _product_ref(pid, products.get(pid))
        out.append({
            "product_id": pid,
            "buy_quantity": qty,
            "buyer_id": buyer_id,
            "product": product,
            "buyer": _buyer_ref(buyer_id, buyers.get(buyer_id)),
            "total": round(product["price"] * qty, 2) if product else None,
        })
    return out
