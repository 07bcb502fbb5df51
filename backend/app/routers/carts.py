"""
app/routers/carts.py
Cart endpoints (logged-in users). Every line is checked against live seller inventory.

Behavior
- GET returns the stored cart plus each line joined to its seller product; lines whose product
  was deleted by the seller are pruned from the stored cart.
- POST adds a line (merging into an existing line for the same product).
- PUT sets the quantity of a line already in the cart.
- DELETE /buy purchases every line in one transaction (see app/services/checkout.py).
- DELETE /{product_id} removes one line.

Errors are 400 with a `detail` message; the cart itself is never created here.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app.config import CARTS, PRODUCTS, get_db
from app.core.security import get_current_user
from app.schemas.cart import AddCartLine, UpdateCartLine
from app.services.checkout import PurchaseError, buy_cart, line_product_id, stock_message

logger = logging.getLogger("shop.carts")

router = APIRouter(prefix="/api/carts", tags=["Cart"])

CART_MISSING = "Cart does not exist."
NOT_ON_SELLER = "Product does not exist on Seller end."
NOT_IN_CART = "Product does not exist in your cart."


# ---------- carts persistence ----------
def _load_cart(db, uid: str) -> Dict[str, Any]:
    snap = db.collection(CARTS).document(uid).get()
    if not snap.exists:
        raise HTTPException(status_code=400, detail=CART_MISSING)
    data = snap.to_dict() or {}
    data["products"] = list(data.get("products", []))
    return data


def _save_lines(db, uid: str, cart: Dict[str, Any], lines: List[Dict[str, Any]]) -> Dict[str, Any]:
    db.collection(CARTS).document(uid).update({"products": lines})
    cart["products"] = lines
    return cart


def _load_product(db, product_id: str) -> Optional[Dict[str, Any]]:
    snap = db.collection(PRODUCTS).document(product_id).get()
    if not snap.exists:
        return None
    product = snap.to_dict() or {}
    product["id"] = snap.id
    return product


def _seller_product_or_400(db, product_id: str, wanted: int) -> Dict[str, Any]:
    product = _load_product(db, product_id)
    if product is None:
        raise HTTPException(status_code=400, detail=NOT_ON_SELLER)
    if wanted > int(product.get("quantity", 0) or 0):
        raise HTTPException(status_code=400, detail=stock_message(product))
    return product


def _find_line(lines: List[Dict[str, Any]], product_id: str) -> Optional[Dict[str, Any]]:
    for line in lines:
        if line_product_id(line) == product_id:
            return line
    return None


# ---------- routes ----------
@router.get("")
@router.get("/", include_in_schema=False)
def get_cart(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    """
    Return the cart and its lines joined to live seller products.
    """
    uid = current_user["id"]
    cart = _load_cart(db, uid)
    lines = cart["products"]

    ids = {line_product_id(line) for line in lines} - {""}
    refs = [db.collection(PRODUCTS).document(pid) for pid in ids]
    catalog: Dict[str, Dict[str, Any]] = {}
    if refs:
        for snap in db.get_all(refs):
            if snap.exists:
                catalog[snap.id] = {**(snap.to_dict() or {}), "id": snap.id}

    kept: List[Dict[str, Any]] = []
    cart_products: List[Dict[str, Any]] = []
    for line in lines:
        pid = line_product_id(line)
        product = catalog.get(pid)
        if product is None:
            logger.info("Pruning product %s from cart of %s", pid, uid)
            continue
        kept.append(line)
        cart_products.append({**product, "selected_quantity": int(line.get("selected_quantity", 0) or 0)})

    if len(kept) != len(lines):
        cart = _save_lines(db, uid, cart, kept)

    return {"cart": cart, "cart_products": cart_products}


@router.post("")
@router.post("/", include_in_schema=False)
def add_cart_product(
    payload: AddCartLine,
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """
    Add a product to the cart. A product already in the cart has its quantity increased.
    """
    uid = current_user["id"]
    cart = _load_cart(db, uid)
    lines = cart["products"]

    existing = _find_line(lines, payload.product_id)
    wanted = payload.selected_quantity
    if existing is not None:
        wanted += int(existing.get("selected_quantity", 0) or 0)

    _seller_product_or_400(db, payload.product_id, wanted)

    if existing is not None:
        existing["selected_quantity"] = wanted
    else:
        lines.append({"product_id": payload.product_id, "selected_quantity": wanted})
    return {"cart": _save_lines(db, uid, cart, lines)}


@router.put("/{product_id}")
def update_cart_product(
    product_id: str,
    payload: UpdateCartLine,
    current_user: dict = Depends(get_current_user),
    db=Depends(get_db),
):
    """Set the selected quantity of a product already in the cart."""
    uid = current_user["id"]
    cart = _load_cart(db, uid)
    lines = cart["products"]

    line = _find_line(lines, product_id)
    if line is None:
        raise HTTPException(status_code=400, detail=NOT_IN_CART)

    _seller_product_or_400(db, product_id, payload.selected_quantity)

    line["selected_quantity"] = payload.selected_quantity
    return {"cart": _save_lines(db, uid, cart, lines)}


@router.delete("/buy")
def buy_cart_products(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    """
    Buy every product in the cart: decrement seller stock, record the sale in each
    seller's ledger and empty the cart, all or nothing.
    """
    uid = current_user["id"]
    try:
        cart = buy_cart(db, uid)
    except PurchaseError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"cart": cart}


@router.delete("/{product_id}")
def remove_cart_product(product_id: str, current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    """Remove one product line from the cart."""
    uid = current_user["id"]
    cart = _load_cart(db, uid)
    lines = cart["products"]
    if _find_line(lines, product_id) is None:
        raise HTTPException(status_code=400, detail=NOT_IN_CART)
    kept = [line for line in lines if line_product_id(line) != product_id]
    return {"cart": _save_lines(db, uid, cart, kept)}
