"""
app/routers/orders.py
Seller sales ledger. One `orders/{seller_uid}` document aggregates every purchase of that
seller's products; GET returns it raw and joined to product and buyer records.
"""
from fastapi import APIRouter, Depends, HTTPException

from app.config import ORDERS, get_db
from app.core.security import get_current_user
from app.schemas.order import OrdersOut
from app.services.sales import sales_view

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=OrdersOut)
@router.get("/", response_model=OrdersOut, include_in_schema=False)
def list_my_sales(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    uid = current_user["id"]
    snap = db.collection(ORDERS).document(uid).get()
    if not snap.exists:
        raise HTTPException(status_code=400, detail="Order table does not exist.")

    ledger = snap.to_dict() or {}
    ledger.setdefault("owner_id", uid)
    ledger["products"] = list(ledger.get("products", []))
    return {"orders": ledger, "sales": sales_view(db, ledger)}
