"""
app/routers/products.py
Seller inventory. Products live in the flat `products` collection; `owner_id` is the seller uid
and `quantity` is the live stock count carts are validated against.

- GET /api/products              all products
- GET /api/products/mine         caller's products
- GET /api/products/{id}         one product (404 if missing)
- POST /api/products             create, caller becomes owner
- PATCH /api/products/{id}       owner-only partial update
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from app.config import PRODUCTS, get_db
from app.core.security import get_current_user, require_non_guest
from app.schemas.product import ProductCreate, ProductOut, ProductUpdate

router = APIRouter(prefix="/api/products", tags=["Products"])


def _doc_to_out(snap) -> dict:
    d = snap.to_dict() or {}
    return {
        "id": snap.id,
        "title": d.get("title", ""),
        "price": float(d.get("price", 0) or 0),
        "quantity": int(d.get("quantity", 0) or 0),
        "owner_id": d.get("owner_id", ""),
    }


@router.get("", response_model=List[ProductOut], summary="List Products")
def list_products(db=Depends(get_db)):
    return [_doc_to_out(doc) for doc in db.collection(PRODUCTS).stream()]


@router.get("/mine", response_model=List[ProductOut], summary="List My Products")
def list_my_products(current_user: dict = Depends(get_current_user), db=Depends(get_db)):
    q = db.collection(PRODUCTS).where(filter=FieldFilter("owner_id", "==", current_user["id"]))
    return [_doc_to_out(doc) for doc in q.stream()]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: str, db=Depends(get_db)):
    snap = db.collection(PRODUCTS).document(product_id).get()
    if not snap.exists:
        raise HTTPException(status_code=404, detail="Product not found")
    return _doc_to_out(snap)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    current_user: dict = Depends(require_non_guest),
    db=Depends(get_db),
):
    ref = db.collection(PRODUCTS).document()
    ref.set({
        **payload.model_dump(),
        "owner_id": current_user["id"],
        "created_at": SERVER_TIMESTAMP,
        "updated_at": SERVER_TIMESTAMP,
    })
    return _doc_to_out(ref.get())


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    current_user: dict = Depends(require_non_guest),
    db=Depends(get_db),
):
    ref = db.collection(PRODUCTS).document(product_id)
    snap = ref.get()
    if not snap.exists:
        raise HTTPException(status_code=404, detail="Product not found")
    if (snap.to_dict() or {}).get("owner_id") != current_user["id"]:
        raise HTTPException(status_code=403, detail="Only the seller can change this product.")

    patch = payload.model_dump(exclude_none=True)
    if patch:
        patch["updated_at"] = SERVER_TIMESTAMP
        ref.update(patch)
    return _doc_to_out(ref.get())
