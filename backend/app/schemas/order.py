"""
app/schemas/order.py - Pydantic models for the per-seller sales ledger.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class Purchase(BaseModel):
    product_id: str
    buy_quantity: int = Field(..., ge=1)
    buyer_id: str


class OrderLedger(BaseModel):
    owner_id: str = Field(..., description="Seller uid")
    products: List[Purchase] = Field(default_factory=list)


class ProductRef(BaseModel):
    id: str
    title: str
    price: float


class BuyerRef(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class SaleOut(BaseModel):
    """One ledger line joined to its product and buyer. Either side is null once deleted."""
    product_id: str
    buy_quantity: int
    buyer_id: str
    product: Optional[ProductRef] = None
    buyer: Optional[BuyerRef] = None
    total: Optional[float] = None


class OrdersOut(BaseModel):
    orders: OrderLedger
    sales: List[SaleOut] = Field(default_factory=list)
