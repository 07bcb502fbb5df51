"""
app/schemas/product.py - Pydantic models for seller products.
"""
from typing import Optional

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    """Common product fields for creation."""
    title: str = Field(..., min_length=1, description="Product title")
    price: float = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., ge=0, description="Units in stock")


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    """Schema for updating product fields (owner only)."""
    title: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    quantity: Optional[int] = Field(None, ge=0)


class ProductOut(ProductBase):
    id: str
    owner_id: str
