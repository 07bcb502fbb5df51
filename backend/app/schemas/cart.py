"""
app/schemas/cart.py - Pydantic models for Cart.
"""
from pydantic import BaseModel, Field, field_validator


class AddCartLine(BaseModel):
    """Body of POST /api/carts."""
    product_id: str = Field(..., description="Please enter product ID.")
    selected_quantity: int = Field(..., ge=1, le=10000, description="Please enter valid quantity.")

    @field_validator("product_id")
    @classmethod
    def _clean_pid(cls, v: str) -> str:
        v = (v or "").strip()
        for ch in ("\u200b", "\u200c", "\u200d", "\ufeff", "\xa0"):
            v = v.replace(ch, "")
        if not v:
            raise ValueError("Please enter product ID.")
        return v


class UpdateCartLine(BaseModel):
    """Body of PUT /api/carts/{product_id}."""
    selected_quantity: int = Field(..., ge=1, le=10000, description="Please enter valid quantity.")
