from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

# Upper bound for a single cart line, also after merging
MAX_QUANTITY = 10_000


class CartItemIn(BaseModel):
    productId: int
    variantId: Optional[int] = None
    # Defaults to 1 when omitted; JSON booleans are not counts
    quantity: Optional[int] = Field(default=None, gt=0, le=MAX_QUANTITY, strict=True)


class CartSaveIn(BaseModel):
    items: List[CartItemIn]


class CartItemOut(BaseModel):
    productId: int
    variantId: Optional[int] = None
    quantity: int


class CartOut(BaseModel):
    userId: int
    items: List[CartItemOut]
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class CartSaveOut(BaseModel):
    message: str
    cart: CartOut
