from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.models.cart import Cart
from app.models.user import User, get_db
from app.schemas.cart import CartItemIn, CartItemOut, CartOut, CartSaveIn, CartSaveOut
from app.services.cart_store import CartStore
from app.utils.security import get_current_user


router = APIRouter()


def _items_out(cart: Cart) -> List[CartItemOut]:
    return [
        CartItemOut(productId=i.product_id, variantId=i.variant_id, quantity=i.quantity)
        for i in cart.items
    ]


def _serialize_cart(cart: Cart) -> CartOut:
    return CartOut(
        userId=cart.user_id,
        items=_items_out(cart),
        createdAt=cart.created_at,
        updatedAt=cart.updated_at,
    )


# Get Cart (items only; empty list when the user has no cart)
@router.get("", response_model=List[CartItemOut])
def get_cart(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    cart = CartStore(db).fetch(user.id)
    return _items_out(cart) if cart else []


# Save Cart: merge incoming items into the stored cart
@router.post("", response_model=CartSaveOut)
def save_cart(payload: CartSaveIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    cart = CartStore(db).reconcile(user.id, payload.items)
    return CartSaveOut(message="Cart saved successfully", cart=_serialize_cart(cart))


# Replace Cart: overwrite the stored items verbatim
@router.put("", response_model=CartSaveOut)
def replace_cart(payload: CartSaveIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    cart = CartStore(db).replace(user.id, payload.items)
    return CartSaveOut(message="Cart replaced", cart=_serialize_cart(cart))


# Add a single catalog item (product and variant must exist)
@router.post("/items", response_model=CartSaveOut)
def add_to_cart(payload: CartItemIn, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    cart = CartStore(db).add_item(user.id, payload)
    return CartSaveOut(message="Added to cart", cart=_serialize_cart(cart))


# Clear Cart
@router.delete("")
def clear_cart(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    CartStore(db).clear(user.id)
    return {"message": "Cart cleared"}
