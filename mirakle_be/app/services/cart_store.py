"""Per-user cart persistence.

A user has at most one cart. ``reconcile`` merges incoming line items into it
(quantities accumulate for a matching ``(product_id, variant_id)`` pair),
``replace`` overwrites it, ``clear`` deletes it. A missing cart is a normal
state: ``fetch`` returns ``None`` and never creates one.
"""
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError as SchemaError
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.cart import Cart, CartItem
from app.models.product import Product, ProductVariant
from app.schemas.cart import MAX_QUANTITY, CartItemIn
from app.utils.errors import InternalError, MirakleError, NotFound, ValidationError

logger = logging.getLogger(__name__)

LineItem = Union[CartItemIn, Mapping[str, Any]]


def _coerce_items(items: Iterable[LineItem]) -> List[CartItemIn]:
    if items is None:
        raise ValidationError("Invalid item data")
    parsed = []
    for item in items:
        if isinstance(item, CartItemIn):
            parsed.append(item)
            continue
        try:
            parsed.append(CartItemIn.model_validate(item))
        except SchemaError as exc:
            raise ValidationError(f"Invalid item data: {exc.errors()[0]['msg']}") from exc
    return parsed


def _quantity(item: CartItemIn) -> int:
    return item.quantity if item.quantity is not None else 1


class CartStore:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, user_id: int, for_update: bool = False) -> Optional[Cart]:
        query = self.db.query(Cart).filter(Cart.user_id == user_id)
        if for_update:
            # Serializes concurrent writers for the same user (no-op on SQLite)
            query = query.with_for_update()
        return query.first()

    @staticmethod
    def _require_user(user_id: Optional[int]) -> None:
        if user_id is None:
            raise ValidationError("User id is required")

    def _save(self, user_id: int, apply: Callable[[], Cart]) -> Cart:
        """Run ``apply`` and commit, retrying once on a uniqueness conflict."""
        for attempt in (1, 2):
            try:
                cart = apply()
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if attempt == 2:
                    raise ValidationError(f"Cart rejected by storage: {exc.orig}") from exc
                logger.warning("Cart write for user %s conflicted; retrying", user_id)
                continue
            except (DataError, OverflowError) as exc:
                # Value out of range for the column
                self.db.rollback()
                raise ValidationError("Cart rejected by storage: value out of range") from exc
            except MirakleError:
                self.db.rollback()
                raise
            except SQLAlchemyError as exc:
                self.db.rollback()
                logger.exception("Cart write for user %s failed", user_id)
                raise InternalError("Server error") from exc
            self.db.refresh(cart)
            return cart

    def fetch(self, user_id: int) -> Optional[Cart]:
        self._require_user(user_id)
        return self._load(user_id)

    def reconcile(self, user_id: int, items: Iterable[LineItem]) -> Cart:
        """Merge ``items`` into the user's cart, creating the cart if needed.

        Not idempotent: submitting the same item twice doubles its quantity.
        """
        self._require_user(user_id)
        incoming = _coerce_items(items)

        def apply() -> Cart:
            cart = self._load(user_id, for_update=True)
            if cart is None:
                cart = Cart(user_id=user_id)
                self.db.add(cart)
            by_key = {line.key: line for line in cart.items}
            for item in incoming:
                key = (item.productId, item.variantId)
                line = by_key.get(key)
                if line is not None:
                    if line.quantity + _quantity(item) > MAX_QUANTITY:
                        raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}")
                    line.quantity += _quantity(item)
                    line.updated_at = datetime.utcnow()
                else:
                    line = CartItem(product_id=item.productId, variant_id=item.variantId, quantity=_quantity(item))
                    cart.items.append(line)
                    by_key[key] = line
            cart.updated_at = datetime.utcnow()
            return cart

        cart = self._save(user_id, apply)
        logger.info("Reconciled %d item(s) into cart of user %s", len(incoming), user_id)
        return cart

    def replace(self, user_id: int, items: Iterable[LineItem]) -> Cart:
        """Overwrite the user's cart with exactly ``items``."""
        self._require_user(user_id)
        incoming = _coerce_items(items)
        keys = [(i.productId, i.variantId) for i in incoming]
        if len(set(keys)) != len(keys):
            raise ValidationError("Duplicate product/variant in cart items")

        def apply() -> Cart:
            cart = self._load(user_id, for_update=True)
            if cart is None:
                cart = Cart(user_id=user_id)
                self.db.add(cart)
            cart.items.clear()
            # Flush the deletes first so re-added pairs don't trip the unique constraint
            self.db.flush()
            for item in incoming:
                cart.items.append(
                    CartItem(product_id=item.productId, variant_id=item.variantId, quantity=_quantity(item))
                )
            cart.updated_at = datetime.utcnow()
            return cart

        cart = self._save(user_id, apply)
        logger.info("Replaced cart of user %s with %d item(s)", user_id, len(incoming))
        return cart

    def add_item(self, user_id: int, item: LineItem) -> Cart:
        """Merge a single catalog item after checking the product and variant exist."""
        self._require_user(user_id)
        (parsed,) = _coerce_items([item])
        product = self.db.query(Product).filter(Product.id == parsed.productId).first()
        if not product:
            raise NotFound("Product not found")
        if parsed.variantId is not None:
            variant = (
                self.db.query(ProductVariant)
                .filter(ProductVariant.id == parsed.variantId, ProductVariant.product_id == product.id)
                .first()
            )
            if not variant:
                raise NotFound("Variant not found")
        return self.reconcile(user_id, [parsed])

    def clear(self, user_id: int) -> None:
        self._require_user(user_id)
        try:
            cart = self._load(user_id)
            if cart is not None:
                self.db.delete(cart)
                self.db.commit()
                logger.info("Cleared cart of user %s", user_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Clearing cart of user %s failed", user_id)
            raise InternalError("Server error") from exc

    def repair(self, cart: Cart) -> bool:
        """Merge duplicate lines and drop non-positive ones. Returns True if changed.

        The caller commits.
        """
        changed = False
        seen = {}
        for line in list(cart.items):
            if line.quantity is None or line.quantity <= 0:
                cart.items.remove(line)
                changed = True
                continue
            first = seen.get(line.key)
            if first is None:
                seen[line.key] = line
                continue
            first.quantity += line.quantity
            cart.items.remove(line)
            changed = True
        if changed:
            cart.updated_at = datetime.utcnow()
        return changed
