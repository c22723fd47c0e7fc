"""Repair stored carts that break the one-line-per-product/variant rule.

Usage: python -m app.scripts.clean_cart_data
"""
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from app.config import get_settings
from app.models.user import Base, SessionLocal, engine
from app.models.cart import Cart
from app.services.cart_store import CartStore

logger = logging.getLogger("app.scripts.clean_cart_data")


def clean_carts(db) -> int:
    """Repair every cart in ``db`` and commit. Returns the number of carts changed."""
    store = CartStore(db)
    carts = db.query(Cart).order_by(Cart.id).all()
    logger.info("Found %d carts to check", len(carts))
    cleaned = 0
    for cart in carts:
        if store.repair(cart):
            cleaned += 1
            logger.info("Repaired cart %s for user %s", cart.id, cart.user_id)
    db.commit()
    return cleaned


def main() -> int:
    logging.basicConfig(level=get_settings().LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        cleaned = clean_carts(db)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Cart cleanup failed")
        return 1
    finally:
        db.close()
    logger.info("Cleanup complete, repaired %d carts", cleaned)
    return 0


if __name__ == "__main__":
    sys.exit(main())
