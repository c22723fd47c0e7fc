from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Query
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional
import logging

from app.models.product import Product, ProductVariant
from app.models.user import User, get_db
from app.schemas.product import ProductCreate, ProductUpdate, ProductOut, VariantOut, VariantBase, StockToggle
from app.utils.errors import NotFound
from app.utils.security import require_admin
from app.utils.storage import save_multiple_upload_files, delete_media_files

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_LIMIT = 10


# Helpers

def _variant_out(v: ProductVariant) -> VariantOut:
    return VariantOut(
        id=v.id,
        size=v.size,
        color=v.color,
        price=float(v.price),
        discountPercent=v.discount_percent or 0,
        stock=v.stock or 0,
        sku=v.sku,
    )


def to_product_out(p: Product) -> ProductOut:
    return ProductOut(
        id=p.id,
        title=p.title,
        description=p.description or "",
        productType=p.product_type,
        category=p.category,
        subCategory=p.sub_category,
        brand=p.brand,
        keywords=p.keywords or [],
        isFeatured=bool(p.is_featured),
        isNewArrival=bool(p.is_new_arrival),
        isBestSeller=bool(p.is_best_seller),
        isOutOfStock=bool(p.is_out_of_stock),
        averageRating=p.average_rating or 0.0,
        numberOfReviews=p.number_of_reviews or 0,
        images=p.images or [],
        variants=[_variant_out(v) for v in p.variants],
    )


def _to_variant(v: VariantBase) -> ProductVariant:
    return ProductVariant(
        size=v.size,
        color=v.color,
        price=v.price,
        discount_percent=v.discountPercent,
        stock=v.stock,
        sku=v.sku or None,
    )


def _apply(product: Product, payload: ProductCreate) -> None:
    product.title = payload.title.strip()
    product.description = payload.description
    product.product_type = payload.productType
    product.category = payload.category
    product.sub_category = payload.subCategory
    product.brand = payload.brand
    product.keywords = [k.strip() for k in payload.keywords if k.strip()]
    product.is_featured = payload.isFeatured
    product.is_new_arrival = payload.isNewArrival
    product.is_best_seller = payload.isBestSeller
    product.variants = [_to_variant(v) for v in payload.variants]
    product.is_out_of_stock = all((v.stock or 0) <= 0 for v in payload.variants)


def _get_product(db: Session, id: int) -> Product:
    product = db.query(Product).filter(Product.id == id).first()
    if not product:
        raise NotFound("Product not found")
    return product


@router.get("/all-products", response_model=List[ProductOut])
def get_all_products(
    page: int = Query(0, ge=0),
    size: int = Query(50, ge=1, le=200),
    productType: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """List products with optional case-insensitive type, category and title filters."""
    query = db.query(Product)
    if productType:
        query = query.filter(Product.product_type.ilike(productType.strip()))
    if category:
        cats = [c.strip() for c in category.split(",") if c.strip()]
        if cats:
            query = query.filter(or_(*[Product.category.ilike(c) for c in cats]))
    if search:
        query = query.filter(Product.title.ilike(f"%{search.strip()}%"))
    products = query.order_by(Product.created_at.desc(), Product.id.desc()).offset(page * size).limit(size).all()
    return [to_product_out(p) for p in products]


@router.get("/search", response_model=List[ProductOut])
def search_products(query: str = Query("", description="Search term"), db: Session = Depends(get_db)):
    """Case-insensitive substring match on the title."""
    products = (
        db.query(Product)
        .filter(Product.title.ilike(f"%{query.strip()}%"))
        .order_by(Product.id.asc())
        .limit(SEARCH_LIMIT)
        .all()
    )
    return [to_product_out(p) for p in products]


@router.get("/{id}", response_model=ProductOut)
def get_product_by_id(id: int, db: Session = Depends(get_db)):
    return to_product_out(_get_product(db, id))


@router.post("", response_model=ProductOut, status_code=201)
def create_product(payload: ProductCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product = Product()
    _apply(product, payload)
    db.add(product)
    db.commit()
    db.refresh(product)
    logger.info("Product %s created by %s", product.id, admin.email)
    return to_product_out(product)


@router.put("/{id}", response_model=ProductOut)
def update_product(id: int, payload: ProductUpdate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product = _get_product(db, id)
    # Drop old variants first so reused SKUs don't collide with rows pending deletion
    product.variants = []
    db.flush()
    _apply(product, payload)
    db.commit()
    db.refresh(product)
    return to_product_out(product)


@router.post("/{id}/images", response_model=ProductOut)
def upload_product_images(
    id: int,
    images: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    product = _get_product(db, id)
    try:
        urls = save_multiple_upload_files(images, subdir="products")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    product.images = (product.images or []) + urls
    db.commit()
    db.refresh(product)
    return to_product_out(product)


@router.put("/{id}/toggle-stock", response_model=ProductOut)
def toggle_stock(
    id: int,
    payload: Optional[StockToggle] = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    product = _get_product(db, id)
    if payload is None or payload.isOutOfStock is None:
        product.is_out_of_stock = not product.is_out_of_stock
    else:
        product.is_out_of_stock = payload.isOutOfStock
    db.commit()
    db.refresh(product)
    logger.info("Product %s marked %s by %s", id, "out of stock" if product.is_out_of_stock else "in stock", admin.email)
    return to_product_out(product)


@router.delete("/{id}")
def delete_product(id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    product = _get_product(db, id)
    removed = delete_media_files(product.images)
    db.delete(product)
    db.commit()
    logger.info("Product %s deleted by %s (%d media file(s) removed)", id, admin.email, removed)
    return {"message": "Product deleted"}
