from sqlalchemy import Column, Integer, String, Float, Numeric, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from datetime import datetime
from app.models.user import Base

# JSONB on Postgres, plain JSON elsewhere (SQLite in local runs)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    description = Column(String(2000), nullable=False, default="")
    product_type = Column(String(100), index=True)  # e.g. "Electronics", "Clothing"
    category = Column(String(100), index=True)
    sub_category = Column(String(100))
    brand = Column(String(100))
    keywords = Column(JSONType)  # list of search keywords
    images = Column(JSONType)  # list of /media URLs
    is_featured = Column(Boolean, default=False)
    is_new_arrival = Column(Boolean, default=False)
    is_best_seller = Column(Boolean, default=False)
    is_out_of_stock = Column(Boolean, default=False)
    average_rating = Column(Float, default=0.0)
    number_of_reviews = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.id",
    )


class ProductVariant(Base):
    __tablename__ = "product_variants"
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    size = Column(String(50), nullable=False)
    color = Column(String(50), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    discount_percent = Column(Integer, default=0)
    stock = Column(Integer, nullable=False, default=0)
    sku = Column(String(100), unique=True, nullable=True)

    product = relationship("Product", back_populates="variants")
