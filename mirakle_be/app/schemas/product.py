from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class VariantBase(BaseModel):
    size: str
    color: str
    price: float = Field(ge=0)
    discountPercent: int = Field(default=0, ge=0, le=100)
    stock: int = Field(ge=0)
    sku: Optional[str] = None


class VariantOut(VariantBase):
    id: int


class ProductBase(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    productType: Optional[str] = None
    category: Optional[str] = None
    subCategory: Optional[str] = None
    brand: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    isFeatured: bool = False
    isNewArrival: bool = False
    isBestSeller: bool = False


class ProductCreate(ProductBase):
    variants: List[VariantBase] = Field(min_length=1)


class ProductUpdate(ProductCreate):
    pass


class ProductOut(ProductBase):
    id: int
    variants: List[VariantOut]
    images: List[str] = Field(default_factory=list)
    isOutOfStock: bool = False
    averageRating: float = 0.0
    numberOfReviews: int = 0

    model_config = ConfigDict(from_attributes=True)


class StockToggle(BaseModel):
    # Omitted: flip the current flag
    isOutOfStock: Optional[bool] = None
