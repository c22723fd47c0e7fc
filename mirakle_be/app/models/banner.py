from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime
from app.models.user import Base

BANNER_KINDS = ("home", "offer", "category", "product_type")


class Banner(Base):
    __tablename__ = "banners"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(20), nullable=False, index=True)  # one of BANNER_KINDS
    title = Column(String(255), nullable=True)
    image_url = Column(String(255), nullable=False)
    link_url = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
