from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class BannerOut(BaseModel):
    id: int
    kind: str
    title: Optional[str] = None
    imageUrl: str
    linkUrl: Optional[str] = None
    createdAt: Optional[datetime] = None
