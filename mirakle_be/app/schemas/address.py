from pydantic import BaseModel, Field
from typing import List, Optional


class AddressBase(BaseModel):
    name: Optional[str] = None
    phone: str = Field(min_length=1)
    line1: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None
    landmark: Optional[str] = None
    type: str = "HOME"
    isDefault: bool = Field(default=False)


class AddressCreate(AddressBase):
    pass


class AddressUpdate(AddressBase):
    pass


class AddressOut(AddressBase):
    id: int


class AddressListOut(BaseModel):
    message: Optional[str] = None
    addresses: List[AddressOut]
