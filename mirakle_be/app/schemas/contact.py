from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal
from datetime import datetime


class ContactIn(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    message: str = Field(min_length=1)


class ContactOut(BaseModel):
    id: int
    name: str
    email: str
    message: str
    status: str
    createdAt: datetime


class ContactListOut(BaseModel):
    success: bool = True
    messages: List[ContactOut]


class ContactStatusUpdate(BaseModel):
    status: Literal["unread", "read", "responded"]
