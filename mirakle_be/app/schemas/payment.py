from pydantic import BaseModel, Field


class PaymentOrderCreate(BaseModel):
    # Amount in INR (rupees)
    amount: float = Field(gt=0)
