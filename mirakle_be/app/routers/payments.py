from fastapi import APIRouter

from app.schemas.payment import PaymentOrderCreate
from app.services.payments import create_razorpay_order


router = APIRouter()


@router.post("/create-order")
def create_order(payload: PaymentOrderCreate):
    return create_razorpay_order(payload.amount)
