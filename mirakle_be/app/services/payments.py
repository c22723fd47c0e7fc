"""Razorpay order creation."""
import logging
import time
from typing import Any, Dict

import httpx

from app.config import get_settings
from app.utils.errors import InternalError

logger = logging.getLogger(__name__)


def _timeout() -> httpx.Timeout:
    settings = get_settings()
    return httpx.Timeout(settings.HTTP_TIMEOUT_SECONDS, connect=5.0)


def to_paise(amount: float) -> int:
    return int(round(amount * 100))


def create_razorpay_order(amount: float) -> Dict[str, Any]:
    """Create a gateway order for ``amount`` rupees and return Razorpay's JSON."""
    settings = get_settings()
    payload = {
        "amount": to_paise(amount),
        "currency": "INR",
        "receipt": f"receipt_{int(time.time() * 1000)}",
    }
    try:
        response = httpx.post(
            f"{settings.RAZORPAY_API_URL}/orders",
            json=payload,
            auth=(settings.RAZORPAY_KEY_ID, settings.RAZORPAY_KEY_SECRET),
            timeout=_timeout(),
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error("Razorpay rejected order (status=%s): %s", e.response.status_code, e.response.text)
        raise InternalError("Failed to create Razorpay order") from e
    except httpx.RequestError as e:
        logger.error("Razorpay request failed: %s", e)
        raise InternalError("Failed to create Razorpay order") from e
    order = response.json()
    logger.info("Created Razorpay order %s for %s paise", order.get("id"), payload["amount"])
    return order
