"""Toss Payments client - server-side payment approval"""

import base64
import logging
from typing import Optional

import httpx

from ...config import TOSS_API_BASE_URL, TOSS_SECRET_KEY, TOSS_TIMEOUT_SECONDS
from ...utils.formatting import format_price

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Payment approval failed."
TRANSPORT_FAILURE_MESSAGE = "Error while approving payment."


class TossPaymentsError(Exception):
    """Raised when Toss refuses or cannot process a payment approval"""

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


def format_payment_amount(amount: int) -> str:
    """KRW amount as shown on payment screens, e.g. ₩1,000,000"""
    return format_price(amount)


class TossPaymentsClient:
    """Thin async wrapper over the Toss Payments REST API"""

    def __init__(
        self,
        secret_key: str = TOSS_SECRET_KEY,
        base_url: str = TOSS_API_BASE_URL,
        timeout: float = TOSS_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        encoded = base64.b64encode(f"{secret_key}:".encode()).decode()
        self.headers = {
            "Authorization": f"Basic {encoded}",
            "Content-Type": "application/json",
        }

    async def confirm_payment(self, payment_key: str, order_id: str, amount: int) -> dict:
        """
        Approve a payment the customer authorized in the checkout widget.

        Returns:
            The gateway's payment object

        Raises:
            TossPaymentsError: the gateway refused the approval or was unreachable
        """
        url = f"{self.base_url}/v1/payments/confirm"
        body = {"paymentKey": payment_key, "orderId": order_id, "amount": amount}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=body, headers=self.headers)
        except httpx.HTTPError as e:
            logger.error(f"❌ Toss confirm request failed for order {order_id}: {e}")
            raise TossPaymentsError(TRANSPORT_FAILURE_MESSAGE) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.is_success:
            message = data.get("message") or DEFAULT_FAILURE_MESSAGE
            logger.error(
                f"❌ Toss refused order {order_id} ({response.status_code}): "
                f"{data.get('code')} {message}"
            )
            raise TossPaymentsError(
                message, code=data.get("code"), status_code=response.status_code
            )

        logger.info(f"💳 Toss approved order {order_id} for {format_payment_amount(amount)}")
        return data
