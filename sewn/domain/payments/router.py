"""Payment router - checkout parameters and gateway confirmation"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import CheckoutResponse, PaymentConfirmResponse
from .service import PaymentConfirmationError, PaymentService
from .toss_client import TossPaymentsClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payment", tags=["Payments"])

confirm_rate_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="payment_confirm")


def get_toss_client() -> TossPaymentsClient:
    return TossPaymentsClient()


def get_payment_service(
    db: Session = Depends(get_db),
    toss: TossPaymentsClient = Depends(get_toss_client),
) -> PaymentService:
    """Dependency injection for PaymentService"""
    return PaymentService(db, toss)


@router.get("/checkout/{contract_id}", response_model=CheckoutResponse)
async def get_checkout(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: PaymentService = Depends(get_payment_service),
):
    """Widget parameters for paying a contract that awaits payment"""
    return service.get_checkout(contract_id, current_user)


@router.post(
    "/confirm",
    response_model=PaymentConfirmResponse,
    dependencies=[Depends(confirm_rate_limit)],
)
async def confirm_payment(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
):
    """
    Approve a payment after the gateway redirect.
    The paymentKey from the redirect is the proof of payment, so no session is required.
    """
    try:
        payload = await request.json()
        if not isinstance(payload, dict):
            raise PaymentConfirmationError("Missing required payment parameters.")
        return await service.confirm_payment(
            payload.get("paymentKey"), payload.get("orderId"), payload.get("amount")
        )
    except PaymentConfirmationError as e:
        return JSONResponse(
            status_code=e.status_code, content={"success": False, "error": e.message}
        )
    except Exception as e:
        logger.error(f"❌ Payment confirmation error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "An error occurred while processing the payment."},
        )
