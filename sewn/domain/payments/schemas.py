from pydantic import BaseModel


class CheckoutResponse(BaseModel):
    """Parameters for the client-side payment widget"""

    clientKey: str
    orderId: str
    orderName: str
    amount: int
    customerName: str
    customerEmail: str
    successUrl: str
    failUrl: str


class PaymentConfirmResponse(BaseModel):
    success: bool
    contractId: str
    message: str
