"""
Payment service - escrow deposit on contract payment.

Confirmation is called after the gateway redirects the payer back with a
paymentKey. The contract is checked against the order before the gateway
approval; once the gateway has taken the money the contract must move to
in_progress even when the ledger insert or notification fails.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import FRONTEND_URL, TOSS_CLIENT_KEY
from ...models import Contract, Transaction, User, utc_now
from ..notifications import create_notification
from .toss_client import TossPaymentsClient, TossPaymentsError, format_payment_amount

logger = logging.getLogger(__name__)

ORDER_ID_PREFIX = "contract_"


class PaymentConfirmationError(Exception):
    """A confirmation failure reported to the caller as {success: false, error}"""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def order_id_for(contract_id: str) -> str:
    return f"{ORDER_ID_PREFIX}{contract_id}"


def contract_id_from_order(order_id: str) -> str:
    return order_id.replace(ORDER_ID_PREFIX, "", 1)


class PaymentService:
    """Service layer for contract payments"""

    def __init__(self, db: Session, toss: TossPaymentsClient):
        self.db = db
        self.toss = toss

    def get_checkout(self, contract_id: str, user: User) -> dict:
        contract = self.db.query(Contract).filter(Contract.id == contract_id).first()
        if not contract:
            raise HTTPException(status_code=404, detail="Contract not found")
        if contract.client_id != user.id:
            raise HTTPException(status_code=403, detail="Only the client can pay for this contract")
        if contract.status != "pending_payment":
            raise HTTPException(status_code=400, detail="Contract is not awaiting payment")

        return {
            "clientKey": TOSS_CLIENT_KEY,
            "orderId": order_id_for(contract.id),
            "orderName": contract.project.title,
            "amount": contract.agreed_amount,
            "customerName": user.name or user.email,
            "customerEmail": user.email,
            "successUrl": f"{FRONTEND_URL}/payment/success",
            "failUrl": f"{FRONTEND_URL}/payment/fail",
        }

    async def confirm_payment(self, payment_key, order_id, amount) -> dict:
        if not payment_key or not order_id or not amount:
            raise PaymentConfirmationError("Missing required payment parameters.")

        contract_id = contract_id_from_order(str(order_id))
        contract = self.db.query(Contract).filter(Contract.id == contract_id).first()
        if not contract:
            raise PaymentConfirmationError("Contract not found.", status_code=404)

        if contract.status != "pending_payment":
            raise PaymentConfirmationError("This contract has already been processed.")

        if contract.agreed_amount != amount:
            logger.warning(
                f"⚠️ Amount mismatch for contract {contract.id}: "
                f"expected {contract.agreed_amount}, got {amount}"
            )
            raise PaymentConfirmationError("Payment amount does not match the contract.")

        try:
            await self.toss.confirm_payment(payment_key, order_id, amount)
        except TossPaymentsError as e:
            raise PaymentConfirmationError(e.message) from e

        self._record_escrow_deposit(contract, payment_key, amount)

        try:
            contract.status = "in_progress"
            contract.started_at = utc_now()
            contract.payment_key = payment_key
            contract.payment_id = payment_key
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Contract update failed after payment {payment_key}: {e}")
            raise PaymentConfirmationError(
                "Failed to update the contract status.", status_code=500
            ) from e

        self._notify_expert(contract)

        logger.info(
            f"✅ Escrow deposit of {format_payment_amount(amount)} received for contract {contract.id}"
        )
        return {
            "success": True,
            "contractId": contract.id,
            "message": "Payment completed.",
        }

    def _record_escrow_deposit(self, contract: Contract, payment_key: str, amount: int) -> None:
        try:
            self.db.add(
                Transaction(
                    contract_id=contract.id,
                    amount=amount,
                    type="escrow_deposit",
                    status="completed",
                    payment_method="card",
                    payment_id=payment_key,
                )
            )
            self.db.commit()
        except SQLAlchemyError as e:
            # The gateway has already captured the payment
            self.db.rollback()
            logger.error(f"❌ Transaction record error for contract {contract.id}: {e}")

    def _notify_expert(self, contract: Contract) -> None:
        try:
            create_notification(
                self.db,
                contract.expert_id,
                "project_update",
                "결제가 완료되었습니다",
                content=f"'{contract.project.title}' 프로젝트 결제가 완료되었습니다. 작업을 시작해주세요.",
                link=f"/contracts/{contract.id}",
                related_id=contract.id,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to notify expert {contract.expert_id} about payment: {e}")
