"""
Contract service - the escrow lifecycle after a proposal is accepted.

pending_payment -> in_progress (payment confirmed) -> pending_approval
(expert requests completion) -> completed (client approves). Either party
can cancel before payment or raise a dispute while work is underway.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import DISPUTABLE_CONTRACT_STATUSES
from ...models import Contract, ExpertProfile, Proposal, Transaction, User, utc_now
from ...utils.formatting import format_price
from ..notifications import create_notification
from .repository import ContractRepository

logger = logging.getLogger(__name__)


def contract_detail(contract: Contract) -> dict:
    """Flatten a contract with its project and both parties"""
    return {
        "id": contract.id,
        "project_id": contract.project_id,
        "client_id": contract.client_id,
        "expert_id": contract.expert_id,
        "proposal_id": contract.proposal_id,
        "agreed_amount": contract.agreed_amount,
        "platform_fee_rate": contract.platform_fee_rate,
        "platform_fee": contract.platform_fee,
        "expert_amount": contract.expert_amount,
        "status": contract.status,
        "started_at": contract.started_at,
        "completed_at": contract.completed_at,
        "completion_requested_at": contract.completion_requested_at,
        "deadline": contract.deadline,
        "created_at": contract.created_at,
        "project_title": contract.project.title,
        "project_description": contract.project.description,
        "client_name": contract.client.name,
        "client_email": contract.client.email,
        "client_profile_image_url": contract.client.profile_image_url,
        "expert_name": contract.expert.name,
        "expert_email": contract.expert.email,
        "expert_profile_image_url": contract.expert.profile_image_url,
    }


class ContractService:
    """Service layer for contract business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ContractRepository()

    def get_participant_contract(self, contract_id: str, user: User) -> Contract:
        contract = self.repo.get_contract(self.db, contract_id)
        if not contract:
            raise HTTPException(status_code=404, detail="Contract not found")
        if user.id not in (contract.client_id, contract.expert_id):
            raise HTTPException(status_code=403, detail="Not a party to this contract")
        return contract

    def list_contracts(self, user: User) -> list[dict]:
        return [contract_detail(c) for c in self.repo.get_contracts_for_user(self.db, user.id)]

    def get_contract_detail(self, contract_id: str, user: User) -> dict:
        return contract_detail(self.get_participant_contract(contract_id, user))

    def request_completion(self, contract_id: str, user: User) -> dict:
        contract = self.get_participant_contract(contract_id, user)
        if contract.expert_id != user.id:
            raise HTTPException(status_code=403, detail="Only the expert can request completion")
        if contract.status != "in_progress":
            raise HTTPException(
                status_code=400,
                detail=f"Cannot request completion for a contract that is {contract.status}",
            )

        contract.status = "pending_approval"
        contract.completion_requested_at = utc_now()

        create_notification(
            self.db,
            contract.client_id,
            "project_update",
            "작업 완료 승인을 요청했습니다",
            content=f"'{contract.project.title}' 작업이 완료되었습니다. 확인 후 승인해주세요.",
            link=f"/contracts/{contract.id}",
            related_id=contract.id,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(contract)
        logger.info(f"📦 Completion requested on contract {contract.id}")
        return contract_detail(contract)

    def approve_completion(self, contract_id: str, user: User) -> dict:
        """Client approval releases the escrow to the expert"""
        contract = self.get_participant_contract(contract_id, user)
        if contract.client_id != user.id:
            raise HTTPException(status_code=403, detail="Only the client can approve completion")
        if contract.status != "pending_approval":
            raise HTTPException(
                status_code=400,
                detail=f"Cannot approve a contract that is {contract.status}",
            )

        contract.status = "completed"
        contract.completed_at = utc_now()
        contract.project.status = "completed"

        profile = (
            self.db.query(ExpertProfile)
            .filter(ExpertProfile.user_id == contract.expert_id)
            .first()
        )
        if profile:
            profile.completed_projects = (profile.completed_projects or 0) + 1

        self.db.add_all(
            [
                Transaction(
                    contract_id=contract.id,
                    amount=contract.expert_amount,
                    type="release_to_expert",
                    status="completed",
                    payment_id=contract.payment_id,
                ),
                Transaction(
                    contract_id=contract.id,
                    amount=contract.platform_fee,
                    type="platform_fee",
                    status="completed",
                    payment_id=contract.payment_id,
                ),
            ]
        )

        create_notification(
            self.db,
            contract.expert_id,
            "project_update",
            "작업이 승인되었습니다",
            content=f"'{contract.project.title}' 작업이 승인되어 {format_price(contract.expert_amount)}이 정산됩니다.",
            link=f"/contracts/{contract.id}",
            related_id=contract.id,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(contract)
        logger.info(
            f"✅ Contract {contract.id} completed: {format_price(contract.expert_amount)} released, "
            f"{format_price(contract.platform_fee)} platform fee"
        )
        return contract_detail(contract)

    def cancel_contract(self, contract_id: str, user: User) -> dict:
        contract = self.get_participant_contract(contract_id, user)
        if contract.status != "pending_payment":
            raise HTTPException(
                status_code=400, detail="Only contracts awaiting payment can be cancelled"
            )

        contract.status = "cancelled"
        contract.project.status = "open"
        if contract.proposal_id:
            proposal = self.db.query(Proposal).filter(Proposal.id == contract.proposal_id).first()
            if proposal and proposal.status == "accepted":
                proposal.status = "withdrawn"

        self.db.commit()
        self.db.refresh(contract)
        logger.info(f"Contract {contract.id} cancelled by {user.id}, project reopened")
        return contract_detail(contract)

    def dispute_contract(self, contract_id: str, user: User) -> dict:
        contract = self.get_participant_contract(contract_id, user)
        if contract.status not in DISPUTABLE_CONTRACT_STATUSES:
            raise HTTPException(
                status_code=400, detail=f"Cannot dispute a contract that is {contract.status}"
            )

        contract.status = "disputed"
        self.db.commit()
        self.db.refresh(contract)
        logger.warning(f"⚠️ Contract {contract.id} disputed by {user.id}")
        return contract_detail(contract)

    def get_earnings(self, user: User) -> dict:
        contracts = self.repo.get_expert_contracts(self.db, user.id)
        now = utc_now()

        completed = [c for c in contracts if c.status == "completed"]
        pending = [c for c in contracts if c.status in ("in_progress", "pending_approval")]
        this_month = [
            c
            for c in completed
            if c.completed_at
            and c.completed_at.year == now.year
            and c.completed_at.month == now.month
        ]

        return {
            "totalEarnings": sum(c.expert_amount for c in completed),
            "pendingEarnings": sum(c.expert_amount for c in pending),
            "thisMonthEarnings": sum(c.expert_amount for c in this_month),
            "completedContracts": len(completed),
        }
