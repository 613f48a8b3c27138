"""
Proposal service - submitting proposals and the owner's accept/reject decision.
Accepting a proposal opens a contract that waits for the client's payment.
"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...config import PLATFORM_FEE_RATE
from ...models import Contract, Project, Proposal, User
from ...utils.formatting import format_price
from ...utils.sanitization import sanitize_string
from ..experts.repository import ExpertRepository
from ..notifications import create_notification
from .repository import ProposalRepository
from .schemas import ProposalCreate

logger = logging.getLogger(__name__)


class ProposalService:
    """Service layer for proposal business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProposalRepository()

    def _get_proposal(self, proposal_id: str) -> Proposal:
        proposal = self.repo.get_proposal(self.db, proposal_id)
        if not proposal:
            raise HTTPException(status_code=404, detail="Proposal not found")
        return proposal

    def _get_owned_pending(self, proposal_id: str, user: User) -> Proposal:
        """A pending proposal on one of the caller's projects"""
        proposal = self._get_proposal(proposal_id)
        if proposal.project.client_id != user.id:
            raise HTTPException(
                status_code=403, detail="Only the project owner can decide on proposals"
            )
        if proposal.status != "pending":
            raise HTTPException(
                status_code=400, detail=f"Proposal is already {proposal.status}"
            )
        return proposal

    def submit_proposal(self, project_id: str, data: ProposalCreate, user: User) -> Proposal:
        expert = ExpertRepository.get_expert_by_user(self.db, user.id)
        if not expert:
            raise HTTPException(
                status_code=400, detail="An expert profile is required to submit proposals"
            )

        project = self.db.query(Project).filter(Project.id == project_id).first()
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        if project.client_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot propose on your own project")
        if project.status != "open":
            raise HTTPException(status_code=400, detail="Project is not accepting proposals")

        if self.repo.find_existing(self.db, project.id, expert.id):
            raise HTTPException(
                status_code=409, detail="You have already submitted a proposal for this project"
            )

        proposal = Proposal(
            project_id=project.id,
            expert_id=expert.id,
            cover_letter=sanitize_string(data.cover_letter),
            proposed_rate=data.proposed_rate,
            estimated_duration=sanitize_string(data.estimated_duration),
            status="pending",
        )
        self.db.add(proposal)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(
                status_code=409, detail="You have already submitted a proposal for this project"
            ) from e

        create_notification(
            self.db,
            project.client_id,
            "proposal_received",
            "새로운 제안서가 도착했습니다",
            content=f"{user.name or '전문가'}님이 '{project.title}'에 {format_price(data.proposed_rate)}을 제안했습니다.",
            link=f"/projects/{project.id}",
            related_id=proposal.id,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(proposal)

        logger.info(f"📨 Proposal {proposal.id} submitted on project {project.id} by expert {expert.id}")
        return proposal

    def accept_proposal(self, proposal_id: str, user: User) -> dict:
        proposal = self._get_owned_pending(proposal_id, user)
        project = proposal.project
        if project.status != "open":
            raise HTTPException(
                status_code=400, detail=f"Cannot accept proposals on a project that is {project.status}"
            )

        proposal.status = "accepted"
        project.status = "in_progress"

        contract = Contract(
            project_id=project.id,
            client_id=project.client_id,
            expert_id=proposal.expert.user_id,
            proposal_id=proposal.id,
            agreed_amount=proposal.proposed_rate,
            platform_fee_rate=PLATFORM_FEE_RATE,
            status="pending_payment",
            deadline=project.deadline,
        )
        self.db.add(contract)
        self.db.flush()

        create_notification(
            self.db,
            proposal.expert.user_id,
            "proposal_accepted",
            "제안서가 수락되었습니다",
            content=f"'{project.title}' 프로젝트 제안이 수락되었습니다. 결제가 완료되면 작업을 시작할 수 있습니다.",
            link=f"/contracts/{contract.id}",
            related_id=contract.id,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(proposal)

        logger.info(
            f"🤝 Proposal {proposal.id} accepted, contract {contract.id} awaiting payment "
            f"of {format_price(contract.agreed_amount)}"
        )
        return {"proposal": proposal, "contractId": contract.id}

    def reject_proposal(self, proposal_id: str, user: User) -> Proposal:
        proposal = self._get_owned_pending(proposal_id, user)
        proposal.status = "rejected"

        create_notification(
            self.db,
            proposal.expert.user_id,
            "proposal_rejected",
            "제안서가 거절되었습니다",
            content=f"'{proposal.project.title}' 프로젝트 제안이 거절되었습니다.",
            link=f"/projects/{proposal.project_id}",
            related_id=proposal.id,
            commit=False,
        )
        self.db.commit()
        self.db.refresh(proposal)
        logger.info(f"Proposal {proposal.id} rejected")
        return proposal

    def withdraw_proposal(self, proposal_id: str, user: User) -> Proposal:
        proposal = self._get_proposal(proposal_id)
        if proposal.expert.user_id != user.id:
            raise HTTPException(status_code=403, detail="Only the proposing expert can withdraw it")
        if proposal.status != "pending":
            raise HTTPException(
                status_code=400, detail=f"Proposal is already {proposal.status}"
            )

        proposal.status = "withdrawn"
        self.db.commit()
        self.db.refresh(proposal)
        return proposal

    def get_my_proposals(self, user: User) -> list[Proposal]:
        expert = ExpertRepository.get_expert_by_user(self.db, user.id)
        if not expert:
            return []
        return self.repo.get_proposals_by_expert(self.db, expert.id)
