"""Proposal router - submitting and deciding on proposals"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import MyProposalResponse, ProposalAcceptResponse, ProposalCreate, ProposalResponse
from .service import ProposalService

router = APIRouter(tags=["Proposals"])


def get_proposal_service(db: Session = Depends(get_db)) -> ProposalService:
    """Dependency injection for ProposalService"""
    return ProposalService(db)


@router.post("/projects/{project_id}/proposals", response_model=ProposalResponse, status_code=201)
async def submit_proposal(
    project_id: str,
    data: ProposalCreate,
    current_user: User = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    return service.submit_proposal(project_id, data, current_user)


@router.get("/proposals/mine", response_model=list[MyProposalResponse])
async def get_my_proposals(
    current_user: User = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    return service.get_my_proposals(current_user)


@router.post("/proposals/{proposal_id}/accept", response_model=ProposalAcceptResponse)
async def accept_proposal(
    proposal_id: str,
    current_user: User = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    """Accept a proposal and open a contract awaiting payment"""
    return service.accept_proposal(proposal_id, current_user)


@router.post("/proposals/{proposal_id}/reject", response_model=ProposalResponse)
async def reject_proposal(
    proposal_id: str,
    current_user: User = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    return service.reject_proposal(proposal_id, current_user)


@router.post("/proposals/{proposal_id}/withdraw", response_model=ProposalResponse)
async def withdraw_proposal(
    proposal_id: str,
    current_user: User = Depends(get_current_user),
    service: ProposalService = Depends(get_proposal_service),
):
    return service.withdraw_proposal(proposal_id, current_user)
