"""Contract router - FastAPI endpoints for contracts"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ContractDetailResponse, EarningsResponse
from .service import ContractService

router = APIRouter(prefix="/contracts", tags=["Contracts"])


def get_contract_service(db: Session = Depends(get_db)) -> ContractService:
    """Dependency injection for ContractService"""
    return ContractService(db)


@router.get("", response_model=list[ContractDetailResponse])
async def list_contracts(
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Contracts where the user is the client or the expert"""
    return service.list_contracts(current_user)


@router.get("/earnings", response_model=EarningsResponse)
async def get_earnings(
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    return service.get_earnings(current_user)


@router.get("/{contract_id}", response_model=ContractDetailResponse)
async def get_contract(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    return service.get_contract_detail(contract_id, current_user)


@router.post("/{contract_id}/request-completion", response_model=ContractDetailResponse)
async def request_completion(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    return service.request_completion(contract_id, current_user)


@router.post("/{contract_id}/approve-completion", response_model=ContractDetailResponse)
async def approve_completion(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    return service.approve_completion(contract_id, current_user)


@router.post("/{contract_id}/cancel", response_model=ContractDetailResponse)
async def cancel_contract(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    return service.cancel_contract(contract_id, current_user)


@router.post("/{contract_id}/dispute", response_model=ContractDetailResponse)
async def dispute_contract(
    contract_id: str,
    current_user: User = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    return service.dispute_contract(contract_id, current_user)
