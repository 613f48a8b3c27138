"""Contract domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ContractResponse(BaseModel):
    id: str
    project_id: str
    client_id: str
    expert_id: str
    proposal_id: Optional[str] = None
    agreed_amount: int
    platform_fee_rate: float
    platform_fee: int
    expert_amount: int
    status: str
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completion_requested_at: Optional[datetime] = None
    deadline: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ContractDetailResponse(ContractResponse):
    """Contract with the project and both parties flattened in"""

    project_title: str
    project_description: str
    client_name: Optional[str] = None
    client_email: str
    client_profile_image_url: Optional[str] = None
    expert_name: Optional[str] = None
    expert_email: str
    expert_profile_image_url: Optional[str] = None


class EarningsResponse(BaseModel):
    totalEarnings: int
    pendingEarnings: int
    thisMonthEarnings: int
    completedContracts: int
