"""Proposal domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProposalCreate(BaseModel):
    cover_letter: str = Field(..., min_length=1, max_length=10000)
    proposed_rate: int = Field(..., gt=0)
    estimated_duration: Optional[str] = Field(None, max_length=100)


class ProposalResponse(BaseModel):
    id: str
    project_id: str
    expert_id: str
    cover_letter: str
    proposed_rate: int
    estimated_duration: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class ProposalProjectSummary(BaseModel):
    id: str
    title: str
    status: str
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    deadline: Optional[datetime] = None

    class Config:
        from_attributes = True


class MyProposalResponse(ProposalResponse):
    project: ProposalProjectSummary


class ProposalAcceptResponse(BaseModel):
    proposal: ProposalResponse
    contractId: str
