"""Dashboard schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..experts.schemas import ExpertProfileResponse
from ..projects.schemas import ProjectResponse, ProposalExpertSummary
from ..proposals.schemas import MyProposalResponse


class ClientStats(BaseModel):
    totalProjects: int = 0
    openProjects: int = 0
    inProgressProjects: int = 0
    completedProjects: int = 0
    totalProposalsReceived: int = 0
    pendingProposals: int = 0


class RecentProposalProject(BaseModel):
    title: str

    class Config:
        from_attributes = True


class RecentProposal(BaseModel):
    id: str
    project_id: str
    status: str
    created_at: datetime
    proposed_rate: int
    expert: ProposalExpertSummary
    project: RecentProposalProject

    class Config:
        from_attributes = True


class ClientDashboardResponse(BaseModel):
    stats: ClientStats
    myProjects: list[ProjectResponse]
    recentProposals: list[RecentProposal]


class ExpertStats(BaseModel):
    totalProposals: int = 0
    pendingProposals: int = 0
    acceptedProposals: int = 0
    rejectedProposals: int = 0
    inProgressProjects: int = 0
    completedProjects: int = 0
    totalEarnings: int = 0
    averageRating: float = 0
    reviewCount: int = 0


class ExpertDashboardResponse(BaseModel):
    stats: ExpertStats
    expertProfile: Optional[ExpertProfileResponse] = None
    myProposals: list[MyProposalResponse]
    recommendedProjects: list[ProjectResponse]
