"""Dashboard service - per-role summaries for the signed-in user"""

import logging

from sqlalchemy.orm import Session, joinedload

from ...models import ExpertProfile, Project, Proposal, User
from ..experts.repository import ExpertRepository
from ..projects.repository import ProjectRepository
from ..projects.schemas import ProjectFilters
from ..proposals.repository import ProposalRepository

logger = logging.getLogger(__name__)

RECENT_PROPOSALS_LIMIT = 5
RECOMMENDED_PROJECTS_LIMIT = 5


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_client_dashboard(self, user: User) -> dict:
        projects = ProjectRepository.get_projects_by_client(self.db, user.id)
        proposals = [p for project in projects for p in project.proposals]

        recent = []
        if projects:
            recent = (
                self.db.query(Proposal)
                .options(
                    joinedload(Proposal.project),
                    joinedload(Proposal.expert).joinedload(ExpertProfile.user),
                )
                .filter(Proposal.project_id.in_([p.id for p in projects]))
                .order_by(Proposal.created_at.desc())
                .limit(RECENT_PROPOSALS_LIMIT)
                .all()
            )

        stats = {
            "totalProjects": len(projects),
            "openProjects": sum(1 for p in projects if p.status == "open"),
            "inProgressProjects": sum(1 for p in projects if p.status == "in_progress"),
            "completedProjects": sum(1 for p in projects if p.status == "completed"),
            "totalProposalsReceived": len(proposals),
            "pendingProposals": sum(1 for p in proposals if p.status == "pending"),
        }
        return {"stats": stats, "myProjects": projects, "recentProposals": recent}

    def get_expert_dashboard(self, user: User) -> dict:
        profile = ExpertRepository.get_expert_by_user(self.db, user.id)
        if not profile:
            logger.debug(f"User {user.id} has no expert profile, returning empty dashboard")
            return {
                "stats": {},
                "expertProfile": None,
                "myProposals": [],
                "recommendedProjects": [],
            }

        proposals = ProposalRepository.get_proposals_by_expert(self.db, profile.id)
        accepted = [p for p in proposals if p.status == "accepted"]
        completed = [p for p in accepted if p.project.status == "completed"]

        stats = {
            "totalProposals": len(proposals),
            "pendingProposals": sum(1 for p in proposals if p.status == "pending"),
            "acceptedProposals": len(accepted),
            "rejectedProposals": sum(1 for p in proposals if p.status == "rejected"),
            "inProgressProjects": sum(1 for p in accepted if p.project.status == "in_progress"),
            "completedProjects": len(completed),
            "totalEarnings": sum(p.proposed_rate or 0 for p in completed),
            "averageRating": profile.rating_avg or 0,
            "reviewCount": profile.review_count or 0,
        }

        return {
            "stats": stats,
            "expertProfile": profile,
            "myProposals": proposals,
            "recommendedProjects": self._recommended_projects(profile),
        }

    def _recommended_projects(self, profile: ExpertProfile) -> list[Project]:
        """Newest open projects in the expert's primary category"""
        if not profile.categories:
            return []
        filters = ProjectFilters(categories=[profile.categories[0]], status="open")
        projects = ProjectRepository.search_projects(self.db, filters)
        return projects[:RECOMMENDED_PROJECTS_LIMIT]
