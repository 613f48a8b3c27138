"""Project repository - Database operations for projects"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ...models import ExpertProfile, Project, Proposal
from ...utils.sanitization import sanitize_string
from .schemas import ProjectFilters


class ProjectRepository:
    """Repository for project database operations"""

    @staticmethod
    def search_projects(db: Session, filters: ProjectFilters) -> list[Project]:
        """Filtered projects, newest first; category containment is checked on loaded rows"""
        query = (
            db.query(Project)
            .options(joinedload(Project.client), selectinload(Project.proposals))
            .filter(Project.status == filters.status)
        )

        if filters.minBudget:
            query = query.filter(Project.budget_min >= filters.minBudget)
        if filters.maxBudget:
            query = query.filter(Project.budget_max <= filters.maxBudget)
        if filters.search:
            pattern = f"%{sanitize_string(filters.search)}%"
            query = query.filter(
                or_(Project.title.ilike(pattern), Project.description.ilike(pattern))
            )

        projects = query.order_by(Project.created_at.desc(), Project.id).all()

        if filters.categories:
            wanted = set(filters.categories)
            projects = [p for p in projects if wanted.issubset(p.categories or [])]

        return projects

    @staticmethod
    def get_project(db: Session, project_id: str) -> Optional[Project]:
        return (
            db.query(Project)
            .options(joinedload(Project.client))
            .filter(Project.id == project_id)
            .first()
        )

    @staticmethod
    def get_projects_by_client(db: Session, client_id: str) -> list[Project]:
        return (
            db.query(Project)
            .options(joinedload(Project.client), selectinload(Project.proposals))
            .filter(Project.client_id == client_id)
            .order_by(Project.created_at.desc())
            .all()
        )

    @staticmethod
    def get_proposals_for_project(db: Session, project_id: str) -> list[Proposal]:
        return (
            db.query(Proposal)
            .options(joinedload(Proposal.expert).joinedload(ExpertProfile.user))
            .filter(Proposal.project_id == project_id)
            .order_by(Proposal.created_at.desc())
            .all()
        )

    @staticmethod
    def create_project(db: Session, client_id: str, **project_data) -> Project:
        project = Project(client_id=client_id, **project_data)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project
