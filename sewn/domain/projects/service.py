"""Project service - Business logic for client projects"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import CLIENT_USER_TYPES, PROJECT_OWNER_TRANSITIONS
from ...models import Project, User
from ...utils.pagination import paginate
from ...utils.sanitization import sanitize_string
from .repository import ProjectRepository
from .schemas import ProjectCreate, ProjectFilters, ProjectUpdate

logger = logging.getLogger(__name__)


class ProjectService:
    """Service layer for project business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProjectRepository()

    def list_projects(self, filters: ProjectFilters, page: int, limit: int) -> dict:
        return paginate(self.repo.search_projects(self.db, filters), page, limit)

    def get_project(self, project_id: str) -> Project:
        project = self.repo.get_project(self.db, project_id)
        if not project:
            raise HTTPException(status_code=404, detail="Project not found")
        return project

    def get_project_detail(self, project_id: str) -> dict:
        project = self.get_project(project_id)
        return {
            "project": project,
            "proposals": self.repo.get_proposals_for_project(self.db, project.id),
        }

    def get_my_projects(self, user: User) -> list[Project]:
        return self.repo.get_projects_by_client(self.db, user.id)

    def create_project(self, data: ProjectCreate, user: User) -> Project:
        if user.user_type not in CLIENT_USER_TYPES:
            raise HTTPException(status_code=403, detail="Only client accounts can post projects")

        project = self.repo.create_project(
            self.db,
            user.id,
            title=sanitize_string(data.title),
            description=sanitize_string(data.description),
            categories=data.categories,
            budget_min=data.budget_min,
            budget_max=data.budget_max,
            deadline=data.deadline,
            location=data.location,
            attachment_urls=data.attachment_urls,
            status=data.status,
        )
        logger.info(f"📌 Project {project.id} created by user {user.id} ({project.status})")
        return project

    def update_project(self, project_id: str, data: ProjectUpdate, user: User) -> Project:
        project = self.get_project(project_id)
        if project.client_id != user.id:
            raise HTTPException(status_code=403, detail="Only the project owner can edit it")
        if project.status not in ("draft", "open"):
            raise HTTPException(
                status_code=400, detail=f"Cannot edit a project that is {project.status}"
            )

        if data.status is not None and data.status != project.status:
            allowed = PROJECT_OWNER_TRANSITIONS.get(project.status, ())
            if data.status not in allowed:
                raise HTTPException(
                    status_code=400,
                    detail=f"Cannot change project status from {project.status} to {data.status}",
                )
            project.status = data.status

        if data.title is not None:
            project.title = sanitize_string(data.title)
        if data.description is not None:
            project.description = sanitize_string(data.description)
        if data.categories is not None:
            project.categories = data.categories
        if data.budget_min is not None:
            project.budget_min = data.budget_min
        if data.budget_max is not None:
            project.budget_max = data.budget_max
        if data.deadline is not None:
            project.deadline = data.deadline
        if data.location is not None:
            project.location = data.location
        if data.attachment_urls is not None:
            project.attachment_urls = data.attachment_urls

        if (
            project.budget_min is not None
            and project.budget_max is not None
            and project.budget_min > project.budget_max
        ):
            self.db.rollback()
            raise HTTPException(status_code=400, detail="budget_min must not exceed budget_max")

        self.db.commit()
        self.db.refresh(project)
        return project
