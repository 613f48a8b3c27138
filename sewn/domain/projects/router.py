"""Project router - FastAPI endpoints for projects"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...constants import PAGINATION
from ...database import get_db
from ...models import User
from ...schemas import PaginatedResponse
from .schemas import (
    ProjectCreate,
    ProjectDetailResponse,
    ProjectFilters,
    ProjectResponse,
    ProjectStatus,
    ProjectUpdate,
)
from .service import ProjectService

router = APIRouter(prefix="/projects", tags=["Projects"])


def get_project_service(db: Session = Depends(get_db)) -> ProjectService:
    """Dependency injection for ProjectService"""
    return ProjectService(db)


def get_project_filters(
    categories: Optional[list[str]] = Query(None),
    minBudget: Optional[int] = Query(None, ge=0),
    maxBudget: Optional[int] = Query(None, ge=0),
    status: ProjectStatus = "open",
    search: Optional[str] = None,
) -> ProjectFilters:
    try:
        return ProjectFilters(
            categories=categories,
            minBudget=minBudget,
            maxBudget=maxBudget,
            status=status,
            search=search,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()]) from e


@router.get("", response_model=PaginatedResponse[ProjectResponse])
async def list_projects(
    filters: ProjectFilters = Depends(get_project_filters),
    page: int = Query(PAGINATION["DEFAULT_PAGE"], ge=1),
    limit: int = Query(PAGINATION["DEFAULT_LIMIT"], ge=1, le=PAGINATION["MAX_LIMIT"]),
    service: ProjectService = Depends(get_project_service),
):
    """Browse projects (open ones by default)"""
    return service.list_projects(filters, page, limit)


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return service.create_project(data, current_user)


@router.get("/mine", response_model=list[ProjectResponse])
async def get_my_projects(
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return service.get_my_projects(current_user)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    service: ProjectService = Depends(get_project_service),
):
    """Project with its proposals"""
    return service.get_project_detail(project_id)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    return service.update_project(project_id, data, current_user)
