"""Expert router - FastAPI endpoints for browsing experts and profile management"""

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
    Availability,
    ExpertDetailResponse,
    ExpertFilters,
    ExpertProfileResponse,
    ExpertProfileUpdate,
    PortfolioItemCreate,
    PortfolioItemResponse,
    SortOption,
)
from .service import ExpertService

router = APIRouter(prefix="/experts", tags=["Experts"])


def get_expert_service(db: Session = Depends(get_db)) -> ExpertService:
    """Dependency injection for ExpertService"""
    return ExpertService(db)


def get_expert_filters(
    categories: Optional[list[str]] = Query(None),
    minRate: Optional[int] = Query(None, ge=0),
    maxRate: Optional[int] = Query(None, ge=0),
    location: Optional[str] = None,
    availability: Optional[Availability] = None,
    search: Optional[str] = None,
    sort: SortOption = "recommended",
    minRating: Optional[float] = Query(None, ge=0, le=5),
) -> ExpertFilters:
    try:
        return ExpertFilters(
            categories=categories,
            minRate=minRate,
            maxRate=maxRate,
            location=location,
            availability=availability,
            search=search,
            sort=sort,
            minRating=minRating,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()]) from e


@router.get("", response_model=PaginatedResponse[ExpertProfileResponse])
async def list_experts(
    filters: ExpertFilters = Depends(get_expert_filters),
    page: int = Query(PAGINATION["DEFAULT_PAGE"], ge=1),
    limit: int = Query(PAGINATION["DEFAULT_LIMIT"], ge=1, le=PAGINATION["MAX_LIMIT"]),
    service: ExpertService = Depends(get_expert_service),
):
    """Browse experts with filters, sorting and pagination"""
    return service.list_experts(filters, page, limit)


# /me routes are declared before /{expert_id} so "me" is not taken as an id


@router.get("/me", response_model=ExpertProfileResponse)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    service: ExpertService = Depends(get_expert_service),
):
    return service.get_own_profile(current_user)


@router.put("/me", response_model=ExpertProfileResponse)
async def upsert_my_profile(
    data: ExpertProfileUpdate,
    current_user: User = Depends(get_current_user),
    service: ExpertService = Depends(get_expert_service),
):
    return service.upsert_own_profile(current_user, data)


@router.post("/me/portfolio", response_model=PortfolioItemResponse, status_code=201)
async def add_portfolio_item(
    data: PortfolioItemCreate,
    current_user: User = Depends(get_current_user),
    service: ExpertService = Depends(get_expert_service),
):
    return service.add_portfolio_item(current_user, data)


@router.delete("/me/portfolio/{item_id}")
async def delete_portfolio_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    service: ExpertService = Depends(get_expert_service),
):
    service.delete_portfolio_item(current_user, item_id)
    return {"message": "Portfolio item deleted"}


@router.get("/{expert_id}", response_model=ExpertDetailResponse)
async def get_expert(
    expert_id: str,
    service: ExpertService = Depends(get_expert_service),
):
    """Expert profile with portfolio"""
    return service.get_expert_detail(expert_id)
