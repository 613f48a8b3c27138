from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import ReviewCreate, ReviewResponse
from .service import ReviewService

router = APIRouter(tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


@router.post("/contracts/{contract_id}/reviews", response_model=ReviewResponse, status_code=201)
async def create_review(
    contract_id: str,
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Review the other party of a completed contract"""
    return service.create_review(contract_id, data, current_user)


@router.get("/users/{user_id}/reviews", response_model=list[ReviewResponse])
async def list_user_reviews(
    user_id: str,
    service: ReviewService = Depends(get_review_service),
):
    return service.list_reviews_for_user(user_id)
