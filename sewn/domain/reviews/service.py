"""Review service - post-completion reviews and expert rating aggregates"""

import logging

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ...models import Contract, ExpertProfile, Review, User
from ...utils.sanitization import sanitize_string
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def _refresh_expert_rating(self, user_id: str) -> None:
        """Recompute rating_avg/review_count from every review the user received"""
        profile = self.db.query(ExpertProfile).filter(ExpertProfile.user_id == user_id).first()
        if not profile:
            return

        average, count = (
            self.db.query(func.avg(Review.rating), func.count(Review.id))
            .filter(Review.reviewee_id == user_id)
            .one()
        )
        profile.rating_avg = round(float(average or 0), 2)
        profile.review_count = count

    def create_review(self, contract_id: str, data: ReviewCreate, user: User) -> Review:
        contract = self.db.query(Contract).filter(Contract.id == contract_id).first()
        if not contract:
            raise HTTPException(status_code=404, detail="Contract not found")
        if user.id not in (contract.client_id, contract.expert_id):
            raise HTTPException(status_code=403, detail="Not a party to this contract")
        if contract.status != "completed":
            raise HTTPException(status_code=400, detail="Only completed contracts can be reviewed")

        existing = (
            self.db.query(Review)
            .filter(Review.contract_id == contract.id, Review.reviewer_id == user.id)
            .first()
        )
        if existing:
            raise HTTPException(status_code=409, detail="You have already reviewed this contract")

        reviewee_id = contract.expert_id if user.id == contract.client_id else contract.client_id
        review = Review(
            contract_id=contract.id,
            reviewer_id=user.id,
            reviewee_id=reviewee_id,
            rating=data.rating,
            comment=sanitize_string(data.comment),
        )
        self.db.add(review)
        try:
            self.db.flush()
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="You have already reviewed this contract") from e

        self._refresh_expert_rating(reviewee_id)
        self.db.commit()
        self.db.refresh(review)

        logger.info(f"⭐ Review {review.id} ({review.rating}/5) left for user {reviewee_id}")
        return review

    def list_reviews_for_user(self, user_id: str) -> list[Review]:
        return (
            self.db.query(Review)
            .options(joinedload(Review.reviewer))
            .filter(Review.reviewee_id == user_id)
            .order_by(Review.created_at.desc())
            .all()
        )
