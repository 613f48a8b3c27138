"""Expert repository - Database operations for expert profiles and portfolios"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import ExpertProfile, PortfolioItem, User
from ...utils.sanitization import sanitize_string
from .schemas import ExpertFilters

SORT_ORDERINGS = {
    "recommended": (ExpertProfile.rating_avg.desc(), ExpertProfile.review_count.desc()),
    "rating": (ExpertProfile.rating_avg.desc(), ExpertProfile.review_count.desc()),
    "reviews": (ExpertProfile.review_count.desc(), ExpertProfile.rating_avg.desc()),
    "latest": (ExpertProfile.created_at.desc(),),
    "price_low": (ExpertProfile.hourly_rate_min.asc().nulls_last(),),
    "price_high": (ExpertProfile.hourly_rate_min.desc().nulls_last(),),
}


class ExpertRepository:
    """Repository for expert database operations"""

    @staticmethod
    def search_experts(db: Session, filters: ExpertFilters) -> list[ExpertProfile]:
        """
        Filtered, ordered experts. Scalar filters run in SQL; category containment
        and skill matching run on the loaded rows since both are JSON columns.
        """
        query = (
            db.query(ExpertProfile)
            .join(User, ExpertProfile.user_id == User.id)
            .filter(User.is_active.is_(True))
            .options(joinedload(ExpertProfile.user))
        )

        if filters.availability:
            query = query.filter(ExpertProfile.availability == filters.availability)
        if filters.location:
            query = query.filter(ExpertProfile.location == filters.location)
        if filters.minRate:
            query = query.filter(ExpertProfile.hourly_rate_min >= filters.minRate)
        if filters.maxRate:
            query = query.filter(ExpertProfile.hourly_rate_max <= filters.maxRate)
        if filters.minRating:
            query = query.filter(ExpertProfile.rating_avg >= filters.minRating)

        experts = query.order_by(*SORT_ORDERINGS[filters.sort], ExpertProfile.id).all()

        if filters.categories:
            wanted = set(filters.categories)
            experts = [e for e in experts if wanted.issubset(e.categories or [])]

        if filters.search:
            # names and skills are stored escaped
            term = sanitize_string(filters.search)
            lowered = term.lower()
            experts = [
                e
                for e in experts
                if lowered in (e.user.name or "").lower() or term in (e.skills or [])
            ]

        return experts

    @staticmethod
    def get_expert(db: Session, expert_id: str) -> Optional[ExpertProfile]:
        return (
            db.query(ExpertProfile)
            .options(joinedload(ExpertProfile.user))
            .filter(ExpertProfile.id == expert_id)
            .first()
        )

    @staticmethod
    def get_expert_by_user(db: Session, user_id: str) -> Optional[ExpertProfile]:
        return db.query(ExpertProfile).filter(ExpertProfile.user_id == user_id).first()

    @staticmethod
    def get_portfolio(db: Session, expert_id: str) -> list[PortfolioItem]:
        return (
            db.query(PortfolioItem)
            .filter(PortfolioItem.expert_id == expert_id)
            .order_by(PortfolioItem.created_at.desc())
            .all()
        )

    @staticmethod
    def get_portfolio_item(db: Session, item_id: str, expert_id: str) -> Optional[PortfolioItem]:
        return (
            db.query(PortfolioItem)
            .filter(PortfolioItem.id == item_id, PortfolioItem.expert_id == expert_id)
            .first()
        )
