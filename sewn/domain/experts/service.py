"""Expert service - browsing experts and managing one's own profile"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import EXPERT_USER_TYPES
from ...models import ExpertProfile, PortfolioItem, User
from ...utils.pagination import paginate
from ...utils.sanitization import sanitize_list, sanitize_string
from .repository import ExpertRepository
from .schemas import ExpertFilters, ExpertProfileUpdate, PortfolioItemCreate

logger = logging.getLogger(__name__)


class ExpertService:
    """Service layer for expert business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ExpertRepository()

    def list_experts(self, filters: ExpertFilters, page: int, limit: int) -> dict:
        experts = self.repo.search_experts(self.db, filters)
        return paginate(experts, page, limit)

    def get_expert_detail(self, expert_id: str) -> dict:
        expert = self.repo.get_expert(self.db, expert_id)
        if not expert:
            raise HTTPException(status_code=404, detail="Expert not found")
        return {
            "expert": expert,
            "portfolioItems": self.repo.get_portfolio(self.db, expert.id),
        }

    def get_own_profile(self, user: User) -> ExpertProfile:
        profile = self.repo.get_expert_by_user(self.db, user.id)
        if not profile:
            raise HTTPException(status_code=404, detail="Expert profile not found")
        return profile

    def upsert_own_profile(self, user: User, data: ExpertProfileUpdate) -> ExpertProfile:
        """Create or replace the caller's expert profile"""
        if user.user_type not in EXPERT_USER_TYPES:
            raise HTTPException(
                status_code=403, detail="Only expert accounts can have an expert profile"
            )

        profile = self.repo.get_expert_by_user(self.db, user.id)
        if profile is None:
            profile = ExpertProfile(user_id=user.id)
            self.db.add(profile)
            logger.info(f"🧵 Creating expert profile for user {user.id}")

        profile.bio = sanitize_string(data.bio)
        profile.categories = data.categories
        profile.skills = sanitize_list(data.skills)
        profile.experience_years = data.experience_years
        profile.education = sanitize_string(data.education)
        profile.location = data.location
        profile.hourly_rate_min = data.hourly_rate_min
        profile.hourly_rate_max = data.hourly_rate_max
        profile.project_rate_min = data.project_rate_min
        profile.project_rate_max = data.project_rate_max
        profile.availability = data.availability

        self.db.commit()
        self.db.refresh(profile)
        return profile

    def add_portfolio_item(self, user: User, data: PortfolioItemCreate) -> PortfolioItem:
        profile = self.get_own_profile(user)
        item = PortfolioItem(
            expert_id=profile.id,
            title=sanitize_string(data.title),
            description=sanitize_string(data.description),
            image_urls=data.image_urls,
            category=data.category,
        )
        self.db.add(item)
        self.db.commit()
        self.db.refresh(item)
        return item

    def delete_portfolio_item(self, user: User, item_id: str) -> None:
        profile = self.get_own_profile(user)
        item = self.repo.get_portfolio_item(self.db, item_id, profile.id)
        if not item:
            raise HTTPException(status_code=404, detail="Portfolio item not found")
        self.db.delete(item)
        self.db.commit()
