"""User service - profile and onboarding"""

import logging

from sqlalchemy.orm import Session

from ...constants import EXPERT_USER_TYPES
from ...models import ExpertProfile, User
from ...utils.sanitization import sanitize_string
from .schemas import OnboardingRequest, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def update_profile(self, user: User, data: UserUpdate) -> User:
        if data.name is not None:
            user.name = sanitize_string(data.name)
        if data.phone is not None:
            user.phone = data.phone.strip() or None
        if data.profile_image_url is not None:
            user.profile_image_url = data.profile_image_url or None

        self.db.commit()
        self.db.refresh(user)
        return user

    def complete_onboarding(self, user: User, data: OnboardingRequest) -> User:
        """Set the account type; expert accounts get an empty profile to fill in"""
        user.user_type = data.user_type
        user.name = sanitize_string(data.name)

        if data.user_type in EXPERT_USER_TYPES and user.expert_profile is None:
            self.db.add(ExpertProfile(user_id=user.id, categories=[], skills=[]))
            logger.info(f"🧵 Created expert profile for user {user.id}")

        self.db.commit()
        self.db.refresh(user)
        return user
