"""Expert domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...constants import EXPERT_CATEGORIES
from ..users.schemas import UserSummary

Availability = Literal["available", "busy", "unavailable"]
SortOption = Literal["recommended", "rating", "reviews", "latest", "price_low", "price_high"]


def _validate_categories(values: Optional[list[str]]) -> Optional[list[str]]:
    if values is None:
        return values
    unknown = [v for v in values if v not in EXPERT_CATEGORIES]
    if unknown:
        raise ValueError(f"Unknown categories: {', '.join(unknown)}")
    # dedupe, keep order
    return list(dict.fromkeys(values))


class ExpertProfileResponse(BaseModel):
    id: str
    user_id: str
    bio: Optional[str] = None
    categories: list[str]
    skills: list[str]
    experience_years: Optional[int] = None
    education: Optional[str] = None
    location: Optional[str] = None
    hourly_rate_min: Optional[int] = None
    hourly_rate_max: Optional[int] = None
    project_rate_min: Optional[int] = None
    project_rate_max: Optional[int] = None
    availability: str
    rating_avg: float
    review_count: int
    completed_projects: int
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class ExpertProfileUpdate(BaseModel):
    """Full replacement of the editable profile fields"""

    bio: Optional[str] = Field(None, max_length=5000)
    categories: list[str] = Field(default_factory=list, max_length=16)
    skills: list[str] = Field(default_factory=list, max_length=50)
    experience_years: Optional[int] = Field(None, ge=0, le=80)
    education: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=100)
    hourly_rate_min: Optional[int] = Field(None, ge=0)
    hourly_rate_max: Optional[int] = Field(None, ge=0)
    project_rate_min: Optional[int] = Field(None, ge=0)
    project_rate_max: Optional[int] = Field(None, ge=0)
    availability: Availability = "available"

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v):
        return _validate_categories(v)

    @model_validator(mode="after")
    def check_rate_ranges(self):
        for low, high in (
            ("hourly_rate_min", "hourly_rate_max"),
            ("project_rate_min", "project_rate_max"),
        ):
            low_value, high_value = getattr(self, low), getattr(self, high)
            if low_value is not None and high_value is not None and low_value > high_value:
                raise ValueError(f"{low} must not exceed {high}")
        return self


class ExpertFilters(BaseModel):
    categories: Optional[list[str]] = None
    minRate: Optional[int] = Field(None, ge=0)
    maxRate: Optional[int] = Field(None, ge=0)
    location: Optional[str] = None
    availability: Optional[Availability] = None
    search: Optional[str] = None
    sort: SortOption = "recommended"
    minRating: Optional[float] = Field(None, ge=0, le=5)

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v):
        return _validate_categories(v)


class PortfolioItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    image_urls: list[str] = Field(default_factory=list, max_length=10)
    category: Optional[str] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        if v is not None and v not in EXPERT_CATEGORIES:
            raise ValueError(f"Unknown category: {v}")
        return v


class PortfolioItemResponse(BaseModel):
    id: str
    expert_id: str
    title: str
    description: Optional[str] = None
    image_urls: list[str]
    category: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ExpertDetailResponse(BaseModel):
    expert: ExpertProfileResponse
    portfolioItems: list[PortfolioItemResponse]
