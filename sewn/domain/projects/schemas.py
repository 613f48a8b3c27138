"""Project domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..experts.schemas import _validate_categories
from ..users.schemas import UserSummary

ProjectStatus = Literal["draft", "open", "in_progress", "completed", "cancelled"]


def _check_budget(budget_min, budget_max):
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        raise ValueError("budget_min must not exceed budget_max")


class ProjectCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=20000)
    categories: list[str] = Field(default_factory=list, max_length=16)
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    deadline: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=100)
    attachment_urls: list[str] = Field(default_factory=list, max_length=10)
    status: Literal["draft", "open"] = "open"

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v):
        return _validate_categories(v)

    @model_validator(mode="after")
    def check_budget(self):
        _check_budget(self.budget_min, self.budget_max)
        return self


class ProjectUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1, max_length=20000)
    categories: Optional[list[str]] = Field(None, max_length=16)
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)
    deadline: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=100)
    attachment_urls: Optional[list[str]] = Field(None, max_length=10)
    status: Optional[ProjectStatus] = None

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v):
        return _validate_categories(v)


class ProjectFilters(BaseModel):
    categories: Optional[list[str]] = None
    minBudget: Optional[int] = Field(None, ge=0)
    maxBudget: Optional[int] = Field(None, ge=0)
    status: ProjectStatus = "open"
    search: Optional[str] = None

    @field_validator("categories")
    @classmethod
    def validate_categories(cls, v):
        return _validate_categories(v)


class ProjectResponse(BaseModel):
    id: str
    client_id: str
    title: str
    description: str
    categories: list[str]
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    deadline: Optional[datetime] = None
    location: Optional[str] = None
    attachment_urls: list[str]
    status: str
    created_at: datetime
    updated_at: datetime
    client: Optional[UserSummary] = None
    proposal_count: int = 0

    class Config:
        from_attributes = True


class ProposalExpertSummary(BaseModel):
    id: str
    rating_avg: float
    review_count: int
    user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class ProjectProposalResponse(BaseModel):
    id: str
    cover_letter: str
    proposed_rate: int
    estimated_duration: Optional[str] = None
    status: str
    created_at: datetime
    expert: ProposalExpertSummary

    class Config:
        from_attributes = True


class ProjectDetailResponse(BaseModel):
    project: ProjectResponse
    proposals: list[ProjectProposalResponse]
