from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..users.schemas import UserSummary


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewResponse(BaseModel):
    id: str
    contract_id: str
    reviewer_id: str
    reviewee_id: str
    rating: int
    comment: Optional[str] = None
    created_at: datetime
    reviewer: Optional[UserSummary] = None

    class Config:
        from_attributes = True
