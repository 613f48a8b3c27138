"""User domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

UserType = Literal["expert", "client", "both"]


class UserResponse(BaseModel):
    id: str
    email: str
    user_type: str
    name: Optional[str] = None
    profile_image_url: Optional[str] = None
    phone: Optional[str] = None
    is_verified: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    """Public subset of a user embedded in other resources"""

    id: str
    name: Optional[str] = None
    profile_image_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=50)
    profile_image_url: Optional[str] = Field(None, max_length=500)


class OnboardingRequest(BaseModel):
    user_type: UserType
    name: str = Field(..., min_length=1, max_length=100)
