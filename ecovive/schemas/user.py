from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


# ======================
# USER SCHEMAS
# ======================

class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    location: Optional[str] = None


class UserResponse(BaseModel):
    """Public user profile; the credential hash is never exposed."""
    id: int
    name: str
    email: EmailStr
    location: Optional[str] = None
    eco_points: int
    level: str = Field(..., description="Experience tier derived from eco_points")
    level_icon: str
    reports_count: int
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    name: str
    eco_points: int
    level: str
    reports_count: int


# ======================
# ACHIEVEMENT SCHEMAS
# ======================

class AchievementResponse(BaseModel):
    id: int
    code: str
    title: str
    description: Optional[str] = None
    icon: Optional[str] = None
    category: Optional[str] = None
    points_reward: int
    unlocked_at: datetime

    model_config = ConfigDict(from_attributes=True)
