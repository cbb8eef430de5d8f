# ecovive/schemas/__init__.py

# User schemas
from .user import (
    UserCreate,
    UserResponse,
    LeaderboardEntry,
    AchievementResponse,
)

# Report schemas
from .report import (
    StatusUpdateRequest,
    CommentCreateRequest,
    ReportPhotoResponse,
    ReportCommentResponse,
    ReportResponse,
    ReportStatsResponse,
)

__all__ = [
    "UserCreate",
    "UserResponse",
    "LeaderboardEntry",
    "AchievementResponse",
    "StatusUpdateRequest",
    "CommentCreateRequest",
    "ReportPhotoResponse",
    "ReportCommentResponse",
    "ReportResponse",
    "ReportStatsResponse",
]
