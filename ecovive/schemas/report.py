# ecovive/schemas/report.py
"""
Report Pydantic Schemas

Category and status travel as plain strings so that unknown names reach
the service layer and come back as a 400, not a 422.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ======================
# REQUEST SCHEMAS
# ======================

class StatusUpdateRequest(BaseModel):
    status: str = Field(..., description="Target status name, e.g. IN_PROGRESS")
    notes: Optional[str] = Field(None, description="Verification or admin notes")


class CommentCreateRequest(BaseModel):
    user_id: int
    content: str
    is_admin_comment: bool = False
    is_public: bool = True


# ======================
# RESPONSE SCHEMAS
# ======================

class ReportPhotoResponse(BaseModel):
    id: int
    file_url: str
    original_filename: str
    file_size: Optional[int] = None
    content_type: Optional[str] = None
    is_primary: bool
    description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportCommentResponse(BaseModel):
    id: int
    report_id: int
    user_id: int
    content: str
    is_admin_comment: bool
    is_public: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportResponse(BaseModel):
    id: int
    user_id: Optional[int] = Field(None, description="Hidden for anonymous reports")
    category: str
    category_title: str
    category_icon: str
    title: str
    description: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    status: str
    status_title: str
    status_message: str
    allowed_transitions: List[str]
    eco_points: int
    priority: int
    verified: bool
    verification_notes: Optional[str] = None
    verified_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    is_public: bool
    anonymous: bool
    duplicate_of_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    photos: List[ReportPhotoResponse] = []
    comments: List[ReportCommentResponse] = []


class ReportStatsResponse(BaseModel):
    total_reports: int
    by_category: dict
    by_status: dict
    by_date: Dict[str, int] = Field(default_factory=dict, description="Reports created per day, YYYY-MM-DD")
    top_addresses: List[Dict[str, Any]] = []
