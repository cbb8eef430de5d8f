from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ecovive.api.errors import http_error
from ecovive.api.reports import serialize_report
from ecovive.database import get_db
from ecovive.models.user import User
from ecovive.schemas.report import ReportResponse
from ecovive.schemas.user import AchievementResponse, LeaderboardEntry, UserCreate, UserResponse
from ecovive.services import report_service, user_service
from ecovive.services.errors import EcoViveError
from ecovive.services.scoring import LEVEL_ICONS
from ecovive.storage.blob_store import BlobStore, get_blob_store

router = APIRouter(prefix="/users", tags=["Users"])


def _serialize_user(user: User) -> UserResponse:
    level = user.level
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        location=user.location,
        eco_points=user.eco_points,
        level=level.value,
        level_icon=LEVEL_ICONS[level],
        reports_count=user.reports_count,
        is_active=bool(user.is_active),
        created_at=user.created_at,
    )


@router.post("/", response_model=UserResponse, status_code=201)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        user = user_service.register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            location=payload.location,
        )
    except EcoViveError as exc:
        raise http_error(exc)
    return _serialize_user(user)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
def get_leaderboard(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Active users ranked by eco-points."""
    return [
        LeaderboardEntry(
            rank=index,
            user_id=user.id,
            name=user.name,
            eco_points=user.eco_points,
            level=user.level.value,
            reports_count=user.reports_count,
        )
        for index, user in enumerate(user_service.get_leaderboard(db, limit=limit), start=1)
    ]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        return _serialize_user(user_service.get_user(db, user_id))
    except EcoViveError as exc:
        raise http_error(exc)


@router.get("/{user_id}/reports", response_model=List[ReportResponse])
def get_user_reports(
    user_id: int,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """Public reports filed by the user under their name."""
    try:
        user_service.get_user(db, user_id)
    except EcoViveError as exc:
        raise http_error(exc)
    reports = report_service.list_reports(
        db,
        user_id=user_id,
        public_only=True,
        include_anonymous=False,
        limit=limit,
        offset=offset,
    )
    return [serialize_report(db, r, include_children=False) for r in reports]


@router.get("/{user_id}/achievements", response_model=List[AchievementResponse])
def get_user_achievements(user_id: int, db: Session = Depends(get_db)):
    try:
        return user_service.get_achievements(db, user_id)
    except EcoViveError as exc:
        raise http_error(exc)


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    try:
        result = user_service.delete_user(db, user_id, blob_store=blob_store)
    except EcoViveError as exc:
        raise http_error(exc)
    return {"message": "User deleted", **result}
