# ecovive/api/reports.py
"""
Environmental Reports API
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from ecovive.api.errors import http_error
from ecovive.database import get_db
from ecovive.models.report import Report
from ecovive.schemas.report import (
    CommentCreateRequest,
    ReportCommentResponse,
    ReportPhotoResponse,
    ReportResponse,
    ReportStatsResponse,
    StatusUpdateRequest,
)
from ecovive.services import catalog, proximity, report_service, status_machine
from ecovive.services.errors import EcoViveError
from ecovive.storage.blob_store import BlobStore, PhotoUpload, get_blob_store

router = APIRouter(prefix="/reports", tags=["Reports"])


# ======================
# HELPER FUNCTIONS
# ======================
def _read_upload(upload: Optional[UploadFile]) -> Optional[PhotoUpload]:
    if upload is None or not upload.filename:
        return None
    return PhotoUpload(
        data=upload.file.read(),
        content_type=upload.content_type or "",
        filename=upload.filename,
    )


def serialize_report(db: Session, report: Report, include_children: bool = True) -> ReportResponse:
    category_info = catalog.metadata(report.category)
    status_info = status_machine.STATUS_INFO[report.status]
    photos = report_service.list_photos(db, report.id) if include_children else []
    comments = (
        report_service.list_comments(db, report.id, public_only=True)
        if include_children else []
    )
    return ReportResponse(
        id=report.id,
        user_id=None if report.anonymous else report.user_id,
        category=report.category.value,
        category_title=category_info.title,
        category_icon=category_info.icon,
        title=report.title,
        description=report.description,
        latitude=report.latitude,
        longitude=report.longitude,
        address=report.address,
        status=report.status.value,
        status_title=status_info.title,
        status_message=status_info.user_message,
        allowed_transitions=[s.value for s in status_machine.allowed_targets(report.status)],
        eco_points=report.eco_points,
        priority=report.priority,
        verified=bool(report.verified),
        verification_notes=report.verification_notes,
        verified_at=report.verified_at,
        resolved_at=report.resolved_at,
        is_public=bool(report.is_public),
        anonymous=bool(report.anonymous),
        duplicate_of_id=report.duplicate_of_id,
        created_at=report.created_at,
        updated_at=report.updated_at,
        photos=[ReportPhotoResponse.model_validate(p) for p in photos],
        comments=[ReportCommentResponse.model_validate(c) for c in comments],
    )


# ======================
# CREATE REPORT
# ======================
@router.post("/", response_model=ReportResponse, status_code=201)
def create_report(
    user_id: int = Form(...),
    category: str = Form(...),
    title: str = Form(...),
    description: str = Form(...),
    latitude: float = Form(...),
    longitude: float = Form(...),
    address: Optional[str] = Form(None),
    priority: int = Form(1),
    is_public: bool = Form(True),
    anonymous: bool = Form(False),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """
    File a new environmental report.

    A nearby report of the same category filed recently marks the new one
    as DUPLICATE; otherwise it starts as PENDING.
    """
    try:
        report = report_service.create_report(
            db,
            user_id=user_id,
            category=category,
            title=title,
            description=description,
            latitude=latitude,
            longitude=longitude,
            address=address,
            priority=priority,
            is_public=is_public,
            anonymous=anonymous,
            photo=_read_upload(photo),
            blob_store=blob_store,
        )
        return serialize_report(db, report)
    except EcoViveError as exc:
        raise http_error(exc)


# ======================
# LISTING & SEARCH
# ======================
@router.get("/", response_model=List[ReportResponse])
def list_reports(
    category: Optional[str] = None,
    status: Optional[str] = None,
    user_id: Optional[int] = None,
    search: Optional[str] = Query(None, max_length=100),
    priority: Optional[int] = None,
    min_priority: Optional[int] = None,
    resolved_since: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """
    Public reports, newest first.

    Filtering by owner never reveals reports filed anonymously.
    """
    try:
        reports = report_service.list_reports(
            db,
            category=catalog.parse_category(category) if category else None,
            status=status_machine.parse_status(status) if status else None,
            user_id=user_id,
            public_only=True,
            include_anonymous=user_id is None,
            search=search,
            priority=priority,
            min_priority=min_priority,
            resolved_since=resolved_since,
            limit=limit,
            offset=offset,
        )
    except EcoViveError as exc:
        raise http_error(exc)
    return [serialize_report(db, r, include_children=False) for r in reports]


@router.get("/nearby", response_model=List[ReportResponse])
def get_nearby_reports(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_m: float = Query(500.0, gt=0, le=50000),
    db: Session = Depends(get_db),
):
    """Public reports of any category within radius_m meters, newest first."""
    reports = proximity.find_nearby(db, latitude, longitude, radius_m, public_only=True)
    return [serialize_report(db, r, include_children=False) for r in reports]


@router.get("/stats", response_model=ReportStatsResponse)
def get_report_stats(
    days: int = Query(report_service.STATS_WINDOW_DAYS, ge=1, le=365),
    db: Session = Depends(get_db),
):
    try:
        return report_service.report_stats(db, days=days)
    except EcoViveError as exc:
        raise http_error(exc)


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(report_id: int, db: Session = Depends(get_db)):
    """A public report with its photos and public comments; private ones read as 404."""
    try:
        return serialize_report(db, report_service.get_report(db, report_id, public_only=True))
    except EcoViveError as exc:
        raise http_error(exc)


# ======================
# STATUS WORKFLOW
# ======================
@router.patch("/{report_id}/status", response_model=ReportResponse)
def update_report_status(
    report_id: int,
    payload: StatusUpdateRequest,
    db: Session = Depends(get_db),
):
    try:
        report = report_service.update_status(db, report_id, payload.status, payload.notes)
        return serialize_report(db, report)
    except EcoViveError as exc:
        raise http_error(exc)


# ======================
# PHOTOS & COMMENTS
# ======================
@router.post("/{report_id}/photos", response_model=ReportPhotoResponse, status_code=201)
def upload_report_photo(
    report_id: int,
    photo: UploadFile = File(...),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    upload = _read_upload(photo)
    if upload is None:
        raise HTTPException(status_code=400, detail="A photo file is required")
    try:
        return report_service.attach_photo(
            db, report_id, upload, blob_store=blob_store, description=description
        )
    except EcoViveError as exc:
        raise http_error(exc)


@router.post("/{report_id}/comments", response_model=ReportCommentResponse, status_code=201)
def add_report_comment(
    report_id: int,
    payload: CommentCreateRequest,
    db: Session = Depends(get_db),
):
    try:
        return report_service.add_comment(
            db,
            report_id,
            payload.user_id,
            payload.content,
            is_admin=payload.is_admin_comment,
            is_public=payload.is_public,
        )
    except EcoViveError as exc:
        raise http_error(exc)


@router.get("/{report_id}/comments", response_model=List[ReportCommentResponse])
def get_report_comments(report_id: int, db: Session = Depends(get_db)):
    try:
        report_service.get_report(db, report_id, public_only=True)
        return report_service.list_comments(db, report_id, public_only=True)
    except EcoViveError as exc:
        raise http_error(exc)


# ======================
# DELETE
# ======================
@router.delete("/{report_id}")
def delete_report(
    report_id: int,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    try:
        result = report_service.delete_report(db, report_id, blob_store=blob_store)
    except EcoViveError as exc:
        raise http_error(exc)
    return {"message": "Report deleted", **result}
