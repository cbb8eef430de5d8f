# ecovive/services/report_service.py
"""
Report Lifecycle Service

Orchestrates report creation, status changes, photo/comment attachment and
deletion on top of the catalog, status machine, proximity index and
scoring engine.

Every public operation is all-or-nothing: it commits once at the end and
rolls back (and cleans up any uploaded blob) on failure.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ecovive.config import settings
from ecovive.crud import report as report_crud
from ecovive.crud import user as user_crud
from ecovive.models.report import (
    Report, ReportCategory, ReportComment, ReportPhoto, ReportStatus,
)
from ecovive.models.user import User
from ecovive.services import catalog, proximity, scoring, status_machine
from ecovive.services.errors import EcoViveError, InvalidTransition, NotFound, StorageError, ValidationError
from ecovive.storage.blob_store import BlobStore, PhotoUpload, StoredBlob, get_blob_store
from ecovive.utils.clock import utcnow

logger = logging.getLogger(__name__)


# =====================================
# CONFIGURATION CONSTANTS
# =====================================

class ReportPolicy:
    """Field limits for user-submitted reports."""
    TITLE_MIN = 5
    TITLE_MAX = 100
    DESCRIPTION_MIN = 10
    DESCRIPTION_MAX = 500
    ADDRESS_MAX = 255
    COMMENT_MAX = 500
    PRIORITY_MIN = 1   # low
    PRIORITY_MAX = 4   # critical


CREDIT_ON_CREATION = "creation"
CREDIT_ON_RESOLUTION = "resolution"

STATS_WINDOW_DAYS = 30


# =====================================
# VALIDATION
# =====================================

def _require_length(value: Optional[str], field: str, minimum: int, maximum: int) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(f"{field} is required")
    if len(cleaned) < minimum:
        raise ValidationError(f"{field} must be at least {minimum} characters")
    if len(cleaned) > maximum:
        raise ValidationError(f"{field} must be {maximum} characters or less")
    return cleaned


def validate_coordinates(latitude: float, longitude: float) -> None:
    try:
        latitude = float(latitude)
        longitude = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError("Latitude and longitude must be numbers") from None
    if math.isnan(latitude) or math.isnan(longitude):
        raise ValidationError("Latitude and longitude must be numbers")
    if not -90.0 <= latitude <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180.0 <= longitude <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180")


def _validate_priority(priority: int) -> int:
    if priority is None:
        return ReportPolicy.PRIORITY_MIN
    if not ReportPolicy.PRIORITY_MIN <= int(priority) <= ReportPolicy.PRIORITY_MAX:
        raise ValidationError(
            f"Priority must be between {ReportPolicy.PRIORITY_MIN} and {ReportPolicy.PRIORITY_MAX}"
        )
    return int(priority)


def _clean_address(address: Optional[str]) -> Optional[str]:
    cleaned = (address or "").strip() or None
    if cleaned and len(cleaned) > ReportPolicy.ADDRESS_MAX:
        raise ValidationError(f"Address must be {ReportPolicy.ADDRESS_MAX} characters or less")
    return cleaned


# =====================================
# LOOKUPS
# =====================================

def get_report(db: Session, report_id: int, public_only: bool = False) -> Report:
    """Load a report; with public_only a private report reads as missing."""
    report = report_crud.get_report(db, report_id)
    if not report or (public_only and not report.is_public):
        raise NotFound(f"Report {report_id} not found")
    return report


def _get_user(db: Session, user_id: int, lock: bool = False) -> User:
    user = user_crud.get_user_for_update(db, user_id) if lock else user_crud.get_user(db, user_id)
    if not user:
        raise NotFound(f"User {user_id} not found")
    return user


def list_reports(
    db: Session,
    *,
    category: Optional[ReportCategory] = None,
    status: Optional[ReportStatus] = None,
    user_id: Optional[int] = None,
    public_only: bool = False,
    include_anonymous: bool = True,
    search: Optional[str] = None,
    priority: Optional[int] = None,
    min_priority: Optional[int] = None,
    resolved_since: Optional[datetime] = None,
    limit: int = 50,
    offset: int = 0,
) -> List[Report]:
    """
    Filtered report listing, newest first.

    `min_priority` lists the most urgent reports first and `resolved_since`
    lists RESOLVED/VERIFIED reports by most recent resolution.
    """
    criteria = []
    if category is not None:
        criteria.append(Report.category == category)
    if status is not None:
        criteria.append(Report.status == status)
    if user_id is not None:
        criteria.append(Report.user_id == user_id)
    if public_only:
        criteria.append(Report.is_public.is_(True))
    if not include_anonymous:
        criteria.append(Report.anonymous.is_(False))
    search = (search or "").strip()
    if search:
        criteria.append(report_crud.text_match(search))
    if priority is not None:
        criteria.append(Report.priority == _validate_priority(priority))
    if min_priority is not None:
        criteria.append(Report.priority >= _validate_priority(min_priority))

    order_by = None
    if resolved_since is not None:
        criteria.append(Report.status.in_(status_machine.RESOLVED_STATES))
        criteria.append(Report.resolved_at >= resolved_since)
        order_by = (Report.resolved_at.desc(), Report.id.desc())
    elif min_priority is not None:
        order_by = (Report.priority.desc(), Report.created_at.desc(), Report.id.desc())
    return report_crud.query_reports(db, *criteria, order_by=order_by, limit=limit, offset=offset)


def list_photos(db: Session, report_id: int) -> List[ReportPhoto]:
    get_report(db, report_id)
    return report_crud.list_photos(db, report_id)


def list_comments(db: Session, report_id: int, public_only: bool = False) -> List[ReportComment]:
    get_report(db, report_id)
    return report_crud.list_comments(db, report_id, public_only=public_only)


def report_stats(
    db: Session,
    days: int = STATS_WINDOW_DAYS,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Report counts by category and status (every value present, zero-filled),
    per creation day over the last `days` days, and the busiest addresses.
    """
    if days < 1:
        raise ValidationError("days must be at least 1")
    by_category = {category.value: 0 for category in ReportCategory}
    for category, count in report_crud.count_by_category(db):
        by_category[category.value] = count
    by_status = {status.value: 0 for status in ReportStatus}
    for status, count in report_crud.count_by_status(db):
        by_status[status.value] = count

    # Midnight of the first day in the window.
    today = (now or utcnow()).replace(hour=0, minute=0, second=0, microsecond=0)
    since = today - timedelta(days=days - 1)
    return {
        "total_reports": report_crud.count_reports(db),
        "by_category": by_category,
        "by_status": by_status,
        "by_date": dict(report_crud.count_by_date(db, since)),
        "top_addresses": [
            {"address": address, "count": count}
            for address, count in report_crud.count_by_address(db)
        ],
    }


# =====================================
# POINT CREDIT
# =====================================

def _credit_report_points(user: User, report: Report) -> bool:
    """Credit the report's points to its owner at most once."""
    if report.points_credited:
        return False
    scoring.credit_user(user, report.eco_points)
    report.points_credited = True
    logger.info(
        "Credited %s eco-points to user %s for report %s",
        report.eco_points,
        user.id,
        report.id,
    )
    return True


def _should_credit_on_transition(target: ReportStatus) -> bool:
    if settings.POINTS_CREDIT_POLICY == CREDIT_ON_CREATION:
        # A report that leaves DUPLICATE for review earns what it would
        # have earned at creation.
        return target == ReportStatus.PENDING
    return target in status_machine.RESOLVED_STATES


def _cleanup_blob(blob_store: Optional[BlobStore], stored: Optional[StoredBlob]) -> None:
    if blob_store is not None and stored is not None:
        blob_store.delete(stored.filename)


# =====================================
# CREATE
# =====================================

def create_report(
    db: Session,
    *,
    user_id: int,
    category,
    title: str,
    description: str,
    latitude: float,
    longitude: float,
    address: Optional[str] = None,
    priority: int = 1,
    is_public: bool = True,
    anonymous: bool = False,
    photo: Optional[PhotoUpload] = None,
    blob_store: Optional[BlobStore] = None,
    now: Optional[datetime] = None,
) -> Report:
    """
    File a new report.

    Validates input, flags near-duplicates, computes eco-points, stores the
    optional photo and bumps the reporter's report counter.

    Raises:
        ValidationError: malformed input (nothing persisted)
        NotFound: unknown user
        StorageError: database or photo storage failure (rolled back)
    """
    category = catalog.parse_category(category)
    title = _require_length(title, "Title", ReportPolicy.TITLE_MIN, ReportPolicy.TITLE_MAX)
    description = _require_length(
        description, "Description", ReportPolicy.DESCRIPTION_MIN, ReportPolicy.DESCRIPTION_MAX
    )
    validate_coordinates(latitude, longitude)
    latitude, longitude = float(latitude), float(longitude)
    priority = _validate_priority(priority)
    address = _clean_address(address)

    if photo is not None and blob_store is None:
        blob_store = get_blob_store()

    now = now or utcnow()
    stored = None
    try:
        user = _get_user(db, user_id, lock=True)

        duplicates = proximity.find_duplicates(
            db,
            category,
            latitude,
            longitude,
            settings.DUPLICATE_RADIUS_METERS,
            now - timedelta(days=settings.DUPLICATE_WINDOW_DAYS),
        )
        is_duplicate = bool(duplicates) and settings.AUTO_FLAG_DUPLICATES

        if photo is not None:
            stored = blob_store.upload(photo.data, photo.content_type, photo.filename)

        report = Report(
            user_id=user.id,
            category=category,
            title=title,
            description=description,
            latitude=latitude,
            longitude=longitude,
            address=address,
            status=ReportStatus.DUPLICATE if is_duplicate else ReportStatus.PENDING,
            eco_points=scoring.points_for_new_report(category, photo is not None),
            priority=priority,
            is_public=is_public,
            anonymous=anonymous,
            duplicate_of_id=duplicates[0].id if is_duplicate else None,
            created_at=now,
            updated_at=now,
        )
        report_crud.save_report(db, report)

        if stored is not None:
            report_crud.create_photo(
                db,
                report_id=report.id,
                filename=stored.filename,
                original_filename=photo.filename or stored.filename,
                file_url=stored.url,
                file_size=stored.size,
                content_type=photo.content_type,
                is_primary=True,
                created_at=now,
            )

        scoring.increment_reports_count(user)
        if settings.POINTS_CREDIT_POLICY == CREDIT_ON_CREATION and not is_duplicate:
            _credit_report_points(user, report)
        scoring.evaluate_achievements(db, user, now=now)

        db.commit()
        db.refresh(report)

    except EcoViveError:
        db.rollback()
        _cleanup_blob(blob_store, stored)
        raise
    except SQLAlchemyError as e:
        db.rollback()
        _cleanup_blob(blob_store, stored)
        raise StorageError(f"Failed to create report: {str(e)}") from e

    if is_duplicate:
        logger.info(
            "Report %s flagged as duplicate of report %s (%s nearby matches)",
            report.id,
            report.duplicate_of_id,
            len(duplicates),
        )
    logger.info(
        "Report %s created by user %s: category=%s status=%s eco_points=%s",
        report.id,
        report.user_id,
        report.category.value,
        report.status.value,
        report.eco_points,
    )
    return report


# =====================================
# STATUS UPDATES
# =====================================

def update_status(
    db: Session,
    report_id: int,
    new_status,
    notes: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> Report:
    """
    Apply a status transition and its side effects.

    Raises:
        ValidationError: unknown status name or missing verification notes
        InvalidTransition: transition not allowed, or the report changed
            concurrently
        NotFound: unknown report
        StorageError: database failure (rolled back)
    """
    target = status_machine.parse_status(new_status)
    now = now or utcnow()
    previous = None

    try:
        report = report_crud.get_report_for_update(db, report_id)
        if not report:
            raise NotFound(f"Report {report_id} not found")
        previous = report.status

        status_machine.apply_transition(report, target, notes, now=now)

        if _should_credit_on_transition(target) and not report.points_credited:
            user = _get_user(db, report.user_id, lock=True)
            _credit_report_points(user, report)
            scoring.evaluate_achievements(db, user, now=now)

        db.commit()
        db.refresh(report)

    except EcoViveError:
        db.rollback()
        raise
    except StaleDataError as e:
        db.rollback()
        raise InvalidTransition(
            previous, target, "Report was modified concurrently; reload and retry"
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to update report status: {str(e)}") from e

    return report


# =====================================
# PHOTOS & COMMENTS
# =====================================

def attach_photo(
    db: Session,
    report_id: int,
    upload: PhotoUpload,
    blob_store: Optional[BlobStore] = None,
    description: Optional[str] = None,
) -> ReportPhoto:
    """
    Append a photo to a report. The first photo becomes primary unless
    another is already primary. Eco-points are not recomputed.
    """
    if blob_store is None:
        blob_store = get_blob_store()

    stored = None
    try:
        report = report_crud.get_report_for_update(db, report_id)
        if not report:
            raise NotFound(f"Report {report_id} not found")

        stored = blob_store.upload(upload.data, upload.content_type, upload.filename)
        photo = report_crud.create_photo(
            db,
            report_id=report.id,
            filename=stored.filename,
            original_filename=upload.filename or stored.filename,
            file_url=stored.url,
            file_size=stored.size,
            content_type=upload.content_type,
            is_primary=not report_crud.has_primary_photo(db, report.id),
            description=(description or "").strip() or None,
        )
        db.commit()
        db.refresh(photo)

    except EcoViveError:
        db.rollback()
        _cleanup_blob(blob_store, stored)
        raise
    except SQLAlchemyError as e:
        db.rollback()
        _cleanup_blob(blob_store, stored)
        raise StorageError(f"Failed to attach photo: {str(e)}") from e

    return photo


def add_comment(
    db: Session,
    report_id: int,
    user_id: int,
    content: str,
    is_admin: bool = False,
    is_public: bool = True,
) -> ReportComment:
    content = _require_length(content, "Comment", 1, ReportPolicy.COMMENT_MAX)
    try:
        get_report(db, report_id)
        _get_user(db, user_id)
        comment = report_crud.create_comment(
            db,
            report_id=report_id,
            user_id=user_id,
            content=content,
            is_admin_comment=is_admin,
            is_public=is_public,
        )
        db.commit()
        db.refresh(comment)
    except EcoViveError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to add comment: {str(e)}") from e
    return comment


# =====================================
# DELETE (explicit cascade)
# =====================================

def delete_report_rows(db: Session, report_id: int) -> Dict[str, Any]:
    """
    Remove a report and everything it owns from the session.

    Returns the stored photo filenames so the caller can clean up blobs after
    commit. Caller owns the commit.
    """
    filenames = [photo.filename for photo in report_crud.list_photos(db, report_id)]
    report_crud.clear_duplicate_links(db, report_id)
    comments_deleted = report_crud.delete_comments(db, report_id)
    photos_deleted = report_crud.delete_photos(db, report_id)
    report_crud.delete_report_row(db, report_id)
    return {
        "report_id": report_id,
        "photos_deleted": photos_deleted,
        "comments_deleted": comments_deleted,
        "filenames": filenames,
    }


def delete_report(
    db: Session,
    report_id: int,
    blob_store: Optional[BlobStore] = None,
) -> Dict[str, Any]:
    """
    Delete a report with its photos and comments.

    Credited eco-points and the owner's report counter are left untouched.
    """
    try:
        get_report(db, report_id)
        result = delete_report_rows(db, report_id)
        db.commit()
    except EcoViveError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to delete report: {str(e)}") from e

    if result["filenames"]:
        blob_store = blob_store or get_blob_store()
        for filename in result["filenames"]:
            blob_store.delete(filename)

    logger.info(
        "Report %s deleted (%s photos, %s comments)",
        report_id,
        result["photos_deleted"],
        result["comments_deleted"],
    )
    return {key: value for key, value in result.items() if key != "filenames"}
