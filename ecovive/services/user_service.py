# ecovive/services/user_service.py
"""
User Service

Registration, lookups, leaderboard and cascade deletion of users.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ecovive.crud import report as report_crud
from ecovive.crud import user as user_crud
from ecovive.models.report import Report
from ecovive.models.user import Achievement, User
from ecovive.services import report_service
from ecovive.services.errors import EcoViveError, NotFound, StorageError, ValidationError
from ecovive.storage.blob_store import BlobStore, get_blob_store
from ecovive.utils.security import get_password_hash

logger = logging.getLogger(__name__)

NAME_MIN = 2
NAME_MAX = 50
PASSWORD_MIN = 8


def register_user(
    db: Session,
    *,
    name: str,
    email: str,
    password: str,
    location: Optional[str] = None,
) -> User:
    name = (name or "").strip()
    if not NAME_MIN <= len(name) <= NAME_MAX:
        raise ValidationError(f"Name must be between {NAME_MIN} and {NAME_MAX} characters")
    email = (email or "").strip().lower()
    if "@" not in email:
        raise ValidationError("A valid email is required")
    if len(password or "") < PASSWORD_MIN:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN} characters")

    if user_crud.get_user_by_email(db, email):
        raise ValidationError("Email already registered")

    try:
        user = user_crud.create_user(
            db,
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            location=(location or "").strip() or None,
        )
        db.commit()
        db.refresh(user)
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("Email already registered") from e
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to register user: {str(e)}") from e

    logger.info("User %s registered", user.id)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = user_crud.get_user(db, user_id)
    if not user:
        raise NotFound(f"User {user_id} not found")
    return user


def get_leaderboard(db: Session, limit: int = 10) -> List[User]:
    return user_crud.get_top_users(db, limit=limit)


def get_achievements(db: Session, user_id: int) -> List[Achievement]:
    get_user(db, user_id)
    return user_crud.get_user_achievements(db, user_id)


def delete_user(
    db: Session,
    user_id: int,
    blob_store: Optional[BlobStore] = None,
) -> Dict[str, Any]:
    """
    Delete a user together with the reports and achievements they own.

    Comments the user left on other reports go too, since a comment cannot
    outlive its author.
    """
    filenames = []
    try:
        get_user(db, user_id)
        report_ids = [
            report.id
            for report in report_crud.query_reports(db, Report.user_id == user_id)
        ]
        for report_id in report_ids:
            filenames.extend(report_service.delete_report_rows(db, report_id)["filenames"])
        comments_deleted = user_crud.delete_user_comments(db, user_id)
        achievements_deleted = user_crud.delete_user_achievements(db, user_id)
        db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        db.commit()
    except EcoViveError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"Failed to delete user: {str(e)}") from e

    if filenames:
        blob_store = blob_store or get_blob_store()
        for filename in filenames:
            blob_store.delete(filename)

    logger.info("User %s deleted with %s reports", user_id, len(report_ids))
    return {
        "user_id": user_id,
        "reports_deleted": len(report_ids),
        "comments_deleted": comments_deleted,
        "achievements_deleted": achievements_deleted,
    }
