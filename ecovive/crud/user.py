from typing import List, Optional

from sqlalchemy.orm import Session

from ecovive import models


def create_user(db: Session, *, name: str, email: str, password_hash: str, location: Optional[str] = None):
    db_user = models.User(
        name=name,
        email=email,
        password_hash=password_hash,
    )
    if location:
        db_user.location = location
    db.add(db_user)
    db.flush()
    return db_user


def get_user(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_for_update(db: Session, user_id: int) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).with_for_update().first()


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.email == email).first()


def get_top_users(db: Session, limit: int = 10) -> List[models.User]:
    return db.query(models.User).filter(
        models.User.is_active.is_(True)
    ).order_by(
        models.User.eco_points.desc(),
        models.User.id.asc(),
    ).limit(limit).all()


def get_user_achievements(db: Session, user_id: int) -> List[models.Achievement]:
    return db.query(models.Achievement).filter(
        models.Achievement.user_id == user_id
    ).order_by(models.Achievement.unlocked_at.asc(), models.Achievement.id.asc()).all()


def delete_user_achievements(db: Session, user_id: int) -> int:
    return db.query(models.Achievement).filter(
        models.Achievement.user_id == user_id
    ).delete(synchronize_session=False)


def delete_user_comments(db: Session, user_id: int) -> int:
    return db.query(models.ReportComment).filter(
        models.ReportComment.user_id == user_id
    ).delete(synchronize_session=False)
