# ecovive/crud/report.py
"""
Report persistence helpers.

Thin query layer over the ORM: save, look up by id, query by predicate,
count by predicate. Owned photos and comments are addressed by report_id.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ecovive.models.report import Report, ReportCategory, ReportComment, ReportPhoto, ReportStatus


# =====================================
# REPORTS
# =====================================

def save_report(db: Session, report: Report) -> Report:
    """Add and flush so the report gets its id without committing."""
    db.add(report)
    db.flush()
    return report


def get_report(db: Session, report_id: int) -> Optional[Report]:
    return db.query(Report).filter(Report.id == report_id).first()


def get_report_for_update(db: Session, report_id: int) -> Optional[Report]:
    """Row-locked read used to serialize status changes per report."""
    return db.query(Report).filter(Report.id == report_id).with_for_update().first()


def query_reports(
    db: Session,
    *criteria,
    order_by: Optional[Sequence] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Report]:
    query = db.query(Report)
    if criteria:
        query = query.filter(*criteria)
    if order_by is None:
        order_by = (Report.created_at.desc(), Report.id.desc())
    query = query.order_by(*order_by)
    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def count_reports(db: Session, *criteria) -> int:
    query = db.query(func.count(Report.id))
    if criteria:
        query = query.filter(*criteria)
    return int(query.scalar() or 0)


def find_in_bounding_box(
    db: Session,
    *,
    min_lat: float,
    max_lat: float,
    min_lon: Optional[float] = None,
    max_lon: Optional[float] = None,
    category: Optional[ReportCategory] = None,
    since: Optional[datetime] = None,
    public_only: bool = False,
    exclude_id: Optional[int] = None,
    exclude_statuses: Iterable[ReportStatus] = (),
) -> List[Report]:
    """Candidate rows for a proximity search; exact distance is checked by the caller."""
    criteria = [Report.latitude >= min_lat, Report.latitude <= max_lat]
    if min_lon is not None and max_lon is not None:
        criteria.extend([Report.longitude >= min_lon, Report.longitude <= max_lon])
    if category is not None:
        criteria.append(Report.category == category)
    if since is not None:
        criteria.append(Report.created_at >= since)
    if public_only:
        criteria.append(Report.is_public.is_(True))
    if exclude_id is not None:
        criteria.append(Report.id != exclude_id)
    exclude_statuses = list(exclude_statuses)
    if exclude_statuses:
        criteria.append(Report.status.notin_(exclude_statuses))
    return query_reports(db, *criteria, order_by=(Report.created_at.asc(), Report.id.asc()))


def text_match(term: str):
    """Case-insensitive substring match over title, description and address."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return or_(
        Report.title.ilike(pattern, escape="\\"),
        Report.description.ilike(pattern, escape="\\"),
        Report.address.ilike(pattern, escape="\\"),
    )


def count_by_category(db: Session) -> List[Tuple[ReportCategory, int]]:
    return db.query(Report.category, func.count(Report.id)).group_by(Report.category).all()


def count_by_status(db: Session) -> List[Tuple[ReportStatus, int]]:
    return db.query(Report.status, func.count(Report.id)).group_by(Report.status).all()


def count_by_date(db: Session, since: datetime) -> List[Tuple[str, int]]:
    """Reports created per calendar day since `since`, oldest day first."""
    day = func.date(Report.created_at)
    rows = db.query(day, func.count(Report.id)).filter(
        Report.created_at >= since
    ).group_by(day).order_by(day).all()
    return [(str(value), count) for value, count in rows]


def count_by_address(db: Session, limit: int = 10) -> List[Tuple[str, int]]:
    total = func.count(Report.id)
    return db.query(Report.address, total).filter(
        Report.address.isnot(None)
    ).group_by(Report.address).order_by(total.desc(), Report.address.asc()).limit(limit).all()


def clear_duplicate_links(db: Session, report_id: int) -> int:
    return db.query(Report).filter(
        Report.duplicate_of_id == report_id
    ).update({"duplicate_of_id": None}, synchronize_session=False)


def delete_report_row(db: Session, report_id: int) -> int:
    return db.query(Report).filter(Report.id == report_id).delete(synchronize_session=False)


# =====================================
# PHOTOS
# =====================================

def list_photos(db: Session, report_id: int) -> List[ReportPhoto]:
    return db.query(ReportPhoto).filter(
        ReportPhoto.report_id == report_id
    ).order_by(ReportPhoto.id.asc()).all()


def has_primary_photo(db: Session, report_id: int) -> bool:
    return db.query(ReportPhoto.id).filter(
        ReportPhoto.report_id == report_id,
        ReportPhoto.is_primary.is_(True),
    ).first() is not None


def create_photo(db: Session, **fields) -> ReportPhoto:
    photo = ReportPhoto(**fields)
    db.add(photo)
    db.flush()
    return photo


def delete_photos(db: Session, report_id: int) -> int:
    return db.query(ReportPhoto).filter(
        ReportPhoto.report_id == report_id
    ).delete(synchronize_session=False)


# =====================================
# COMMENTS
# =====================================

def list_comments(db: Session, report_id: int, public_only: bool = False) -> List[ReportComment]:
    query = db.query(ReportComment).filter(ReportComment.report_id == report_id)
    if public_only:
        query = query.filter(ReportComment.is_public.is_(True))
    return query.order_by(ReportComment.created_at.asc(), ReportComment.id.asc()).all()


def create_comment(db: Session, **fields) -> ReportComment:
    comment = ReportComment(**fields)
    db.add(comment)
    db.flush()
    return comment


def delete_comments(db: Session, report_id: int) -> int:
    return db.query(ReportComment).filter(
        ReportComment.report_id == report_id
    ).delete(synchronize_session=False)
