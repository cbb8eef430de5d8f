# ecovive/models/report.py
import enum

from sqlalchemy import (
    Column, Integer, String, Text, Float, Boolean, BigInteger, ForeignKey, TIMESTAMP, Enum,
)
from sqlalchemy.orm import relationship

from ecovive.database import Base
from ecovive.utils.clock import utcnow


class ReportCategory(str, enum.Enum):
    TRASH = "TRASH"
    POLLUTION = "POLLUTION"
    DEFORESTATION = "DEFORESTATION"
    WATER_POLLUTION = "WATER_POLLUTION"
    AIR_POLLUTION = "AIR_POLLUTION"
    WILDLIFE = "WILDLIFE"
    NOISE = "NOISE"
    SOIL = "SOIL"
    ANIMAL = "ANIMAL"
    OTHER = "OTHER"


class ReportStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    RESOLVED = "RESOLVED"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"
    DUPLICATE = "DUPLICATE"


# ---------------- REPORT ----------------
class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category = Column(Enum(ReportCategory), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False, index=True)
    longitude = Column(Float, nullable=False, index=True)
    address = Column(String(255))
    status = Column(Enum(ReportStatus), nullable=False, default=ReportStatus.PENDING, index=True)
    eco_points = Column(Integer, nullable=False, default=0)
    priority = Column(Integer, nullable=False, default=1)  # 1=low, 2=medium, 3=high, 4=critical
    verified = Column(Boolean, nullable=False, default=False)
    verification_notes = Column(Text)
    admin_notes = Column(Text)
    resolved_at = Column(TIMESTAMP, nullable=True)
    verified_at = Column(TIMESTAMP, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    anonymous = Column(Boolean, nullable=False, default=False)
    duplicate_of_id = Column(Integer, ForeignKey("reports.id", ondelete="SET NULL"), nullable=True)
    points_credited = Column(Boolean, nullable=False, default=False)
    version_id = Column(Integer, nullable=False)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False, index=True)
    updated_at = Column(TIMESTAMP, default=utcnow, onupdate=utcnow)

    # Non-owning reference; photos and comments are stored keyed by report_id.
    user = relationship("User", foreign_keys=[user_id])
    duplicate_of = relationship("Report", remote_side=[id], foreign_keys=[duplicate_of_id])

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self):
        return (
            f"<Report id={self.id} category={self.category} status={self.status} "
            f"eco_points={self.eco_points}>"
        )


# ---------------- PHOTOS ----------------
class ReportPhoto(Base):
    __tablename__ = "report_photos"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_filename = Column(String(255), nullable=False)
    file_url = Column(String(512), nullable=False)
    file_size = Column(BigInteger)
    content_type = Column(String(100))
    is_primary = Column(Boolean, nullable=False, default=False)
    description = Column(String(255))
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)


# ---------------- COMMENTS ----------------
class ReportComment(Base):
    __tablename__ = "report_comments"

    id = Column(Integer, primary_key=True, index=True)
    report_id = Column(Integer, ForeignKey("reports.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_admin_comment = Column(Boolean, nullable=False, default=False)
    is_public = Column(Boolean, nullable=False, default=True)
    created_at = Column(TIMESTAMP, default=utcnow, nullable=False)
    updated_at = Column(TIMESTAMP, default=utcnow, onupdate=utcnow)

    user = relationship("User", foreign_keys=[user_id])
