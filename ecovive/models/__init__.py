# ecovive/models/__init__.py
# Import models in dependency order
from .user import User, Achievement
from .report import Report, ReportPhoto, ReportComment, ReportCategory, ReportStatus

__all__ = [
    "User",
    "Achievement",
    "Report",
    "ReportPhoto",
    "ReportComment",
    "ReportCategory",
    "ReportStatus",
]
