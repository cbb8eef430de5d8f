# ecovive/services/status_machine.py
"""
Report Status Machine

Validates and applies lifecycle transitions for a report. The transition
graph and the per-status display metadata are read-only module tables.
"""

import logging
from datetime import datetime
from types import MappingProxyType
from typing import Dict, FrozenSet, List, NamedTuple, Optional

from ecovive.config import settings
from ecovive.models.report import Report, ReportStatus
from ecovive.services.errors import InvalidTransition, ValidationError
from ecovive.utils.clock import utcnow

logger = logging.getLogger(__name__)


class StatusInfo(NamedTuple):
    title: str
    icon: str
    description: str
    user_message: str
    color: str


# =====================================
# TRANSITION TABLE
# =====================================

TRANSITIONS: "MappingProxyType[ReportStatus, FrozenSet[ReportStatus]]" = MappingProxyType({
    ReportStatus.PENDING: frozenset({
        ReportStatus.IN_PROGRESS, ReportStatus.REJECTED, ReportStatus.DUPLICATE,
    }),
    ReportStatus.IN_PROGRESS: frozenset({
        ReportStatus.RESOLVED, ReportStatus.VERIFIED, ReportStatus.REJECTED,
    }),
    ReportStatus.RESOLVED: frozenset({ReportStatus.VERIFIED}),
    ReportStatus.VERIFIED: frozenset(),
    ReportStatus.REJECTED: frozenset({ReportStatus.PENDING}),
    ReportStatus.DUPLICATE: frozenset({ReportStatus.PENDING}),
})

# Statuses at or past resolution; resolved_at is set exactly for these.
RESOLVED_STATES = frozenset({ReportStatus.RESOLVED, ReportStatus.VERIFIED})


STATUS_INFO = MappingProxyType({
    ReportStatus.PENDING: StatusInfo(
        "Pending", "⏳", "The report is waiting for review",
        "Your report is being reviewed by our team. We will let you know once it is processed.",
        "#FF9800",
    ),
    ReportStatus.IN_PROGRESS: StatusInfo(
        "In Progress", "🔄", "The report is being processed",
        "Your report is being handled by the competent authorities. Thank you for your help.",
        "#2196F3",
    ),
    ReportStatus.RESOLVED: StatusInfo(
        "Resolved", "✅", "The problem has been solved",
        "Great news! The reported problem has been solved. Thanks for helping the environment.",
        "#4CAF50",
    ),
    ReportStatus.VERIFIED: StatusInfo(
        "Verified", "🔍", "The report has been verified by the authorities",
        "Your report has been verified and confirmed by the authorities. Good job!",
        "#9C27B0",
    ),
    ReportStatus.REJECTED: StatusInfo(
        "Rejected", "❌", "The report did not meet the review criteria",
        "Unfortunately your report does not meet our criteria. You can file a new one with more details.",
        "#F44336",
    ),
    ReportStatus.DUPLICATE: StatusInfo(
        "Duplicate", "📋", "A similar report already exists for this location",
        "A similar report already exists for this location. Your contribution is appreciated.",
        "#9E9E9E",
    ),
})


# =====================================
# PREDICATES
# =====================================

def can_transition(current: ReportStatus, target: ReportStatus) -> bool:
    """Pure lookup in the transition table. Self-loops are never allowed."""
    return target in TRANSITIONS.get(current, frozenset())


def allowed_targets(current: ReportStatus) -> List[ReportStatus]:
    return sorted(TRANSITIONS.get(current, frozenset()), key=lambda s: s.value)


def is_terminal(status: ReportStatus) -> bool:
    return not TRANSITIONS.get(status)


def parse_status(name) -> ReportStatus:
    if isinstance(name, ReportStatus):
        return name
    normalized = str(name or "").strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return ReportStatus(normalized)
    except ValueError:
        raise ValidationError(f"Unknown report status: {name!r}") from None


# =====================================
# APPLY
# =====================================

def apply_transition(
    report: Report,
    target: ReportStatus,
    notes: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
    require_verification_notes: Optional[bool] = None,
) -> Report:
    """
    Move `report` to `target` and apply the status side effects.

    Raises:
        InvalidTransition: target is not reachable from the current status
        ValidationError: verification without notes (when notes are required)

    The report is left untouched when either error is raised.
    """
    current = report.status or ReportStatus.PENDING
    if not can_transition(current, target):
        raise InvalidTransition(current, target)

    cleaned_notes = (notes or "").strip() or None
    if require_verification_notes is None:
        require_verification_notes = settings.REQUIRE_VERIFICATION_NOTES
    if target == ReportStatus.VERIFIED and require_verification_notes and not cleaned_notes:
        raise ValidationError("Verification notes are required to verify a report")

    now = now or utcnow()
    report.status = target

    if target in RESOLVED_STATES and report.resolved_at is None:
        report.resolved_at = now

    if target == ReportStatus.VERIFIED:
        report.verified = True
        report.verified_at = now
        report.verification_notes = cleaned_notes
    elif target == ReportStatus.PENDING:
        # Reconsideration starts a fresh review cycle.
        report.resolved_at = None
        report.verified = False
        report.verified_at = None
        report.duplicate_of_id = None

    if cleaned_notes and target != ReportStatus.VERIFIED:
        report.admin_notes = (
            f"{report.admin_notes}\n[{target.value}] {cleaned_notes}"
            if report.admin_notes
            else f"[{target.value}] {cleaned_notes}"
        )

    logger.info(
        "Report %s moved %s -> %s",
        report.id,
        current.value,
        target.value,
    )
    return report


def describe_statuses() -> List[Dict]:
    return [
        {
            "status": status.value,
            **info._asdict(),
            "allowed_transitions": [s.value for s in allowed_targets(status)],
            "terminal": is_terminal(status),
        }
        for status, info in STATUS_INFO.items()
    ]
