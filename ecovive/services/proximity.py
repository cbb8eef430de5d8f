# ecovive/services/proximity.py
"""
Proximity Index

Finds reports near a coordinate using a bounding-box prefilter in the
database followed by an exact great-circle distance check.
"""

import math
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ecovive.crud import report as report_crud
from ecovive.models.report import Report, ReportCategory, ReportStatus

EARTH_RADIUS_M = 6371000.0

# Slack added to the prefilter box so float rounding never drops a match
# that sits exactly on the radius.
_BOX_EPSILON_DEG = 1e-9

# Reports in these statuses never count as the original of a new report.
NON_MATCHING_STATUSES = frozenset({ReportStatus.REJECTED, ReportStatus.DUPLICATE})


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dl = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(
    latitude: float,
    longitude: float,
    radius_m: float,
) -> Tuple[float, float, Optional[float], Optional[float]]:
    """
    Latitude/longitude box that contains every point within radius_m.

    Longitude bounds are None when the box reaches a pole or crosses the
    antimeridian; the caller then filters on latitude only.
    """
    angular = radius_m / EARTH_RADIUS_M
    dlat = math.degrees(angular) + _BOX_EPSILON_DEG
    min_lat = latitude - dlat
    max_lat = latitude + dlat
    if min_lat <= -90.0 or max_lat >= 90.0:
        return max(min_lat, -90.0), min(max_lat, 90.0), None, None

    ratio = math.sin(angular) / math.cos(math.radians(latitude))
    if ratio >= 1.0:
        return min_lat, max_lat, None, None
    dlon = math.degrees(math.asin(ratio)) + _BOX_EPSILON_DEG
    min_lon = longitude - dlon
    max_lon = longitude + dlon
    if min_lon < -180.0 or max_lon > 180.0:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lon, max_lon


def _within(
    candidates: List[Report],
    latitude: float,
    longitude: float,
    radius_m: float,
) -> List[Report]:
    return [
        r for r in candidates
        if haversine_m(latitude, longitude, r.latitude, r.longitude) <= radius_m
    ]


def find_duplicates(
    db: Session,
    category: ReportCategory,
    latitude: float,
    longitude: float,
    radius_m: float,
    since: datetime,
    exclude_id: Optional[int] = None,
    ignore_statuses: Iterable[ReportStatus] = NON_MATCHING_STATUSES,
) -> List[Report]:
    """
    Existing reports of the same category created at or after `since`
    within `radius_m` meters of the coordinate, oldest first.

    Rejected reports and reports already flagged as duplicates are skipped
    unless `ignore_statuses` says otherwise.
    """
    if radius_m < 0:
        raise ValueError("radius_m must be non-negative")
    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_m)
    candidates = report_crud.find_in_bounding_box(
        db,
        min_lat=min_lat,
        max_lat=max_lat,
        min_lon=min_lon,
        max_lon=max_lon,
        category=category,
        since=since,
        exclude_id=exclude_id,
        exclude_statuses=ignore_statuses,
    )
    return _within(candidates, latitude, longitude, radius_m)


def find_nearby(
    db: Session,
    latitude: float,
    longitude: float,
    radius_m: float,
    public_only: bool = True,
) -> List[Report]:
    """Reports of any category within radius_m meters, newest first."""
    if radius_m < 0:
        raise ValueError("radius_m must be non-negative")
    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_m)
    candidates = report_crud.find_in_bounding_box(
        db,
        min_lat=min_lat,
        max_lat=max_lat,
        min_lon=min_lon,
        max_lon=max_lon,
        public_only=public_only,
    )
    matches = _within(candidates, latitude, longitude, radius_m)
    matches.reverse()
    return matches
