from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from ecovive.models.report import Report, ReportCategory, ReportStatus
from ecovive.models.user import User
from ecovive.services import proximity

NOW = datetime(2026, 3, 1, 12, 0, 0)
BASE_LAT, BASE_LON = -11.8755, -77.1290


def _create_user(db) -> User:
    user = User(name="Geo User", email="geo@test.edu", password_hash="hash", is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _add_report(db, user, *, lat, lon, category=ReportCategory.TRASH, created_at=NOW, is_public=True,
                status=ReportStatus.PENDING):
    report = Report(
        user_id=user.id,
        category=category,
        title="Garbage pile",
        description="Garbage piled up next to the park",
        latitude=lat,
        longitude=lon,
        status=status,
        eco_points=10,
        is_public=is_public,
        created_at=created_at,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def test_haversine_known_distances():
    assert proximity.haversine_m(BASE_LAT, BASE_LON, BASE_LAT, BASE_LON) == 0
    # One degree of latitude is about 111.2 km on a spherical earth.
    assert proximity.haversine_m(0, 0, 1, 0) == pytest.approx(111195, rel=1e-3)
    assert proximity.haversine_m(0, 0, 0, 180) == pytest.approx(20015087, rel=1e-3)


def test_bounding_box_contains_radius():
    min_lat, max_lat, min_lon, max_lon = proximity.bounding_box(BASE_LAT, BASE_LON, 100)
    assert min_lat < BASE_LAT < max_lat
    assert min_lon < BASE_LON < max_lon
    assert proximity.haversine_m(BASE_LAT, BASE_LON, max_lat, BASE_LON) >= 100


def test_bounding_box_drops_longitude_near_pole_and_antimeridian():
    assert proximity.bounding_box(89.9999, 0, 1000)[2:] == (None, None)
    assert proximity.bounding_box(0, 179.9999, 1000)[2:] == (None, None)


def test_find_duplicates_within_radius_same_category(db_session):
    user = _create_user(db_session)
    near = _add_report(db_session, user, lat=BASE_LAT + 0.0005, lon=BASE_LON)
    _add_report(db_session, user, lat=BASE_LAT + 0.0018, lon=BASE_LON)
    _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, category=ReportCategory.NOISE)

    matches = proximity.find_duplicates(
        db_session, ReportCategory.TRASH, BASE_LAT, BASE_LON, 100, NOW - timedelta(days=7)
    )
    assert [r.id for r in matches] == [near.id]


def test_find_duplicates_respects_time_window(db_session):
    user = _create_user(db_session)
    _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, created_at=NOW - timedelta(days=8))
    recent = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, created_at=NOW - timedelta(days=1))

    matches = proximity.find_duplicates(
        db_session, ReportCategory.TRASH, BASE_LAT, BASE_LON, 100, NOW - timedelta(days=7)
    )
    assert [r.id for r in matches] == [recent.id]


def test_find_duplicates_oldest_first_and_exclusion(db_session):
    user = _create_user(db_session)
    older = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, created_at=NOW - timedelta(hours=5))
    newer = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, created_at=NOW - timedelta(hours=1))
    since = NOW - timedelta(days=7)

    matches = proximity.find_duplicates(db_session, ReportCategory.TRASH, BASE_LAT, BASE_LON, 50, since)
    assert [r.id for r in matches] == [older.id, newer.id]

    matches = proximity.find_duplicates(
        db_session, ReportCategory.TRASH, BASE_LAT, BASE_LON, 50, since, exclude_id=older.id
    )
    assert [r.id for r in matches] == [newer.id]


def test_find_duplicates_skips_rejected_and_flagged_reports(db_session):
    user = _create_user(db_session)
    rejected = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, status=ReportStatus.REJECTED)
    flagged = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, status=ReportStatus.DUPLICATE)
    resolved = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, status=ReportStatus.RESOLVED)
    since = NOW - timedelta(days=7)

    matches = proximity.find_duplicates(db_session, ReportCategory.TRASH, BASE_LAT, BASE_LON, 50, since)
    assert [r.id for r in matches] == [resolved.id]

    matches = proximity.find_duplicates(
        db_session, ReportCategory.TRASH, BASE_LAT, BASE_LON, 50, since, ignore_statuses=()
    )
    assert {r.id for r in matches} == {rejected.id, flagged.id, resolved.id}


def test_negative_radius_rejected(db_session):
    with pytest.raises(ValueError):
        proximity.find_duplicates(db_session, ReportCategory.TRASH, 0, 0, -1, NOW)
    with pytest.raises(ValueError):
        proximity.find_nearby(db_session, 0, 0, -1)


def test_find_nearby_any_category_public_newest_first(db_session):
    user = _create_user(db_session)
    first = _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, created_at=NOW - timedelta(days=30))
    second = _add_report(
        db_session, user, lat=BASE_LAT + 0.001, lon=BASE_LON, category=ReportCategory.SOIL, created_at=NOW
    )
    _add_report(db_session, user, lat=BASE_LAT, lon=BASE_LON, is_public=False)
    _add_report(db_session, user, lat=BASE_LAT + 0.05, lon=BASE_LON)

    nearby = proximity.find_nearby(db_session, BASE_LAT, BASE_LON, 500)
    assert [r.id for r in nearby] == [second.id, first.id]


def test_find_duplicates_across_antimeridian(db_session):
    user = _create_user(db_session)
    across = _add_report(db_session, user, lat=0.0, lon=-179.9999)

    matches = proximity.find_duplicates(
        db_session, ReportCategory.TRASH, 0.0, 179.9999, 100, NOW - timedelta(days=7)
    )
    assert [r.id for r in matches] == [across.id]
