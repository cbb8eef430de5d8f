from __future__ import annotations

import io

import pytest

# API modules depend on FastAPI; skip this suite when dependency is unavailable.
pytest.importorskip("fastapi")

from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from conftest import FakeBlobStore
from ecovive.api import catalog as catalog_api
from ecovive.api import reports as reports_api
from ecovive.api import users as users_api
from ecovive.api.errors import http_error
from ecovive.schemas.report import CommentCreateRequest, StatusUpdateRequest
from ecovive.schemas.user import UserCreate
from ecovive.services.errors import EcoViveError, InvalidTransition, NotFound, StorageError, ValidationError
from ecovive.models.report import ReportStatus


def _register(db, email: str = "vecino@test.edu"):
    payload = UserCreate(name="Vecino Verde", email=email, password="password123", location=None)
    return users_api.register_user(payload, db=db)


def _create_report(db, user_id: int, blob_store, *, latitude: float = -11.8755, photo=None, anonymous=False, is_public=True):
    return reports_api.create_report(
        user_id=user_id,
        category="trash",
        title="Garbage by the park",
        description="Bags of garbage dumped next to the playground",
        latitude=latitude,
        longitude=-77.1290,
        address="Av. La Playa 123",
        priority=2,
        is_public=is_public,
        anonymous=anonymous,
        photo=photo,
        db=db,
        blob_store=blob_store,
    )


def test_http_error_mapping():
    assert http_error(ValidationError("bad")).status_code == 400
    assert http_error(InvalidTransition(ReportStatus.PENDING, ReportStatus.VERIFIED)).status_code == 409
    assert http_error(NotFound("missing")).status_code == 404
    assert http_error(StorageError("down")).status_code == 502
    assert http_error(EcoViveError("other")).status_code == 500


def test_register_and_fetch_user(db_session):
    created = _register(db_session)
    assert created.level == "Explorer"
    assert created.level_icon == "🌱"
    assert created.eco_points == 0

    fetched = users_api.get_user(created.id, db=db_session)
    assert fetched.email == "vecino@test.edu"

    with pytest.raises(HTTPException) as excinfo:
        _register(db_session)
    assert excinfo.value.status_code == 400


def test_create_report_route_and_duplicate(db_session, blob_store):
    user = _register(db_session)
    first = _create_report(db_session, user.id, blob_store)
    second = _create_report(db_session, user.id, blob_store)

    assert first.status == "PENDING"
    assert first.category == "TRASH"
    assert first.category_title == "Trash"
    assert first.eco_points == 10
    assert first.allowed_transitions == ["DUPLICATE", "IN_PROGRESS", "REJECTED"]
    assert second.status == "DUPLICATE"
    assert second.duplicate_of_id == first.id


def test_create_report_with_uploaded_photo(db_session, blob_store):
    user = _register(db_session)
    upload = UploadFile(file=io.BytesIO(b"jpeg-bytes"), filename="pile.jpg", headers=Headers({"content-type": "image/jpeg"}))
    report = _create_report(db_session, user.id, blob_store, photo=upload)

    assert report.eco_points == 15
    assert len(report.photos) == 1
    assert report.photos[0].is_primary is True
    assert report.photos[0].file_url.startswith("/uploads/")


def test_create_report_validation_error_is_400(db_session, blob_store):
    user = _register(db_session)
    with pytest.raises(HTTPException) as excinfo:
        _create_report(db_session, user.id, blob_store, latitude=123.0)
    assert excinfo.value.status_code == 400


def test_create_report_storage_error_is_502(db_session):
    user = _register(db_session)
    upload = UploadFile(file=io.BytesIO(b"jpeg-bytes"), filename="pile.jpg", headers=Headers({"content-type": "image/jpeg"}))
    with pytest.raises(HTTPException) as excinfo:
        _create_report(db_session, user.id, FakeBlobStore(fail_uploads=True), photo=upload)
    assert excinfo.value.status_code == 502


def test_anonymous_report_hides_owner(db_session, blob_store):
    user = _register(db_session)
    report = _create_report(db_session, user.id, blob_store, anonymous=True)
    assert report.user_id is None
    assert report.anonymous is True


def test_status_workflow_routes(db_session, blob_store):
    user = _register(db_session)
    report = _create_report(db_session, user.id, blob_store)

    with pytest.raises(HTTPException) as excinfo:
        reports_api.update_report_status(
            report.id, StatusUpdateRequest(status="RESOLVED", notes=None), db=db_session
        )
    assert excinfo.value.status_code == 409

    reports_api.update_report_status(
        report.id, StatusUpdateRequest(status="in_progress", notes="Crew assigned"), db=db_session
    )
    resolved = reports_api.update_report_status(
        report.id, StatusUpdateRequest(status="RESOLVED", notes=None), db=db_session
    )
    assert resolved.status == "RESOLVED"
    assert resolved.resolved_at is not None
    assert resolved.allowed_transitions == ["VERIFIED"]

    with pytest.raises(HTTPException) as excinfo:
        reports_api.update_report_status(
            report.id, StatusUpdateRequest(status="VERIFIED", notes=""), db=db_session
        )
    assert excinfo.value.status_code == 400

    profile = users_api.get_user(user.id, db=db_session)
    assert profile.eco_points == 10


def test_comments_and_listing_routes(db_session, blob_store):
    user = _register(db_session)
    report = _create_report(db_session, user.id, blob_store)

    reports_api.add_report_comment(
        report.id,
        CommentCreateRequest(user_id=user.id, content="Still there"),
        db=db_session,
    )
    reports_api.add_report_comment(
        report.id,
        CommentCreateRequest(user_id=user.id, content="Internal", is_admin_comment=True, is_public=False),
        db=db_session,
    )

    public = reports_api.get_report_comments(report.id, db=db_session)
    assert [c.content for c in public] == ["Still there"]
    detail = reports_api.get_report(report.id, db=db_session)
    assert [c.content for c in detail.comments] == ["Still there"]

    listed = reports_api.list_reports(
        category="TRASH", status=None, user_id=None, search=None, priority=None,
        min_priority=None, resolved_since=None, limit=50, offset=0, db=db_session
    )
    assert [r.id for r in listed] == [report.id]

    with pytest.raises(HTTPException) as excinfo:
        reports_api.list_reports(
            category="LITTER", status=None, user_id=None, search=None, priority=None,
            min_priority=None, resolved_since=None, limit=50, offset=0, db=db_session
        )
    assert excinfo.value.status_code == 400

    nearby = reports_api.get_nearby_reports(latitude=-11.8755, longitude=-77.1290, radius_m=500, db=db_session)
    assert [r.id for r in nearby] == [report.id]

    stats = reports_api.get_report_stats(days=30, db=db_session)
    assert stats["total_reports"] == 1
    assert stats["by_status"]["PENDING"] == 1

    mine = users_api.get_user_reports(user.id, limit=50, offset=0, db=db_session)
    assert [r.id for r in mine] == [report.id]


def _list(db, **filters):
    params = dict(
        category=None, status=None, user_id=None, search=None, priority=None,
        min_priority=None, resolved_since=None, limit=50, offset=0,
    )
    params.update(filters)
    return reports_api.list_reports(db=db, **params)


def test_private_and_anonymous_reports_stay_hidden(db_session, blob_store):
    user = _register(db_session)
    visible = _create_report(db_session, user.id, blob_store)
    hidden = _create_report(db_session, user.id, blob_store, latitude=-11.9, is_public=False, anonymous=True)
    anonymous = _create_report(db_session, user.id, blob_store, latitude=-12.0, anonymous=True)

    mine = users_api.get_user_reports(user.id, limit=50, offset=0, db=db_session)
    assert [r.id for r in mine] == [visible.id]

    by_owner = _list(db_session, user_id=user.id)
    assert [r.id for r in by_owner] == [visible.id]

    everyone = _list(db_session)
    assert {r.id for r in everyone} == {visible.id, anonymous.id}
    assert all(r.user_id is None for r in everyone if r.anonymous)

    with pytest.raises(HTTPException) as excinfo:
        reports_api.get_report(hidden.id, db=db_session)
    assert excinfo.value.status_code == 404

    with pytest.raises(HTTPException) as excinfo:
        reports_api.get_report_comments(hidden.id, db=db_session)
    assert excinfo.value.status_code == 404


def test_list_reports_search_route(db_session, blob_store):
    user = _register(db_session)
    report = _create_report(db_session, user.id, blob_store)

    assert [r.id for r in _list(db_session, search="PLAYGROUND")] == [report.id]
    assert [r.id for r in _list(db_session, search="la playa")] == [report.id]
    assert _list(db_session, search="river") == []

    with pytest.raises(HTTPException) as excinfo:
        _list(db_session, min_priority=9)
    assert excinfo.value.status_code == 400


def test_missing_report_is_404(db_session):
    with pytest.raises(HTTPException) as excinfo:
        reports_api.get_report(1234, db=db_session)
    assert excinfo.value.status_code == 404


def test_delete_routes(db_session, blob_store):
    user = _register(db_session)
    report = _create_report(db_session, user.id, blob_store)

    deleted = reports_api.delete_report(report.id, db=db_session, blob_store=blob_store)
    assert deleted["message"] == "Report deleted"
    assert deleted["report_id"] == report.id

    removed = users_api.delete_user(user.id, db=db_session, blob_store=blob_store)
    assert removed["message"] == "User deleted"
    assert removed["reports_deleted"] == 0

    with pytest.raises(HTTPException) as excinfo:
        users_api.get_user(user.id, db=db_session)
    assert excinfo.value.status_code == 404


def test_leaderboard_and_catalog_routes(db_session, blob_store):
    user = _register(db_session)
    report = _create_report(db_session, user.id, blob_store)
    reports_api.update_report_status(report.id, StatusUpdateRequest(status="IN_PROGRESS"), db=db_session)
    reports_api.update_report_status(report.id, StatusUpdateRequest(status="RESOLVED"), db=db_session)
    _register(db_session, email="second@test.edu")

    board = users_api.get_leaderboard(limit=10, db=db_session)
    assert [entry.rank for entry in board] == [1, 2]
    assert board[0].user_id == user.id
    assert board[0].eco_points == 10

    achievements = users_api.get_user_achievements(user.id, db=db_session)
    assert [a.code for a in achievements] == ["first_report"]

    assert len(catalog_api.get_categories()) == 10
    assert len(catalog_api.get_statuses()) == 6
    assert catalog_api.get_levels()[-1]["level"] == "Guardian"
