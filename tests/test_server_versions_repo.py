from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from registry_api.db.models import ServerVersionRecord
from registry_api.errors import ConstraintError, NotFoundError
from registry_api.repo.server_versions import ServerVersionFilter, ServerVersionRepository

BASE_TIME = datetime(2026, 10, 1, tzinfo=timezone.utc)


def _record(
    name: str,
    version: str,
    *,
    is_latest: bool = True,
    search_text: str | None = None,
    minutes: int = 0,
) -> ServerVersionRecord:
    stamp = BASE_TIME + timedelta(minutes=minutes)
    return ServerVersionRecord(
        server_name=name,
        description=None,
        title=None,
        version=version,
        server_json={"name": name, "version": version},
        meta_json={},
        published_at=stamp,
        updated_at=stamp,
        is_latest=is_latest,
        search_text=search_text if search_text is not None else name.lower(),
    )


def _insert_all(session_factory, repo: ServerVersionRepository, *records) -> list[int]:
    with session_factory() as session, session.begin():
        return [repo.insert(record, session=session) for record in records]


def test_insert_assigns_increasing_ids(session_factory, repo):
    ids = _insert_all(session_factory, repo, _record("a", "1"), _record("b", "1"), _record("c", "1"))

    assert ids == sorted(ids)
    assert len(set(ids)) == 3


def test_duplicate_name_version_is_a_constraint_error(session_factory, repo):
    _insert_all(session_factory, repo, _record("a", "1.0.0"))

    with pytest.raises(ConstraintError):
        _insert_all(session_factory, repo, _record("a", "1.0.0", is_latest=False))

    with session_factory() as session:
        assert len(repo.find_all_by_name(name="a", session=session)) == 1


def test_update_by_id(session_factory, repo):
    (row_id,) = _insert_all(session_factory, repo, _record("a", "1.0.0"))

    with session_factory() as session, session.begin():
        repo.update_by_id(row_id, session=session, is_latest=False, title="Alpha")

    with session_factory() as session:
        record = repo.find_by_name_version(name="a", version="1.0.0", session=session)
        assert record is not None
        assert record.is_latest is False
        assert record.title == "Alpha"


def test_update_missing_row_raises_not_found(session_factory, repo):
    with session_factory() as session, session.begin():
        with pytest.raises(NotFoundError):
            repo.update_by_id(999, session=session, is_latest=False)


def test_update_rejects_unknown_fields(session_factory, repo):
    (row_id,) = _insert_all(session_factory, repo, _record("a", "1.0.0"))

    with session_factory() as session:
        with pytest.raises(TypeError):
            repo.update_by_id(row_id, session=session, server_name="b")


def test_find_latest_by_name(session_factory, repo):
    _insert_all(
        session_factory,
        repo,
        _record("a", "1.0.0", is_latest=False),
        _record("a", "2.0.0", is_latest=True),
        _record("b", "1.0.0", is_latest=True),
    )

    with session_factory() as session:
        latest = repo.find_latest_by_name(name="a", session=session)
        assert latest is not None and latest.version == "2.0.0"
        assert repo.find_latest_by_name(name="missing", session=session) is None
        assert [r.version for r in repo.list_latest_by_name(name="a", session=session)] == ["2.0.0"]


def test_find_all_by_name_orders_by_publish_time_then_version(session_factory, repo):
    _insert_all(
        session_factory,
        repo,
        _record("a", "1.0.0", is_latest=False, minutes=0),
        _record("a", "1.10.0", is_latest=False, minutes=5),
        _record("a", "1.9.0", is_latest=True, minutes=5),
        _record("b", "3.0.0", minutes=10),
    )

    with session_factory() as session:
        versions = [r.version for r in repo.find_all_by_name(name="a", session=session)]

    # same publish time falls back to lexicographic version order
    assert versions == ["1.9.0", "1.10.0", "1.0.0"]


def test_query_page_defaults_to_latest_only(session_factory, repo):
    _insert_all(
        session_factory,
        repo,
        _record("a", "1.0.0", is_latest=False),
        _record("a", "2.0.0"),
        _record("b", "1.0.0"),
    )

    with session_factory() as session:
        rows = repo.query_page(filters=ServerVersionFilter(), after_id=None, limit=10, session=session)

    assert [(r.server_name, r.version) for r in rows] == [("a", "2.0.0"), ("b", "1.0.0")]


def test_query_page_exact_version_overrides_latest(session_factory, repo):
    _insert_all(
        session_factory,
        repo,
        _record("a", "1.0.0", is_latest=False),
        _record("a", "2.0.0"),
        _record("b", "1.0.0"),
    )

    with session_factory() as session:
        rows = repo.query_page(
            filters=ServerVersionFilter(latest_only=True, version="1.0.0"),
            after_id=None,
            limit=10,
            session=session,
        )

    assert [(r.server_name, r.version) for r in rows] == [("a", "1.0.0"), ("b", "1.0.0")]


def test_query_page_after_id_and_limit(session_factory, repo):
    ids = _insert_all(session_factory, repo, *[_record(f"s{i}", "1") for i in range(5)])

    with session_factory() as session:
        rows = repo.query_page(filters=ServerVersionFilter(), after_id=ids[1], limit=2, session=session)

    assert [r.id for r in rows] == ids[2:4]


def test_query_page_search_is_literal_substring(session_factory, repo):
    _insert_all(
        session_factory,
        repo,
        _record("a", "1", search_text="weather 100% uptime"),
        _record("b", "1", search_text="weather 1000 uptime"),
        _record("c", "1", search_text="maps_and_routes"),
        _record("d", "1", search_text="mapsXandXroutes"),
    )

    with session_factory() as session:
        percent = repo.query_page(
            filters=ServerVersionFilter(search="100%"), after_id=None, limit=10, session=session
        )
        underscore = repo.query_page(
            filters=ServerVersionFilter(search="maps_and"), after_id=None, limit=10, session=session
        )
        mixed_case = repo.query_page(
            filters=ServerVersionFilter(search="WEATHER"), after_id=None, limit=10, session=session
        )

    assert [r.server_name for r in percent] == ["a"]
    assert [r.server_name for r in underscore] == ["c"]
    assert [r.server_name for r in mixed_case] == ["a", "b"]


def test_query_page_updated_since(session_factory, repo):
    _insert_all(
        session_factory,
        repo,
        _record("old", "1", minutes=0),
        _record("edge", "1", minutes=30),
        _record("new", "1", minutes=60),
    )

    with session_factory() as session:
        rows = repo.query_page(
            filters=ServerVersionFilter(updated_since=BASE_TIME + timedelta(minutes=30)),
            after_id=None,
            limit=10,
            session=session,
        )

    assert [r.server_name for r in rows] == ["edge", "new"]
