from datetime import datetime

import pytest

from zelene.extensions import db
from zelene.models import ContactQuery, Post, SupportRequest, TechnicalIssue, User
from zelene.services import stats

# A Wednesday; its week starts on Sunday 2026-10-11
NOW = datetime(2026, 10, 14, 12, 0)


def _user(username, role, joined):
    user = User(username=username, email=f"{username}@example.com", role=role, joined=joined)
    user.set_password("secret12")
    db.session.add(user)
    return user


def _issue(status, created_at):
    db.session.add(TechnicalIssue(
        issue_type="DEVICE", severity="LOW", title="t", description="d" * 10,
        steps_to_reproduce="s" * 10, expected_behavior="e" * 10, attachments=[],
        status=status, created_at=created_at,
    ))


@pytest.fixture()
def dataset(app):
    with app.app_context():
        member = _user("fresh", "MEMBER", datetime(2026, 10, 12, 9))
        _user("older", "MEMBER", datetime(2026, 10, 5, 9))
        _user("boss", "ADMIN", datetime(2026, 10, 13, 9))
        db.session.add(ContactQuery(
            name="n", organization="o", email="n@example.com", phone="1",
            inquiry_type="GENERAL", message="m" * 10, created_at=datetime(2026, 10, 13, 8),
        ))
        db.session.add(SupportRequest(
            category="ACCOUNT", subject="s", description="d" * 10, priority="LOW",
            status="RESOLVED", created_at=datetime(2026, 10, 6, 8),
        ))
        _issue("IN_PROGRESS", datetime(2026, 10, 12, 8))
        _issue("NEW", datetime(2026, 10, 7, 8))
        db.session.flush()
        stamp = datetime(2026, 10, 13, 10)
        db.session.add(Post(
            title="p", excerpt="e", content="c", created_by_id=member.id,
            published_at=stamp, created_at=stamp, updated_at=stamp,
        ))
        db.session.commit()


def test_user_stats_compare_this_and_last_week(app, dataset):
    with app.app_context():
        result = stats.user_stats(now=NOW)

    assert result == {
        "totalUsers": 2,
        "activeThisWeek": 1,
        "activeLastWeek": 1,
        "startOfThisWeek": "2026-10-11T00:00:00",
        "startOfLastWeek": "2026-10-04T00:00:00",
        "openQueriesThisWeek": 2,
        "openQueriesLastWeek": 1,
        "postsThisWeek": 1,
        "postsLastWeek": 0,
        "alertsThisWeek": 1,
        "alertsLastWeek": 1,
    }


def test_weekly_stats(app, dataset):
    with app.app_context():
        result = stats.weekly_stats(now=NOW)

    assert result["totalUsers"] == 3
    assert result["totalPosts"] == 1
    assert result["thisWeek"] == {"members": 2, "queries": 1, "posts": 1, "technicalIssues": 1}
    assert result["lastWeek"] == {"members": 1, "queries": 1, "posts": 0, "technicalIssues": 1}


def test_daily_stats_are_running_totals(app, dataset):
    with app.app_context():
        result = stats.daily_stats(3, now=NOW)

    assert [d["date"] for d in result] == ["2026-10-12", "2026-10-13", "2026-10-14"]
    assert result[0] == {"date": "2026-10-12", "newMembers": 2, "openQueries": 2, "newPosts": 0, "technicalIssues": 2}
    assert result[1] == {"date": "2026-10-13", "newMembers": 2, "openQueries": 3, "newPosts": 1, "technicalIssues": 2}
    assert result[2] == result[1] | {"date": "2026-10-14"}


def test_stats_routes_are_admin_only(client, make_user, login, rpc_get):
    assert rpc_get("/rpc/adminStats/getDailyStats").status_code == 401
    assert client.get("/api/admin/user-stats").status_code == 401

    login(make_user())
    assert rpc_get("/rpc/weeklyStats/getWeeklyStats").status_code == 403

    login(make_user(role="ADMIN"))
    assert len(rpc_get("/rpc/adminStats/getDailyStats").get_json()) == 7
    assert len(rpc_get("/rpc/adminStats/getDailyStats", {"days": 30}).get_json()) == 30
    assert rpc_get("/rpc/adminStats/getDailyStats", {"days": 31}).status_code == 400
    assert rpc_get("/rpc/weeklyStats/getWeeklyStats").get_json()["totalUsers"] == 2
    assert client.get("/api/admin/user-stats").get_json()["totalUsers"] == 1


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}
