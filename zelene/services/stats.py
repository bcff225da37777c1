"""Dashboard counters. Weeks start on Sunday; all timestamps are naive UTC."""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func, select

from zelene.extensions import db
from zelene.models import OPEN_STATUSES, ContactQuery, Feedback, Post, SupportRequest, TechnicalIssue, User
from zelene.models.query import STATUS_RESOLVED
from zelene.models.user import ROLE_MEMBER
from zelene.utils.helpers import end_of_day, end_of_week, start_of_day, start_of_week, utcnow

PUBLIC_QUERY_MODELS = (ContactQuery, Feedback, SupportRequest)


def _count(model, *where) -> int:
    return db.session.execute(select(func.count()).select_from(model).where(*where)).scalar_one()


def _between(column, start, end):
    return (column >= start, column <= end)


def daily_stats(days: int = 7, now: Optional[datetime] = None) -> list[dict]:
    """Running totals up to the end of each of the last `days` days, oldest first."""
    now = now or utcnow()
    stats = []
    for offset in range(days - 1, -1, -1):
        day = now - timedelta(days=offset)
        end = end_of_day(day)
        open_by_model = {
            model: _count(model, model.created_at <= end, model.status.in_(OPEN_STATUSES))
            for model in (*PUBLIC_QUERY_MODELS, TechnicalIssue)
        }
        stats.append({
            "date": start_of_day(day).strftime("%Y-%m-%d"),
            "newMembers": _count(User, User.joined <= end, User.role == ROLE_MEMBER),
            "openQueries": sum(open_by_model.values()),
            "newPosts": _count(Post, Post.created_at <= end),
            "technicalIssues": open_by_model[TechnicalIssue],
        })
    return stats


def _week_counts(start, end) -> dict:
    return {
        "members": _count(User, *_between(User.joined, start, end)),
        "queries": sum(_count(m, *_between(m.created_at, start, end)) for m in PUBLIC_QUERY_MODELS),
        "posts": _count(Post, *_between(Post.created_at, start, end)),
        "technicalIssues": _count(TechnicalIssue, *_between(TechnicalIssue.created_at, start, end)),
    }


def weekly_stats(now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    last_week = now - timedelta(weeks=1)
    return {
        "totalUsers": _count(User),
        "totalPosts": _count(Post),
        "thisWeek": _week_counts(start_of_week(now), end_of_week(now)),
        "lastWeek": _week_counts(start_of_week(last_week), end_of_week(last_week)),
    }


def user_stats(now: Optional[datetime] = None) -> dict:
    """Counters behind GET /api/admin/user-stats."""
    now = now or utcnow()
    this_week = start_of_week(now)
    last_week = this_week - timedelta(days=7)

    def open_queries(start, end):
        return sum(
            _count(m, m.status.in_(OPEN_STATUSES), m.created_at >= start, m.created_at < end)
            for m in (*PUBLIC_QUERY_MODELS, TechnicalIssue)
        )

    def members(start, end):
        return _count(User, User.role == ROLE_MEMBER, User.joined >= start, User.joined < end)

    def posts(start, end):
        return _count(Post, Post.published_at >= start, Post.published_at < end)

    def alerts(start, end):
        return _count(
            TechnicalIssue,
            TechnicalIssue.status != STATUS_RESOLVED,
            TechnicalIssue.created_at >= start,
            TechnicalIssue.created_at < end,
        )

    # Current-week windows are open-ended so rows stamped a moment after `now` still count
    horizon = end_of_week(now)
    return {
        "totalUsers": _count(User, User.role == ROLE_MEMBER),
        "activeThisWeek": members(this_week, horizon),
        "activeLastWeek": members(last_week, this_week),
        "startOfThisWeek": this_week.isoformat(),
        "startOfLastWeek": last_week.isoformat(),
        "openQueriesThisWeek": open_queries(this_week, horizon),
        "openQueriesLastWeek": open_queries(last_week, this_week),
        "postsThisWeek": posts(this_week, horizon),
        "postsLastWeek": posts(last_week, this_week),
        "alertsThisWeek": alerts(this_week, horizon),
        "alertsLastWeek": alerts(last_week, this_week),
    }
