from pydantic import Field

from zelene.schemas.base import CamelModel
from zelene.services import stats
from zelene.services.policy import admin_required
from zelene.services.rpc import parse_input, respond

from . import admin_stats_bp, weekly_stats_bp


class DailyStatsIn(CamelModel):
    days: int = Field(7, ge=1, le=30)


@admin_stats_bp.route("/getDailyStats", methods=("GET", "POST"))
@admin_required
def get_daily_stats():
    return respond(stats.daily_stats(parse_input(DailyStatsIn).days))


@weekly_stats_bp.route("/getWeeklyStats", methods=("GET", "POST"))
@admin_required
def get_weekly_stats():
    return respond(stats.weekly_stats())
