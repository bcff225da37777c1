from flask import current_app, jsonify

from zelene.services import stats
from zelene.services.policy import admin_required

from . import bp


@bp.get("/api/admin/user-stats")
@admin_required
def user_stats():
    try:
        return jsonify(stats.user_stats())
    except Exception:
        current_app.logger.exception("user stats failed", extra={"event": "user_stats_failed"})
        return jsonify({"error": "Failed to fetch stats"}), 500
