from flask import Blueprint

admin_stats_bp = Blueprint("admin_stats", __name__, url_prefix="/rpc/adminStats")
weekly_stats_bp = Blueprint("weekly_stats", __name__, url_prefix="/rpc/weeklyStats")

from . import routes  # noqa: E402,F401
