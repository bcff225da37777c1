from flask import Blueprint

auth_bp = Blueprint("auth", __name__, url_prefix="/rpc/auth")
profile_bp = Blueprint("profile", __name__, url_prefix="/rpc/profile")
admin_bp = Blueprint("admin", __name__, url_prefix="/rpc/admin")

from . import admin, auth, profile  # noqa: E402,F401
