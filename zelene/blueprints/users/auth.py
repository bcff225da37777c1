from flask import current_app, request, session
from flask_login import current_user, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from zelene.extensions import limiter
from zelene.schemas.users import LoginIn, RegisterIn, UserOut
from zelene.services import users
from zelene.services.policy import login_required
from zelene.services.rpc import parse_input, respond

from . import auth_bp as bp


def _login_scope():
    # Per-account bucket; the default key already covers per-IP
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    username = str(data.get("username") or "").strip().lower()
    return f"login-user:{username or 'missing'}"


@bp.get("/csrf")
def csrf_token():
    return respond({"csrfToken": generate_csrf()})


@bp.post("/register")
@limiter.limit("5 per minute; 30 per hour")
def register():
    return respond(users.register(parse_input(RegisterIn)), 201)


@bp.post("/login")
@limiter.limit("10 per minute; 100 per hour")
@limiter.limit("5 per minute; 20 per hour", key_func=_login_scope)
def login():
    user = users.authenticate(parse_input(LoginIn))
    session.clear()
    login_user(user)
    current_app.logger.info("login", extra={"event": "login", "user_id": user.id})
    return respond({"success": True, "user": UserOut.model_validate(user).dump()})


@bp.post("/logout")
@login_required
def logout():
    user_id = current_user.id
    logout_user()
    session.clear()
    current_app.logger.info("logout", extra={"event": "logout", "user_id": user_id})
    return respond({"success": True})


@bp.get("/session")
def whoami():
    if not current_user.is_authenticated:
        return respond({"user": None})
    return respond({"user": UserOut.model_validate(current_user._get_current_object()).dump()})
