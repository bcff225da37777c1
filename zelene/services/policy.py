from functools import wraps
from flask_login import current_user
from zelene.errors import ProcedureError
from zelene.models.user import ADMIN_ROLES, ROLE_TENANT_ADMIN

def _session_user():
    if not getattr(current_user, "is_authenticated", False):
        raise ProcedureError("UNAUTHORIZED", "Sign in required")
    if not getattr(current_user, "is_active", True):
        raise ProcedureError("UNAUTHORIZED", "Account disabled")
    return current_user

def is_admin(user=None) -> bool:
    user = user if user is not None else current_user
    return bool(getattr(user, "is_authenticated", False) and getattr(user, "role", None) in ADMIN_ROLES)

def login_required(fn):
    """Protected procedure: any signed-in, active user."""
    @wraps(fn)
    def _wrap(*args, **kwargs):
        _session_user()
        return fn(*args, **kwargs)
    return _wrap

def role_required(*roles):
    """Validate session, then the caller's role against this procedure's allow-list."""
    allowed = frozenset(roles)
    if not allowed:
        raise ValueError("role_required needs at least one role")

    def deco(fn):
        @wraps(fn)
        def _wrap(*args, **kwargs):
            user = _session_user()
            if user.role not in allowed:
                raise ProcedureError("FORBIDDEN", "Insufficient role")
            return fn(*args, **kwargs)
        _wrap.allowed_roles = allowed
        return _wrap
    return deco

admin_required = role_required(*ADMIN_ROLES)
tenant_admin_required = role_required(ROLE_TENANT_ADMIN)
