from flask import current_app
from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError

from zelene.errors import ProcedureError
from zelene.extensions import db
from zelene.models import Post, RelatedPost, User
from zelene.models.user import ROLE_ADMIN, ROLE_MEMBER, ROLE_TENANT_ADMIN
from zelene.schemas.users import CreateAdminIn, CreateUserIn, LoginIn, RegisterIn, UpdateUserIn, UserOut, UserPageIn
from zelene.services import captcha
from zelene.utils.helpers import total_pages

CONFLICT_MESSAGE = "Username or email already exists"


def ensure_unique(username=None, email=None, exclude_id=None):
    conds = []
    if username:
        conds.append(User.username == username)
    if email:
        conds.append(func.lower(User.email) == email.lower())
    if not conds:
        return
    stmt = select(User.id).where(or_(*conds))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    if db.session.execute(stmt.limit(1)).first() is not None:
        raise ProcedureError("CONFLICT", CONFLICT_MESSAGE)


def _commit_user(user: User, failure: str):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ProcedureError("CONFLICT", CONFLICT_MESSAGE)
    except Exception:
        db.session.rollback()
        current_app.logger.exception(failure, extra={"event": "user_write_failed"})
        raise ProcedureError("INTERNAL_SERVER_ERROR", failure)
    return user


def _guard_tenant_admin(actor, *roles):
    """Only a TENANT_ADMIN may create, modify or delete TENANT_ADMIN users."""
    if ROLE_TENANT_ADMIN in roles and actor.role != ROLE_TENANT_ADMIN:
        raise ProcedureError("FORBIDDEN", "Only TENANT_ADMIN can manage TENANT_ADMIN users")


def _new_user(username, email, password, name, role, image=None) -> User:
    ensure_unique(username, email)
    user = User(username=username, email=email.lower(), name=name, image=image, role=role)
    user.set_password(password)
    db.session.add(user)
    return _commit_user(user, "Failed to create user")


def _get_or_404(user_id: int, message="User not found") -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise ProcedureError("NOT_FOUND", message)
    return user


def register(payload: RegisterIn) -> dict:
    if not captcha.verify(payload.captcha_token):
        raise ProcedureError("BAD_REQUEST", "Captcha verification failed")
    user = _new_user(payload.username, payload.email, payload.password, payload.name, ROLE_MEMBER, payload.image)
    current_app.logger.info("user registered", extra={"event": "user_registered", "user_id": user.id})
    return {"success": True, "user": UserOut.model_validate(user).dump()}


def authenticate(payload: LoginIn) -> User:
    user = db.session.execute(select(User).where(User.username == payload.username)).scalar_one_or_none()
    if user is None or not user.is_active or not user.check_password(payload.password):
        current_app.logger.info("login failed", extra={"event": "login_failed"})
        raise ProcedureError("UNAUTHORIZED", "Invalid username or password")
    return user


def list_admins() -> list[dict]:
    rows = db.session.execute(select(User).where(User.role == ROLE_ADMIN).order_by(User.joined.desc())).scalars()
    return [UserOut.model_validate(u).dump() for u in rows]


def create_admin(payload: CreateAdminIn) -> dict:
    user = _new_user(payload.username, payload.email, payload.password, payload.name, ROLE_ADMIN)
    current_app.logger.info("admin created", extra={"event": "admin_created", "user_id": user.id})
    return {"success": True, "user": UserOut.model_validate(user).dump()}


def _unlink_authored_posts(user) -> None:
    # Related links held by other posts; the ORM cascade only covers the user's own posts
    authored = select(Post.id).where(Post.created_by_id == user.id)
    db.session.execute(delete(RelatedPost).where(RelatedPost.related_post_id.in_(authored)))


def remove_admin(user_id: int) -> dict:
    user = db.session.get(User, user_id)
    if user is None or user.role != ROLE_ADMIN:
        raise ProcedureError("NOT_FOUND", "Admin not found")
    _unlink_authored_posts(user)
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("admin removed", extra={"event": "admin_removed", "user_id": user_id})
    return {"success": True}


def list_users(params: UserPageIn) -> dict:
    stmt = select(User).order_by(User.joined.desc(), User.id.desc())
    stmt = stmt.offset((params.page - 1) * params.limit).limit(params.limit)
    count = db.session.execute(select(func.count()).select_from(User)).scalar_one()
    return {
        "items": [UserOut.model_validate(u).dump() for u in db.session.execute(stmt).scalars()],
        "totalPages": total_pages(count, params.limit),
        "currentPage": params.page,
    }


def create_user(payload: CreateUserIn, actor) -> dict:
    _guard_tenant_admin(actor, payload.role)
    user = _new_user(payload.username, payload.email, payload.password, payload.name, payload.role)
    current_app.logger.info("user created", extra={"event": "user_created", "user_id": user.id, "role": user.role})
    return UserOut.model_validate(user).dump()


def update_user(payload: UpdateUserIn, actor) -> dict:
    user = _get_or_404(payload.id)
    _guard_tenant_admin(actor, user.role, payload.role)
    ensure_unique(payload.username, payload.email, exclude_id=user.id)

    changes = payload.model_dump(exclude={"id"}, exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
    for field, value in changes.items():
        setattr(user, field, value)
    _commit_user(user, "Failed to update user")
    return UserOut.model_validate(user).dump()


def delete_user(user_id: int, actor) -> dict:
    actor_id = actor.id
    if user_id == actor_id:
        raise ProcedureError("FORBIDDEN", "You cannot delete your own account")
    user = _get_or_404(user_id)
    _guard_tenant_admin(actor, user.role)
    try:
        _unlink_authored_posts(user)
        db.session.delete(user)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("user delete failed", extra={"event": "user_delete_failed", "user_id": user_id})
        raise ProcedureError("INTERNAL_SERVER_ERROR", "Failed to delete user")
    current_app.logger.info("user deleted", extra={"event": "user_deleted", "user_id": user_id, "actor_id": actor_id})
    return {"success": True}
