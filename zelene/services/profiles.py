from sqlalchemy.exc import IntegrityError

from zelene.errors import ProcedureError
from zelene.extensions import db
from zelene.models import Profile, Social, User
from zelene.schemas.profile import UpdateProfileIn, UserProfileOut
from zelene.services.users import ensure_unique


def get_profile(user_id: int) -> dict:
    user = db.session.get(User, user_id)
    if user is None:
        raise ProcedureError("NOT_FOUND", "User not found")
    return UserProfileOut.model_validate(user).dump()


def update_profile(user: User, payload: UpdateProfileIn) -> dict:
    """Update user fields and upsert Profile/Social in one commit. Only supplied fields change."""
    user_changes = payload.user.model_dump(exclude_unset=True, exclude_none=True)
    ensure_unique(user_changes.get("username"), user_changes.get("email"), exclude_id=user.id)
    if "email" in user_changes:
        user_changes["email"] = user_changes["email"].lower()
    for field, value in user_changes.items():
        setattr(user, field, value)

    profile_changes = payload.profile.model_dump(exclude_unset=True)
    if profile_changes:
        if user.profile is None:
            user.profile = Profile()
        for field, value in profile_changes.items():
            setattr(user.profile, field, value)

    social_changes = payload.social.model_dump(mode="json", exclude_unset=True)
    if social_changes:
        if user.social is None:
            user.social = Social()
        for field, value in social_changes.items():
            setattr(user.social, field, value)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ProcedureError("CONFLICT", "Username or email already exists")
    return UserProfileOut.model_validate(user).dump()
