from flask_login import current_user

from zelene.schemas.profile import ProfileIdIn, UpdateProfileIn
from zelene.services import profiles
from zelene.services.policy import login_required
from zelene.services.rpc import parse_input, respond

from . import profile_bp as bp


@bp.route("/getProfile", methods=("GET", "POST"))
def get_profile():
    return respond(profiles.get_profile(parse_input(ProfileIdIn).user_id))


@bp.route("/getCurrentProfile", methods=("GET", "POST"))
@login_required
def get_current_profile():
    return respond(profiles.get_profile(current_user.id))


@bp.post("/updateProfile")
@login_required
def update_profile():
    payload = parse_input(UpdateProfileIn)
    return respond(profiles.update_profile(current_user._get_current_object(), payload))
