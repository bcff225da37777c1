from flask_login import current_user

from zelene.schemas.users import CreateAdminIn, CreateUserIn, UpdateUserIn, UserIdIn, UserPageIn
from zelene.services import users
from zelene.services.policy import admin_required, tenant_admin_required
from zelene.services.rpc import parse_input, respond
from zelene.utils.helpers import utcnow

from . import admin_bp as bp

QUERY = ("GET", "POST")


@bp.route("/getAdminData", methods=QUERY)
@admin_required
def get_admin_data():
    return respond({"message": "You have access to the admin!", "timestamp": utcnow().isoformat()})


# ---- tenant admin: admin management ----

@bp.route("/listAdmins", methods=QUERY)
@tenant_admin_required
def list_admins():
    return respond(users.list_admins())


@bp.post("/createAdmin")
@tenant_admin_required
def create_admin():
    return respond(users.create_admin(parse_input(CreateAdminIn)), 201)


@bp.post("/removeAdmin")
@tenant_admin_required
def remove_admin():
    return respond(users.remove_admin(parse_input(UserIdIn).user_id))


# ---- admin: user management ----

@bp.route("/listUsers", methods=QUERY)
@admin_required
def list_users():
    return respond(users.list_users(parse_input(UserPageIn)))


@bp.post("/createUser")
@admin_required
def create_user():
    return respond(users.create_user(parse_input(CreateUserIn), current_user), 201)


@bp.post("/updateUser")
@admin_required
def update_user():
    return respond(users.update_user(parse_input(UpdateUserIn), current_user))


@bp.post("/deleteUser")
@admin_required
def delete_user():
    return respond(users.delete_user(parse_input(UserIdIn).user_id, current_user))
