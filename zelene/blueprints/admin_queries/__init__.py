from flask import Blueprint

view_bp = Blueprint("admin_query_view", __name__, url_prefix="/rpc/adminQueryView")
mutations_bp = Blueprint("admin_query_mutations", __name__, url_prefix="/rpc/adminQueryMutations")

from . import routes  # noqa: E402,F401
