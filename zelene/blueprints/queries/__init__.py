from flask import Blueprint

bp = Blueprint("queries", __name__, url_prefix="/rpc/queries")
lookup_bp = Blueprint("query_lookup", __name__, url_prefix="/rpc/queryLookup")

from . import routes  # noqa: E402,F401
