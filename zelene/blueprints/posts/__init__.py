from flask import Blueprint

post_bp = Blueprint("post", __name__, url_prefix="/rpc/post")
tag_bp = Blueprint("tag", __name__, url_prefix="/rpc/tag")

from . import posts, tags  # noqa: E402,F401
