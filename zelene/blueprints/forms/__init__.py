from flask import Blueprint

bp = Blueprint("forms", __name__, url_prefix="/forms")

from . import issues  # noqa: E402,F401
