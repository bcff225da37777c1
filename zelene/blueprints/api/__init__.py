from flask import Blueprint

# Plain REST endpoints; paths are absolute (/api/..., /attachments/...)
bp = Blueprint("api", __name__)

from . import attachments, health, user_stats  # noqa: E402,F401
