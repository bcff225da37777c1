from flask_login import current_user

from zelene.schemas.tag import TagIdIn, TagIn, TagListIn, TagSearchIn, TagUpdateIn
from zelene.services import tags
from zelene.services.policy import admin_required, login_required
from zelene.services.rpc import parse_input, respond

from . import tag_bp as bp

QUERY = ("GET", "POST")


@bp.post("/create")
@login_required
def create():
    return respond(tags.create_tag(parse_input(TagIn), current_user), 201)


@bp.route("/getAll", methods=QUERY)
def get_all():
    return respond(tags.list_tags(parse_input(TagListIn), current_user))


@bp.route("/search", methods=QUERY)
def search():
    return respond(tags.search_tags(parse_input(TagSearchIn), current_user))


@bp.route("/getById", methods=QUERY)
def get_by_id():
    return respond(tags.get_tag(parse_input(TagIdIn).id))


@bp.post("/update")
@admin_required
def update():
    return respond(tags.update_tag(parse_input(TagUpdateIn)))


@bp.post("/delete")
@admin_required
def delete():
    return respond(tags.delete_tag(parse_input(TagIdIn).id))
