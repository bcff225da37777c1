from flask_login import current_user

from zelene.schemas.post import PostCreateIn, PostIdIn, PostListIn, PostUpdateIn
from zelene.services import posts
from zelene.services.policy import login_required
from zelene.services.rpc import parse_input, respond

from . import post_bp as bp

QUERY = ("GET", "POST")


def _user():
    return current_user._get_current_object()


@bp.post("/create")
@login_required
def create():
    return respond(posts.create_post(parse_input(PostCreateIn), _user()), 201)


@bp.route("/getById", methods=QUERY)
def get_by_id():
    return respond(posts.get_post(parse_input(PostIdIn).id))


@bp.route("/getAll", methods=QUERY)
def get_all():
    return respond(posts.list_posts(parse_input(PostListIn)))


@bp.post("/update")
@login_required
def update():
    return respond(posts.update_post(parse_input(PostUpdateIn), _user()))


@bp.post("/delete")
@login_required
def delete():
    return respond(posts.delete_post(parse_input(PostIdIn).id, _user()))
