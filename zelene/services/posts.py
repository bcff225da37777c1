from flask import current_app
from sqlalchemy import delete, select, update

from zelene.errors import ProcedureError
from zelene.extensions import db
from zelene.models import Post, RelatedPost, Tag
from zelene.schemas.post import PostCreateIn, PostDetailOut, PostListIn, PostOut, PostUpdateIn
from zelene.services.pagination import cursor_page
from zelene.services.policy import is_admin
from zelene.services.tags import upsert_tags
from zelene.utils.helpers import utcnow

# Official first, then priority, then recency; id breaks ties
POST_ORDER = (
    (Post.is_official, "is_official", True),
    (Post.priority, "priority", True),
    (Post.published_at, "published_at", True),
    (Post.id, "id", True),
)


def derive_official(post: Post) -> bool:
    post.is_official = any(t.is_official for t in post.tags)
    return post.is_official


def _get_or_404(post_id: int) -> Post:
    post = db.session.get(Post, post_id)
    if post is None:
        raise ProcedureError("NOT_FOUND", "Post not found")
    return post


def _ensure_owner_or_admin(post: Post, user, action: str):
    if post.created_by_id != user.id and not is_admin(user):
        raise ProcedureError("FORBIDDEN", f"Not authorized to {action} this post")


def _related(ids, exclude_id=None) -> list[Post]:
    ids = [i for i in dict.fromkeys(ids or []) if i != exclude_id]
    if not ids:
        return []
    found = {p.id: p for p in db.session.execute(select(Post).where(Post.id.in_(ids))).scalars()}
    missing = [i for i in ids if i not in found]
    if missing:
        raise ProcedureError("NOT_FOUND", f"Related post(s) not found: {', '.join(map(str, missing))}")
    return [found[i] for i in ids]


def _check_priority(priority, user):
    if priority is not None and not is_admin(user):
        raise ProcedureError("FORBIDDEN", "Only administrators can set post priority")


def create_post(payload: PostCreateIn, user) -> dict:
    _check_priority(payload.priority, user)
    try:
        post = Post(
            title=payload.title,
            excerpt=payload.excerpt,
            content=payload.content,
            priority=payload.priority or 0,
            created_by_id=user.id,
            published_at=utcnow(),
        )
        post.tags = upsert_tags(payload.tags, user)
        derive_official(post)
        post.related_links = [RelatedPost(related_post=p) for p in _related(payload.related_posts)]
        db.session.add(post)
        db.session.commit()
    except ProcedureError:
        db.session.rollback()
        raise

    current_app.logger.info(
        "post created",
        extra={"event": "post_created", "post_id": post.id, "user_id": user.id, "official": post.is_official},
    )
    return PostDetailOut.model_validate(post).dump()


def get_post(post_id: int) -> dict:
    post = _get_or_404(post_id)
    db.session.execute(update(Post).where(Post.id == post.id).values(view_count=Post.view_count + 1))
    db.session.commit()
    db.session.refresh(post)
    return PostDetailOut.model_validate(post).dump()


def list_posts(params: PostListIn) -> dict:
    stmt = select(Post)
    if params.tags:
        stmt = stmt.where(Post.tags.any(Tag.id.in_(params.tags)))
    rows, next_cursor = cursor_page(Post, stmt, POST_ORDER, limit=params.limit, cursor=params.cursor)
    return {
        "items": [PostOut.model_validate(p).dump() for p in rows],
        "nextCursor": next_cursor,
    }


def update_post(payload: PostUpdateIn, user) -> dict:
    post = _get_or_404(payload.id)
    _ensure_owner_or_admin(post, user, "update")
    _check_priority(payload.priority, user)

    try:
        for field in ("title", "excerpt", "content", "priority"):
            value = getattr(payload, field)
            if value is not None:
                setattr(post, field, value)
        if payload.tags is not None:
            post.tags = upsert_tags(payload.tags, user)
        if payload.related_posts is not None:
            post.related_links = [RelatedPost(related_post=p) for p in _related(payload.related_posts, exclude_id=post.id)]
        derive_official(post)
        db.session.commit()
    except ProcedureError:
        db.session.rollback()
        raise

    return PostDetailOut.model_validate(post).dump()


def delete_post(post_id: int, user) -> dict:
    post = _get_or_404(post_id)
    _ensure_owner_or_admin(post, user, "delete")

    # Links pointing at this post from other posts
    db.session.execute(delete(RelatedPost).where(RelatedPost.related_post_id == post.id))
    db.session.delete(post)
    db.session.commit()
    current_app.logger.info("post deleted", extra={"event": "post_deleted", "post_id": post_id, "user_id": user.id})
    return {"success": True}
