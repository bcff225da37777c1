from flask import current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from zelene.errors import ProcedureError
from zelene.extensions import db
from zelene.models import Tag, tags_on_posts
from zelene.schemas.tag import TagIn, TagListIn, TagOut, TagSearchIn, TagUpdateIn, TagWithCountOut, looks_official
from zelene.services.pagination import cursor_page
from zelene.services.policy import is_admin

TAG_ORDER = (
    (Tag.is_official, "is_official", True),
    (Tag.name, "name", False),
    (Tag.id, "id", False),
)
SEARCH_LIMIT = 5


def _get_or_404(tag_id: int) -> Tag:
    tag = db.session.get(Tag, tag_id)
    if tag is None:
        raise ProcedureError("NOT_FOUND", "Tag not found")
    return tag


def _name_taken(name: str, exclude_id=None) -> bool:
    stmt = select(Tag.id).where(Tag.name == name)
    if exclude_id is not None:
        stmt = stmt.where(Tag.id != exclude_id)
    return db.session.execute(stmt.limit(1)).first() is not None


def _commit_or_conflict(message: str):
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ProcedureError("CONFLICT", message)


def create_tag(payload: TagIn, user) -> dict:
    official = payload.is_official or looks_official(payload.name)
    if official and not is_admin(user):
        raise ProcedureError("FORBIDDEN", "Only administrators can create official tags")
    if _name_taken(payload.name):
        raise ProcedureError("CONFLICT", "Tag already exists")

    tag = Tag(name=payload.name, is_official=official)
    db.session.add(tag)
    _commit_or_conflict("Tag already exists")
    current_app.logger.info("tag created", extra={"event": "tag_created", "tag_id": tag.id, "official": official})
    return TagOut.model_validate(tag).dump()


def _visible(stmt, user):
    if not is_admin(user):
        stmt = stmt.where(Tag.is_official.is_(False))
    return stmt


def list_tags(params: TagListIn, user) -> dict:
    stmt = _visible(select(Tag), user)
    if params.query:
        term = params.query.strip().lstrip("#").lower()
        stmt = stmt.where(Tag.name.contains(term, autoescape=True))
    if params.is_official is not None:
        stmt = stmt.where(Tag.is_official.is_(params.is_official))
    rows, next_cursor = cursor_page(Tag, stmt, TAG_ORDER, limit=params.limit, cursor=params.cursor)
    return {
        "items": [TagWithCountOut.model_validate(t).dump() for t in rows],
        "nextCursor": next_cursor,
    }


def search_tags(params: TagSearchIn, user) -> list[dict]:
    stmt = _visible(select(Tag).where(Tag.name.contains(params.query, autoescape=True)), user)
    stmt = stmt.order_by(Tag.is_official.desc(), Tag.name.asc()).limit(SEARCH_LIMIT)
    return [TagOut.model_validate(t).dump() for t in db.session.execute(stmt).scalars()]


def get_tag(tag_id: int) -> dict:
    return TagWithCountOut.model_validate(_get_or_404(tag_id)).dump()


def update_tag(payload: TagUpdateIn) -> dict:
    # Imported here: posts imports this module for tag upserts
    from zelene.services.posts import derive_official

    tag = _get_or_404(payload.id)
    if payload.name != tag.name and _name_taken(payload.name, exclude_id=tag.id):
        raise ProcedureError("CONFLICT", "Tag name already exists")

    tag.name = payload.name
    tag.is_official = payload.is_official or looks_official(payload.name)
    for post in tag.posts:
        derive_official(post)
    _commit_or_conflict("Tag name already exists")
    return TagOut.model_validate(tag).dump()


def delete_tag(tag_id: int) -> dict:
    tag = _get_or_404(tag_id)
    in_use = db.session.execute(
        select(tags_on_posts.c.post_id).where(tags_on_posts.c.tag_id == tag.id).limit(1)
    ).first()
    if in_use is not None:
        raise ProcedureError("FORBIDDEN", "Cannot delete tag that is in use")

    data = TagOut.model_validate(tag).dump()
    db.session.delete(tag)
    db.session.commit()
    current_app.logger.info("tag deleted", extra={"event": "tag_deleted", "tag_id": tag_id})
    return data


def upsert_tags(names, user) -> list[Tag]:
    """Existing tags by name, creating missing ones. Official tags need an admin."""
    if not names:
        return []
    existing = {t.name: t for t in db.session.execute(select(Tag).where(Tag.name.in_(names))).scalars()}
    admin = is_admin(user)
    tags = []
    for name in names:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name, is_official=looks_official(name))
            db.session.add(tag)
        if tag.is_official and not admin:
            raise ProcedureError("FORBIDDEN", f"Only administrators can use the official tag '{name}'")
        tags.append(tag)
    return tags
