import re
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel

_TAG_NAME_RE = re.compile(r"^[a-z0-9-]+$")


def normalize_tag_name(value: str) -> str:
    """Strip a leading '#', lowercase, and enforce the tag alphabet."""
    name = (value or "").strip()
    if name.startswith("#"):
        name = name[1:]
    name = name.lower()
    if not name:
        raise ValueError("Tag name is required")
    if len(name) > 50:
        raise ValueError("Tag name cannot exceed 50 characters")
    if not _TAG_NAME_RE.match(name):
        raise ValueError("Tags can only contain letters, numbers, and hyphens")
    return name


def looks_official(name: str) -> bool:
    return "official" in (name or "").lower()


class TagIn(CamelModel):
    name: str
    is_official: bool = False

    @field_validator("name")
    @classmethod
    def _normalize(cls, v: str) -> str:
        return normalize_tag_name(v)


class TagUpdateIn(TagIn):
    id: int


class TagIdIn(CamelModel):
    id: int


class TagListIn(CamelModel):
    query: Optional[str] = None
    is_official: Optional[bool] = None
    limit: int = Field(10, ge=1, le=100)
    cursor: Optional[int] = None


class TagSearchIn(CamelModel):
    query: str = Field(..., min_length=1)

    @field_validator("query")
    @classmethod
    def _strip_hash(cls, v: str) -> str:
        term = v.strip().lstrip("#").lower()
        if not term:
            raise ValueError("Search query must contain more than '#'")
        return term


class TagOut(CamelModel):
    id: int
    name: str
    is_official: bool


class TagWithCountOut(TagOut):
    post_count: int
