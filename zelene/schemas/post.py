from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel
from .tag import TagOut, normalize_tag_name


class PostCreateIn(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    excerpt: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    tags: Optional[list[str]] = None
    related_posts: Optional[list[int]] = None
    priority: Optional[int] = Field(None, ge=0)

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, v):
        if v is None:
            return v
        # dedup, keep first-seen order
        return list(dict.fromkeys(normalize_tag_name(name) for name in v))


class PostUpdateIn(PostCreateIn):
    id: int
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    excerpt: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)


class PostIdIn(CamelModel):
    id: int


class PostListIn(CamelModel):
    limit: int = Field(10, ge=1, le=100)
    cursor: Optional[int] = None
    tags: Optional[list[int]] = None


class AuthorOut(CamelModel):
    id: int
    name: Optional[str] = None
    username: str
    image: Optional[str] = None


class PostSummaryOut(CamelModel):
    id: int
    title: str
    excerpt: str
    is_official: bool


class PostOut(CamelModel):
    id: int
    title: str
    excerpt: str
    content: str
    view_count: int
    like_count: int
    comment_count: int
    is_official: bool
    priority: int
    published_at: datetime
    created_at: datetime
    updated_at: datetime
    created_by: AuthorOut
    tags: list[TagOut]


class PostDetailOut(PostOut):
    related_posts: list[PostSummaryOut]
