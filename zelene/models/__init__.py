from .user import User, Profile, Social, ROLE_MEMBER, ROLE_ADMIN, ROLE_TENANT_ADMIN, ADMIN_ROLES
from .query import (
    ContactQuery,
    Feedback,
    SupportRequest,
    TechnicalIssue,
    QUERY_MODELS,
    QUERY_STATUSES,
    OPEN_STATUSES,
)
from .post import Post, Tag, RelatedPost, tags_on_posts
from .email_log import EmailLog

__all__ = [
    "User", "Profile", "Social",
    "ROLE_MEMBER", "ROLE_ADMIN", "ROLE_TENANT_ADMIN", "ADMIN_ROLES",
    "ContactQuery", "Feedback", "SupportRequest", "TechnicalIssue",
    "QUERY_MODELS", "QUERY_STATUSES", "OPEN_STATUSES",
    "Post", "Tag", "RelatedPost", "tags_on_posts",
    "EmailLog",
]
