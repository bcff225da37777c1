import uuid

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import declared_attr
from zelene.extensions import db
from zelene.utils.helpers import utcnow

STATUS_NEW = "NEW"
STATUS_IN_PROGRESS = "IN_PROGRESS"
STATUS_RESOLVED = "RESOLVED"
STATUS_CANCELLED = "CANCELLED"
QUERY_STATUSES = (STATUS_NEW, STATUS_IN_PROGRESS, STATUS_RESOLVED, STATUS_CANCELLED)
OPEN_STATUSES = (STATUS_NEW, STATUS_IN_PROGRESS)

SUPPORT_PRIORITIES = ("LOW", "MEDIUM", "HIGH")
ISSUE_SEVERITIES = ("LOW", "MEDIUM", "HIGH", "CRITICAL")


def _new_id() -> str:
    return str(uuid.uuid4())


def _in_check(column: str, values) -> str:
    return f"{column} IN ({','.join(repr(v) for v in values)})"


class QueryMixin:
    """Columns shared by every submitted query: id, lifecycle status, admin response, timestamps."""

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    status = db.Column(db.String(20), nullable=False, default=STATUS_NEW, server_default=STATUS_NEW, index=True)
    response = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Subclasses set these for notifications and lookup
    kind = ""
    label = ""

    @declared_attr
    def __table_args__(cls):
        return (
            CheckConstraint(_in_check("status", QUERY_STATUSES), name=f"ck_{cls.__tablename__}_status_valid"),
        )

    @property
    def recipient(self) -> str | None:
        return getattr(self, "email", None) or None

    @property
    def recipient_name(self) -> str:
        return getattr(self, "name", None) or "Zelene user"


class ContactQuery(QueryMixin, db.Model):
    __tablename__ = "contact_queries"
    kind = "contact"
    label = "Contact Query"

    name = db.Column(db.String(255), nullable=False)
    organization = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(320), nullable=False)
    phone = db.Column(db.String(64), nullable=False)
    inquiry_type = db.Column(db.String(20), nullable=False)
    message = db.Column(db.Text, nullable=False)


class Feedback(QueryMixin, db.Model):
    __tablename__ = "feedback"
    kind = "feedback"
    label = "Feedback"

    category = db.Column(db.String(20), nullable=False)
    satisfaction = db.Column(db.Integer, nullable=False)
    usability = db.Column(db.Integer, nullable=False)
    features = db.Column(db.JSON, nullable=False, default=list)
    improvements = db.Column(db.Text, nullable=False)
    recommendation = db.Column(db.Boolean, nullable=False)
    comments = db.Column(db.Text, nullable=True)
    email = db.Column(db.String(320), nullable=True)


class SupportRequest(QueryMixin, db.Model):
    __tablename__ = "support_requests"
    kind = "support"
    label = "Support Request"

    category = db.Column(db.String(20), nullable=False)
    subject = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    priority = db.Column(db.String(10), nullable=False)
    email = db.Column(db.String(320), nullable=True)


class TechnicalIssue(QueryMixin, db.Model):
    __tablename__ = "technical_issues"
    kind = "technical"
    label = "Technical Issue"

    device_id = db.Column(db.String(255), nullable=True)
    issue_type = db.Column(db.String(20), nullable=False)
    severity = db.Column(db.String(10), nullable=False)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    steps_to_reproduce = db.Column(db.Text, nullable=False)
    expected_behavior = db.Column(db.Text, nullable=False)
    attachments = db.Column(db.JSON, nullable=False, default=list)
    email = db.Column(db.String(320), nullable=True)


# Lookup order for queryLookup.getQueryById
QUERY_MODELS = (ContactQuery, Feedback, SupportRequest, TechnicalIssue)
