"""Admin query view/mutation schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel, QueryStatus
from .queries import FeedbackCategory, InquiryType, IssueSeverity, IssueType, SupportCategory, SupportPriority


class PaginationIn(CamelModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    status: Optional[QueryStatus] = None


class StatusFilterIn(CamelModel):
    status: Optional[QueryStatus] = None


class QueryResponseIn(CamelModel):
    id: str = Field(..., min_length=1)
    status: QueryStatus
    response: Optional[str] = None


class _QueryOut(CamelModel):
    id: str
    status: QueryStatus
    response: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ContactQueryOut(_QueryOut):
    name: str
    organization: str
    email: str
    phone: str
    inquiry_type: InquiryType
    message: str


class FeedbackOut(_QueryOut):
    category: FeedbackCategory
    satisfaction: int
    usability: int
    features: list[str]
    improvements: str
    recommendation: bool
    comments: Optional[str] = None
    email: Optional[str] = None


class SupportRequestOut(_QueryOut):
    category: SupportCategory
    subject: str
    description: str
    priority: SupportPriority
    email: Optional[str] = None


class TechnicalIssueOut(_QueryOut):
    device_id: Optional[str] = None
    issue_type: IssueType
    severity: IssueSeverity
    title: str
    description: str
    steps_to_reproduce: str
    expected_behavior: str
    attachments: list[str]
    email: Optional[str] = None


OUT_SCHEMAS = {
    "contact": ContactQueryOut,
    "feedback": FeedbackOut,
    "support": SupportRequestOut,
    "technical": TechnicalIssueOut,
}
