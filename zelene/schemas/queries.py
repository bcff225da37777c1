"""Public query submission schemas."""

import base64
import binascii
from typing import Literal, Optional

from pydantic import EmailStr, Field, field_validator

from .base import CamelModel, QueryStatus

InquiryType = Literal["PARTNERSHIP", "SALES", "MEDIA", "GENERAL"]
FeedbackCategory = Literal["UI", "FEATURES", "PERFORMANCE", "DOCUMENTATION", "GENERAL"]
IssueType = Literal["DEVICE", "PLATFORM", "CONNECTIVITY", "SECURITY", "OTHER"]
IssueSeverity = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
SupportCategory = Literal["ACCOUNT", "DEVICES", "PLATFORM", "OTHER"]
SupportPriority = Literal["LOW", "MEDIUM", "HIGH"]

MAX_ATTACHMENTS = 5
MAX_ATTACHMENT_BYTES = 5 * 1024 * 1024
ALLOWED_ATTACHMENT_TYPES = ("image/jpeg", "image/png", "image/gif", "application/pdf")


class _Submission(CamelModel):
    # Accepted for compatibility with older clients; the server always stores NEW
    status: Optional[QueryStatus] = "NEW"
    captcha_token: Optional[str] = None

    @field_validator("email", mode="before", check_fields=False)
    @classmethod
    def _blank_email(cls, v):
        return v or None


class ContactQueryIn(_Submission):
    name: str = Field(..., min_length=1, max_length=255)
    organization: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=64)
    inquiry_type: InquiryType
    message: str = Field(..., min_length=10)


class FeedbackIn(_Submission):
    category: FeedbackCategory
    satisfaction: int = Field(..., ge=0, le=5)
    usability: int = Field(..., ge=0, le=5)
    features: list[str] = Field(default_factory=list)
    improvements: str = Field(..., min_length=10)
    recommendation: bool
    comments: Optional[str] = None
    email: Optional[EmailStr] = None


class SupportRequestIn(_Submission):
    category: SupportCategory
    subject: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=10)
    priority: SupportPriority
    email: Optional[EmailStr] = None


class FileUpload(CamelModel):
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str
    size: int = Field(..., ge=0, le=MAX_ATTACHMENT_BYTES)
    base64_data: str = Field(..., min_length=1)

    @field_validator("content_type")
    @classmethod
    def _allowed_type(cls, v: str) -> str:
        v = v.lower()
        if v not in ALLOWED_ATTACHMENT_TYPES:
            raise ValueError("Only JPG, PNG, GIF and PDF files are accepted")
        return v

    def decode(self) -> bytes:
        """Decoded payload; ValueError when it is not base64 or exceeds the size limit."""
        data = self.base64_data
        if data.startswith("data:") and "," in data:
            data = data.split(",", 1)[1]
        try:
            raw = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Attachment {self.filename} is not valid base64") from e
        if len(raw) > MAX_ATTACHMENT_BYTES:
            raise ValueError(f"Attachment {self.filename} exceeds 5MB")
        return raw


class TechnicalIssueIn(_Submission):
    device_id: Optional[str] = Field(None, max_length=255)
    issue_type: IssueType
    severity: IssueSeverity
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=10)
    steps_to_reproduce: str = Field(..., min_length=10)
    expected_behavior: str = Field(..., min_length=10)
    email: Optional[EmailStr] = None
    attachments: list[FileUpload] = Field(default_factory=list, max_length=MAX_ATTACHMENTS)

    @field_validator("device_id", mode="before")
    @classmethod
    def _blank_device(cls, v):
        return v or None

    @field_validator("attachments", mode="before")
    @classmethod
    def _none_attachments(cls, v):
        return v or []


class QueryIdIn(CamelModel):
    id: str = Field(..., min_length=1)
