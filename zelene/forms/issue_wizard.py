"""Three-step technical issue report held in the Flask session until submitted."""

from typing import Optional

from flask import session
from pydantic import EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from zelene.errors import ProcedureError
from zelene.schemas.base import CamelModel
from zelene.schemas.queries import FileUpload, IssueSeverity, IssueType, MAX_ATTACHMENTS, TechnicalIssueIn

from .flow import SUBMITTING, ChallengeFormFlow

SESSION_KEY = "issue_wizard"


class IssueDetailsStep(CamelModel):
    device_id: Optional[str] = Field(None, max_length=255)
    issue_type: IssueType
    severity: IssueSeverity
    title: str = Field(..., min_length=1, max_length=255)

    @field_validator("device_id", mode="before")
    @classmethod
    def _blank(cls, v):
        return v or None


class IssueDescriptionStep(CamelModel):
    description: str = Field(..., min_length=10)
    steps_to_reproduce: str = Field(..., min_length=10)
    expected_behavior: str = Field(..., min_length=10)


class IssueContactStep(CamelModel):
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank(cls, v):
        return v or None


class IssueSubmitIn(CamelModel):
    attachments: list[FileUpload] = Field(default_factory=list, max_length=MAX_ATTACHMENTS)


STEPS = (
    ("details", "Issue Details", IssueDetailsStep),
    ("description", "Description", IssueDescriptionStep),
    ("contact", "Contact", IssueContactStep),
)
TRACKED_FIELDS = tuple(name for _, _, schema in STEPS for name in schema.model_fields)


class IssueWizard:
    def __init__(self, current_step: int = 0, draft: Optional[dict] = None, flow: Optional[ChallengeFormFlow] = None):
        self.current_step = current_step
        self.draft = dict(draft or {})
        self.flow = flow or ChallengeFormFlow(TRACKED_FIELDS)

    @property
    def last_step(self) -> int:
        return len(STEPS) - 1

    @classmethod
    def load(cls) -> "IssueWizard":
        data = session.get(SESSION_KEY) or {}
        return cls(
            current_step=data.get("currentStep", 0),
            draft=data.get("draft"),
            flow=ChallengeFormFlow.from_dict(TRACKED_FIELDS, data.get("flow")),
        )

    def save(self) -> None:
        session[SESSION_KEY] = {
            "currentStep": self.current_step,
            "draft": self.draft,
            "flow": self.flow.to_dict(),
        }

    @staticmethod
    def clear() -> None:
        session.pop(SESSION_KEY, None)

    def state(self) -> dict:
        return {
            "currentStep": self.current_step,
            "steps": [{"key": key, "title": title} for key, title, _ in STEPS],
            "draft": {to_camel(k): v for k, v in self.draft.items()},
            "formState": self.flow.state,
        }

    def save_step(self, index: int, data: dict) -> None:
        """Validate one step and move past it. Steps cannot be skipped."""
        if index < 0 or index > self.last_step:
            raise ProcedureError("NOT_FOUND", "Unknown step")
        if index > self.current_step:
            raise ProcedureError("BAD_REQUEST", "Complete the previous steps first")

        _, _, schema = STEPS[index]
        values = schema.model_validate(data).model_dump(mode="json")
        self.draft.update(values)
        self.flow.field_changed(self.draft)
        if index == self.current_step and index < self.last_step:
            self.current_step += 1

    def back(self) -> None:
        if self.current_step > 0:
            self.current_step -= 1

    def complete_challenge(self, token: str) -> None:
        self.flow.challenge_completed(token, self.draft)

    def begin_submit(self) -> bool:
        """True when the submission may proceed; False when a challenge is required first."""
        if self.current_step != self.last_step:
            raise ProcedureError("BAD_REQUEST", "Complete every step before submitting")
        return self.flow.submit() == SUBMITTING

    def build_payload(self, extra: IssueSubmitIn) -> TechnicalIssueIn:
        # Revalidate the whole draft; a tampered session must not bypass field rules
        return TechnicalIssueIn.model_validate({
            **self.draft,
            "attachments": extra.attachments,
            "captcha_token": self.flow.challenge_token,
        })
