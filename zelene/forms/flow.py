"""
Captcha-gated form flow.

The challenge is requested on the first submit attempt. Once satisfied, the
token stays valid only while the tracked field values match the snapshot
taken when the challenge was completed; any change to them, or a failed
submission, puts the form back to CHALLENGE_REQUIRED.
"""

from typing import Any, Iterable, Mapping, Optional

from zelene.errors import ProcedureError

EDITING = "EDITING"
CHALLENGE_REQUIRED = "CHALLENGE_REQUIRED"
CHALLENGE_SATISFIED = "CHALLENGE_SATISFIED"
SUBMITTING = "SUBMITTING"
STATES = (EDITING, CHALLENGE_REQUIRED, CHALLENGE_SATISFIED, SUBMITTING)

SUBMIT = "submit"
CHALLENGE_COMPLETED = "challenge_completed"
FIELD_CHANGED = "field_changed"
SUBMISSION_FAILED = "submission_failed"
SUBMISSION_SUCCEEDED = "submission_succeeded"

TRANSITIONS = {
    (EDITING, SUBMIT): CHALLENGE_REQUIRED,
    (EDITING, FIELD_CHANGED): EDITING,
    (CHALLENGE_REQUIRED, SUBMIT): CHALLENGE_REQUIRED,
    (CHALLENGE_REQUIRED, CHALLENGE_COMPLETED): CHALLENGE_SATISFIED,
    (CHALLENGE_REQUIRED, FIELD_CHANGED): CHALLENGE_REQUIRED,
    (CHALLENGE_SATISFIED, SUBMIT): SUBMITTING,
    (CHALLENGE_SATISFIED, CHALLENGE_COMPLETED): CHALLENGE_SATISFIED,
    (CHALLENGE_SATISFIED, FIELD_CHANGED): CHALLENGE_REQUIRED,
    (SUBMITTING, SUBMISSION_FAILED): CHALLENGE_REQUIRED,
    (SUBMITTING, SUBMISSION_SUCCEEDED): EDITING,
}


class FlowError(ProcedureError):
    def __init__(self, state: str, event: str):
        super().__init__("BAD_REQUEST", f"'{event}' is not allowed while the form is {state}")
        self.state = state
        self.event = event


class ChallengeFormFlow:
    def __init__(self, tracked_fields: Iterable[str], state: str = EDITING,
                 token: Optional[str] = None, snapshot: Optional[Mapping[str, Any]] = None):
        if state not in STATES:
            raise ValueError(f"Unknown form state: {state}")
        self.tracked_fields = tuple(tracked_fields)
        self.state = state
        self.token = token
        self.snapshot = dict(snapshot or {})

    def _tracked(self, values: Mapping[str, Any]) -> dict:
        return {k: values.get(k) for k in self.tracked_fields}

    def _move(self, event: str) -> str:
        target = TRANSITIONS.get((self.state, event))
        if target is None:
            raise FlowError(self.state, event)
        self.state = target
        return target

    def can(self, event: str) -> bool:
        return (self.state, event) in TRANSITIONS

    @property
    def challenge_token(self) -> Optional[str]:
        return self.token if self.state in (CHALLENGE_SATISFIED, SUBMITTING) else None

    def submit(self) -> str:
        return self._move(SUBMIT)

    def challenge_completed(self, token: str, values: Mapping[str, Any]) -> str:
        if not token:
            raise ProcedureError("BAD_REQUEST", "Please complete the captcha")
        self._move(CHALLENGE_COMPLETED)
        self.token = token
        self.snapshot = self._tracked(values)
        return self.state

    def field_changed(self, values: Mapping[str, Any]) -> str:
        if self.state == CHALLENGE_SATISFIED and self._tracked(values) == self.snapshot:
            return self.state
        self._move(FIELD_CHANGED)
        if self.state == CHALLENGE_REQUIRED:
            self._reset_challenge()
        return self.state

    def submission_failed(self) -> str:
        self._move(SUBMISSION_FAILED)
        self._reset_challenge()
        return self.state

    def submission_succeeded(self) -> str:
        self._move(SUBMISSION_SUCCEEDED)
        self._reset_challenge()
        return self.state

    def _reset_challenge(self):
        self.token = None
        self.snapshot = {}

    def to_dict(self) -> dict:
        return {"state": self.state, "token": self.token, "snapshot": self.snapshot}

    @classmethod
    def from_dict(cls, tracked_fields: Iterable[str], data: Optional[Mapping[str, Any]]):
        data = data or {}
        return cls(
            tracked_fields,
            state=data.get("state", EDITING),
            token=data.get("token"),
            snapshot=data.get("snapshot"),
        )
