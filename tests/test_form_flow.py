import pytest

from zelene.errors import ProcedureError
from zelene.forms.flow import (
    CHALLENGE_REQUIRED,
    CHALLENGE_SATISFIED,
    EDITING,
    SUBMITTING,
    ChallengeFormFlow,
    FlowError,
)


def _satisfied(values=None):
    flow = ChallengeFormFlow(("title", "email"))
    flow.submit()
    flow.challenge_completed("tok", values or {"title": "a", "email": "x@example.com"})
    return flow


def test_first_submit_asks_for_challenge():
    flow = ChallengeFormFlow(("title",))
    assert flow.state == EDITING
    assert flow.submit() == CHALLENGE_REQUIRED
    assert flow.challenge_token is None


def test_challenge_then_submit():
    flow = _satisfied()
    assert flow.state == CHALLENGE_SATISFIED
    assert flow.challenge_token == "tok"
    assert flow.submit() == SUBMITTING
    assert flow.challenge_token == "tok"


def test_unchanged_tracked_values_keep_challenge():
    flow = _satisfied({"title": "a", "email": "x@example.com"})
    assert flow.field_changed({"title": "a", "email": "x@example.com", "other": 1}) == CHALLENGE_SATISFIED
    assert flow.challenge_token == "tok"


def test_changed_tracked_value_resets_challenge():
    flow = _satisfied()
    assert flow.field_changed({"title": "b", "email": "x@example.com"}) == CHALLENGE_REQUIRED
    assert flow.token is None
    assert flow.snapshot == {}


def test_failed_submission_requires_new_challenge():
    flow = _satisfied()
    flow.submit()
    assert flow.submission_failed() == CHALLENGE_REQUIRED
    assert flow.challenge_token is None


def test_successful_submission_returns_to_editing():
    flow = _satisfied()
    flow.submit()
    assert flow.submission_succeeded() == EDITING
    assert flow.token is None


def test_empty_token_is_rejected():
    flow = ChallengeFormFlow(("title",))
    flow.submit()
    with pytest.raises(ProcedureError) as exc:
        flow.challenge_completed("", {})
    assert exc.value.code == "BAD_REQUEST"
    assert flow.state == CHALLENGE_REQUIRED


def test_illegal_events_raise_flow_error():
    flow = ChallengeFormFlow(("title",))
    assert not flow.can("challenge_completed")
    with pytest.raises(FlowError) as exc:
        flow.challenge_completed("tok", {})
    assert exc.value.status == 400
    with pytest.raises(FlowError):
        flow.submission_succeeded()


def test_round_trips_through_session_dict():
    flow = _satisfied()
    restored = ChallengeFormFlow.from_dict(("title", "email"), flow.to_dict())
    assert restored.state == CHALLENGE_SATISFIED
    assert restored.challenge_token == "tok"
    assert ChallengeFormFlow.from_dict(("title",), None).state == EDITING
    with pytest.raises(ValueError):
        ChallengeFormFlow(("title",), state="BOGUS")
