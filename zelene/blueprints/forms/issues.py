"""
Server side of the multi-step issue report. The draft lives in the session;
attachments only travel with the final submit.
"""

from flask import current_app
from pydantic import Field, ValidationError

from zelene.errors import ProcedureError
from zelene.extensions import limiter
from zelene.forms.issue_wizard import IssueSubmitIn, IssueWizard
from zelene.schemas.base import CamelModel
from zelene.services import submissions
from zelene.services.rpc import parse_input, raw_input, respond

from . import bp


class ChallengeIn(CamelModel):
    captcha_token: str = Field(..., min_length=1)


def _state(wizard: IssueWizard, **extra):
    wizard.save()
    return respond({**wizard.state(), **extra})


@bp.get("/issues")
def issue_state():
    return respond(IssueWizard.load().state())


@bp.post("/issues/steps/<int:index>")
def issue_step(index: int):
    wizard = IssueWizard.load()
    wizard.save_step(index, raw_input())
    return _state(wizard)


@bp.post("/issues/back")
def issue_back():
    wizard = IssueWizard.load()
    wizard.back()
    return _state(wizard)


@bp.post("/issues/challenge")
def issue_challenge():
    wizard = IssueWizard.load()
    wizard.complete_challenge(parse_input(ChallengeIn).captcha_token)
    return _state(wizard)


@bp.post("/issues/submit")
@limiter.limit(lambda: current_app.config["QUERY_SUBMIT_RATE_LIMIT"])
def issue_submit():
    wizard = IssueWizard.load()
    extra = parse_input(IssueSubmitIn)
    if not wizard.begin_submit():
        return _state(wizard, challengeRequired=True)

    try:
        result = submissions.submit_technical_issue(wizard.build_payload(extra))
    except (ProcedureError, ValidationError):
        wizard.flow.submission_failed()
        wizard.save()
        raise

    wizard.flow.submission_succeeded()
    IssueWizard.clear()
    return respond(result)


@bp.post("/issues/reset")
def issue_reset():
    IssueWizard.clear()
    return respond(IssueWizard().state())
